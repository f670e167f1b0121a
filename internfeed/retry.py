"""
Retry with exponential backoff for the upstream fetch.

GitHub occasionally answers with timeouts, dropped connections, rate
limits or 5xx pages. Those are worth a few quick retries inside one poll;
anything else should fail the fetch straight away.
"""

import functools
import time
from typing import Callable, Optional, Tuple, Type

import requests


class RetryError(Exception):
    """Raised when all retry attempts are exhausted."""
    pass


# Request Timeout, Too Many Requests, and the usual gateway/server errors
RETRYABLE_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504})


def should_retry_http_status(status_code: int) -> bool:
    return status_code in RETRYABLE_STATUS_CODES


def is_transient_request_error(exception: Exception) -> bool:
    """
    Decide whether a requests exception is worth retrying.

    Timeouts and connection errors always are; HTTP errors only when the
    status code is in RETRYABLE_STATUS_CODES.
    """
    if isinstance(exception, (requests.exceptions.Timeout, requests.exceptions.ConnectionError)):
        return True
    if isinstance(exception, requests.exceptions.HTTPError):
        response = exception.response
        return response is not None and should_retry_http_status(response.status_code)
    return False


def exponential_backoff(
    max_retries: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    exponential_base: float = 2.0,
    exceptions: Tuple[Type[Exception], ...] = (Exception,),
    retry_if: Optional[Callable[[Exception], bool]] = None,
    on_retry: Optional[Callable] = None,
):
    """
    Decorator for retrying functions with exponential backoff.

    Args:
        max_retries: Maximum number of retry attempts (0 = no retries)
        base_delay: Initial delay in seconds
        max_delay: Maximum delay between retries in seconds
        exponential_base: Multiplier applied to the delay after each attempt
        exceptions: Exception types that are candidates for a retry
        retry_if: Optional predicate; a caught exception for which it returns
            False is re-raised immediately without retrying
        on_retry: Optional callback function(attempt, exception, delay)

    Raises:
        RetryError: When every attempt failed with a retryable exception.
            The last exception is chained as the cause.
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            delay = base_delay

            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    if retry_if is not None and not retry_if(e):
                        raise

                    if attempt >= max_retries:
                        raise RetryError(
                            f"Failed after {max_retries + 1} attempts: {e}"
                        ) from e

                    current_delay = min(delay, max_delay)
                    if on_retry:
                        on_retry(attempt + 1, e, current_delay)
                    time.sleep(current_delay)
                    delay *= exponential_base

        return wrapper
    return decorator
