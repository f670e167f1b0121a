"""
Conditional fetch of the upstream internship README.

The fetcher remembers the ETag of the last document it downloaded and
sends it back as If-None-Match, so an unchanged README costs a 304 and no
body. The ETag lives on the fetcher instance; a restart only costs one full
download.
"""

from dataclasses import dataclass
from typing import Optional

import requests

from .env import DEFAULT_README_URL
from .errors import FetchError
from .logger import get_logger
from .retry import RetryError, exponential_backoff, is_transient_request_error

logger = get_logger()

RAW_ACCEPT = "application/vnd.github.v3.raw"


@dataclass(frozen=True)
class FetchResult:
    not_modified: bool
    body: str = ""
    etag: Optional[str] = None

    @classmethod
    def unchanged(cls) -> "FetchResult":
        return cls(not_modified=True)

    @classmethod
    def document(cls, body: str, etag: Optional[str] = None) -> "FetchResult":
        return cls(not_modified=False, body=body, etag=etag)


class ReadmeFetcher:
    """Fetches the README and tracks its ETag between calls."""

    def __init__(
        self,
        url: str = DEFAULT_README_URL,
        timeout: float = 20,
        token: Optional[str] = None,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        session: Optional[requests.Session] = None,
    ):
        self.url = url
        self.timeout = timeout
        self.token = token
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.session = session or requests.Session()
        self.etag: Optional[str] = None

    def _headers(self) -> dict:
        headers = {"Accept": RAW_ACCEPT}
        if self.etag:
            headers["If-None-Match"] = self.etag
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _get(self) -> requests.Response:
        resp = self.session.get(self.url, headers=self._headers(), timeout=self.timeout)
        if resp.status_code != 304:
            resp.raise_for_status()
        return resp

    def _on_retry(self, attempt: int, error: Exception, delay: float):
        logger.warning("README fetch failed, retrying", attempt=attempt, delay=delay, error=str(error))

    def fetch(self) -> FetchResult:
        """
        Fetch the README, conditionally on the stored ETag.

        Returns:
            FetchResult.unchanged() on 304, otherwise FetchResult.document()
            with the full body

        Raises:
            FetchError: On timeouts, connection failures or non-2xx statuses.
                The stored ETag is left as it was.
        """
        get_with_retry = exponential_backoff(
            max_retries=self.max_retries,
            base_delay=self.retry_delay,
            exceptions=(requests.exceptions.RequestException,),
            retry_if=is_transient_request_error,
            on_retry=self._on_retry,
        )(self._get)

        try:
            resp = get_with_retry()
        except RetryError as e:
            cause = e.__cause__ or e
            raise self._fetch_error(cause, f"README fetch failed after retries: {cause}") from cause
        except requests.exceptions.RequestException as e:
            raise self._fetch_error(e, f"README fetch failed: {e}") from e

        if resp.status_code == 304:
            logger.info("README not modified", etag=self.etag)
            logger.record_fetch(not_modified=True)
            return FetchResult.unchanged()

        new_etag = resp.headers.get("ETag")
        if new_etag:
            self.etag = new_etag

        resp.encoding = "utf-8"
        body = resp.text
        logger.info("README fetched", chars=len(body), etag=self.etag)
        logger.record_fetch()
        return FetchResult.document(body, etag=self.etag)

    def _fetch_error(self, cause: BaseException, message: str) -> FetchError:
        status = None
        response = getattr(cause, "response", None)
        if response is not None:
            status = response.status_code
        error_type = type(cause).__name__ if status is None else f"HTTPError_{status}"
        logger.error("README fetch failed", url=self.url, status=status, error=str(cause))
        logger.record_fetch_failure(error_type)
        return FetchError(message, status=status)

    def reset_validator(self):
        """Forget the stored ETag so the next fetch downloads the full README."""
        self.etag = None
