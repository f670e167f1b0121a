"""
Structured logging for internfeed.

Console and daily-file output, keyword context appended as JSON, and a
small set of counters describing how the ingestion pipeline is doing.
"""

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional


class StructuredLogger:
    """
    Logger with console and file outputs plus ingestion metrics.
    """

    def __init__(
        self,
        name: str = "internfeed",
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: bool = True,
        enable_console: bool = True,
    ):
        """
        Initialize the structured logger.

        Args:
            name: Logger name
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for log files (default: logs/)
            enable_file: Write logs to a daily file
            enable_console: Write logs to stdout
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper()))
        self.logger.handlers.clear()
        self.logger.propagate = False

        self.metrics = self._empty_metrics()

        if enable_console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(getattr(logging, level.upper()))
            console_handler.setFormatter(logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            ))
            self.logger.addHandler(console_handler)

        if enable_file:
            if log_dir is None:
                log_dir = Path("logs")
            log_dir.mkdir(parents=True, exist_ok=True)

            log_file = log_dir / f"internfeed_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)  # file always gets everything
            file_handler.setFormatter(logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            ))
            self.logger.addHandler(file_handler)

    @staticmethod
    def _empty_metrics() -> dict:
        return {
            "fetches": 0,
            "fetches_not_modified": 0,
            "fetch_failures": 0,
            "rows_parsed": 0,
            "rows_rejected": 0,
            "dates_defaulted": 0,
            "inserted": 0,
            "skipped_existing": 0,
            "skipped_stale": 0,
            "swept": 0,
            "errors_by_type": {},
        }

    def debug(self, message: str, **kwargs):
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs):
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs):
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs):
        self._log(logging.ERROR, message, kwargs)

    def critical(self, message: str, **kwargs):
        self._log(logging.CRITICAL, message, kwargs)

    def _log(self, level: int, message: str, context: dict):
        if context:
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        self.logger.log(level, message)

    # Metric tracking

    def record_fetch(self, not_modified: bool = False):
        """Record a completed upstream fetch."""
        self.metrics["fetches"] += 1
        if not_modified:
            self.metrics["fetches_not_modified"] += 1

    def record_fetch_failure(self, error_type: str):
        self.metrics["fetch_failures"] += 1
        self._count_error(error_type)

    def record_row(self, parsed: bool):
        key = "rows_parsed" if parsed else "rows_rejected"
        self.metrics[key] += 1

    def record_date_fallback(self):
        self.metrics["dates_defaulted"] += 1

    def record_reconcile(self, inserted: int, skipped_existing: int, skipped_stale: int):
        self.metrics["inserted"] += inserted
        self.metrics["skipped_existing"] += skipped_existing
        self.metrics["skipped_stale"] += skipped_stale

    def record_sweep(self, deleted: int):
        self.metrics["swept"] += deleted

    def record_error(self, error_type: str):
        self._count_error(error_type)

    def _count_error(self, error_type: str):
        errors = self.metrics["errors_by_type"]
        errors[error_type] = errors.get(error_type, 0) + 1

    def get_metrics(self) -> dict:
        """Return a copy of the metrics with the fetch success rate filled in."""
        metrics_copy = dict(self.metrics)
        metrics_copy["errors_by_type"] = dict(self.metrics["errors_by_type"])
        attempts = metrics_copy["fetches"] + metrics_copy["fetch_failures"]
        if attempts > 0:
            metrics_copy["fetch_success_rate"] = round(metrics_copy["fetches"] / attempts, 3)
        return metrics_copy

    def log_metrics_summary(self):
        """Log a summary of current metrics."""
        metrics = self.get_metrics()

        self.info("=== Ingestion Metrics ===")
        self.info(
            f"Fetches: {metrics['fetches']} ok "
            f"({metrics['fetches_not_modified']} not modified), "
            f"{metrics['fetch_failures']} failed"
        )
        self.info(f"Rows: {metrics['rows_parsed']} parsed, {metrics['rows_rejected']} rejected, "
                  f"{metrics['dates_defaulted']} with defaulted dates")
        self.info(f"Postings: {metrics['inserted']} inserted, {metrics['skipped_existing']} existing, "
                  f"{metrics['skipped_stale']} stale, {metrics['swept']} swept")

        if metrics["errors_by_type"]:
            self.info("Error Types:")
            for error_type, count in metrics["errors_by_type"].items():
                self.info(f"  {error_type}: {count}")


_global_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "internfeed",
    level: str = "INFO",
    **kwargs
) -> StructuredLogger:
    """
    Get or create the global logger instance.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        **kwargs: Additional arguments passed to StructuredLogger

    Returns:
        StructuredLogger instance
    """
    global _global_logger

    if _global_logger is None:
        _global_logger = StructuredLogger(name=name, level=level, **kwargs)

    return _global_logger


def reset_logger():
    """Reset the global logger (useful for testing)."""
    global _global_logger
    _global_logger = None
