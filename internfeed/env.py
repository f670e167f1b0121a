"""
Configuration for internfeed.

Values come from the process environment, optionally seeded from a .env
file in the working directory. Every setting has a default so a bare
checkout runs without any configuration.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_README_URL = "https://api.github.com/repos/vanshb03/Summer2026-Internships/readme"


def load_env() -> None:
    """Load .env from the current directory if present."""
    env_path = Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path)


def _int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def _optional_days(name: str, default: int) -> Optional[int]:
    # 0 or "none" turns the horizon off
    raw = os.getenv(name)
    if raw is not None and raw.strip().lower() in ("none", "off"):
        return None
    days = _int(name, default)
    return days if days > 0 else None


@dataclass(frozen=True)
class Settings:
    db_path: Path = Path("data/internships.db")
    readme_url: str = DEFAULT_README_URL
    github_token: Optional[str] = None
    request_timeout: int = 20
    poll_interval_minutes: int = 60
    poll_initial_delay_seconds: int = 5
    sweep_hour: int = 2
    sweep_minute: int = 0
    retention_days: int = 90
    ingest_max_age_days: Optional[int] = 30
    list_window_days: int = 30
    log_level: str = "INFO"
    log_dir: Path = Path("logs")

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from INTERNFEED_* environment variables.

        Raises:
            ValueError: If a numeric variable is not an integer
        """
        return cls(
            db_path=Path(os.getenv("INTERNFEED_DB", "data/internships.db")),
            readme_url=os.getenv("INTERNFEED_README_URL", DEFAULT_README_URL),
            github_token=os.getenv("GITHUB_TOKEN") or None,
            request_timeout=_int("INTERNFEED_REQUEST_TIMEOUT", 20),
            poll_interval_minutes=_int("INTERNFEED_POLL_INTERVAL_MINUTES", 60),
            poll_initial_delay_seconds=_int("INTERNFEED_POLL_INITIAL_DELAY_SECONDS", 5),
            sweep_hour=_int("INTERNFEED_SWEEP_HOUR", 2),
            sweep_minute=_int("INTERNFEED_SWEEP_MINUTE", 0),
            retention_days=_int("INTERNFEED_RETENTION_DAYS", 90),
            ingest_max_age_days=_optional_days("INTERNFEED_INGEST_MAX_AGE_DAYS", 30),
            list_window_days=_int("INTERNFEED_LIST_WINDOW_DAYS", 30),
            log_level=os.getenv("INTERNFEED_LOG_LEVEL", "INFO"),
            log_dir=Path(os.getenv("INTERNFEED_LOG_DIR", "logs")),
        )
