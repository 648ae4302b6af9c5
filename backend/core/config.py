"""
Application configuration.
Everything can be overridden from environment variables (or the etc/app.conf
file).  Defaults describe a single-user local vault backed by SQLite.
"""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings

# Project root is two levels up from this file  (backend/core/config.py → project/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    # Database – the local vault file lives in var/ by default
    database_url: str = f"sqlite:///{_PROJECT_ROOT / 'var' / 'vault.db'}"

    # Pwned Passwords range API.  Only the 5-char hash prefix is ever appended.
    hibp_range_url: str = "https://api.pwnedpasswords.com/range"
    hibp_user_agent: str = "pwvault/1.0"
    hibp_timeout_seconds: float = 10.0
    hibp_max_retries: int = 2
    hibp_retry_backoff_seconds: float = 1.5
    # Upper bound on simultaneous range queries during a full recheck
    hibp_concurrency: int = 8

    # Records not modified for this many days count as stale in the score
    stale_after_days: int = 90

    cors_origins: list[str] = ["http://localhost:8000"]

    # Logging – handlers and format are in etc/logging.conf
    log_dir: Optional[str] = None  # default: <project>/log
    log_level: str = "INFO"

    # app.conf lives in etc/ – resolved relative to the project root so that
    # the file is found regardless of the working directory.
    model_config = {"env_file": str(_PROJECT_ROOT / "etc" / "app.conf"), "extra": "ignore"}


# Module-level singleton – import this everywhere: from core.config import settings
settings = Settings()
