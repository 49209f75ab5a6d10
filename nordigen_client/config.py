from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(BASE_DIR / ".env")

DEFAULT_BASE_URL = "https://ob.nordigen.com"
DEFAULT_TIMEOUT_SECONDS = 20.0

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


class Settings:
    """Runtime settings for the Nordigen client, read from the environment."""

    def __init__(self) -> None:
        self.base_url: str = os.getenv("NORDIGEN_BASE_URL", DEFAULT_BASE_URL)
        self.secret_id: Optional[str] = os.getenv("NORDIGEN_SECRET_ID")
        self.secret_key: Optional[str] = os.getenv("NORDIGEN_SECRET_KEY")
        self.timeout: float = float(os.getenv("NORDIGEN_TIMEOUT", str(DEFAULT_TIMEOUT_SECONDS)))
        self.audit: bool = _env_flag("NORDIGEN_AUDIT", default=True)
        self.log_level: str = os.getenv("NORDIGEN_LOG_LEVEL", "INFO").upper()

    @property
    def has_credentials(self) -> bool:
        return bool(self.secret_id and self.secret_key)


def get_settings() -> Settings:
    """Re-read the environment; useful after it was changed at runtime."""
    return Settings()


settings = Settings()
