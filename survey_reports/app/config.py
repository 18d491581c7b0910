from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


def _env_str(key: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(key)
    if v is None:
        return default
    v = v.strip()
    return v if v else default


def _env_int(key: str, default: int) -> int:
    v = _env_str(key)
    if v is None:
        return default
    try:
        return int(v)
    except ValueError:
        return default


def _env_bool(key: str, default: bool) -> bool:
    v = _env_str(key)
    if v is None:
        return default
    return v.lower() in {"1", "true", "yes", "y", "on"}


@dataclass(frozen=True)
class Settings:
    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # Localization
    default_language: str = "en"

    # Reporting thresholds
    sufficient_responses: int = 5
    min_report_responses: int = 5

    # Display rounding applied at the aggregation boundary
    decimals: int = 2

    @staticmethod
    def from_env(dotenv: bool = True) -> "Settings":
        # Read configuration from environment variables (and .env when present).
        if dotenv:
            load_dotenv()

        return Settings(
            log_level=_env_str("APP_LOG_LEVEL", "INFO") or "INFO",
            log_json=_env_bool("APP_LOG_JSON", True),

            default_language=_env_str("APP_DEFAULT_LANGUAGE", "en") or "en",

            sufficient_responses=_env_int("APP_SUFFICIENT_RESPONSES", 5),
            min_report_responses=_env_int("APP_MIN_REPORT_RESPONSES", 5),

            decimals=_env_int("APP_DECIMALS", 2),
        )


DEFAULT_SETTINGS = Settings()
