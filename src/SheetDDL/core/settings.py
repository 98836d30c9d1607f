"""
Centralized configuration management using Pydantic.

This module defines the Settings class which loads and validates application
configuration from environment variables or .env file.

Module Input:
    - Environment variables from OS
    - .env file in project root (optional)
    - Default values defined in class

Module Output:
    - Validated configuration object (singleton)
    - Threshold parsing helper used by the CLI and interactive prompts
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Tuple

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_THRESHOLD = 500

# Locale independent formats accepted as DATETIME candidates, tried in order.
DEFAULT_DATE_FORMATS: Tuple[str, ...] = (
    "%Y-%m-%d",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y/%m/%d",
    "%Y/%m/%d %H:%M:%S",
    "%d/%m/%Y",
    "%d/%m/%Y %H:%M",
    "%d/%m/%Y %H:%M:%S",
    "%d.%m.%Y",
    "%d.%m.%Y %H:%M:%S",
    "%d-%m-%Y",
    "%d-%m-%Y %H:%M:%S",
)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables and .env file.

    Uses Pydantic's BaseSettings to provide validated configuration with
    automatic type conversion and environment variable loading.

    Attributes:
        Inference Configuration:
            inference_threshold (int): Minimum matching values for a non-text type (default: 500)
            inference_workers (int): Thread pool size for per-column inference (default: 1)
            date_formats (Tuple[str, ...]): strptime formats accepted as dates

        Output Configuration:
            default_table_name (str): Table name used when none can be derived
            output_dir (Path): Directory for generated .sql files (default: "output")
            database_url (Optional[str]): SQLAlchemy URL for the database sink

        Input Configuration:
            input_dir (Path): Directory scanned for source files (default: "data")

        Logging Configuration:
            log_level (str): Minimum log level (default: "INFO")
            log_dir (Path): Directory for log files (default: "logs")
            log_file (str): Log file name (default: "sheetddl.log")
    """

    # ---------------- Inference ----------------
    inference_threshold: int = DEFAULT_THRESHOLD
    inference_workers: int = 1
    date_formats: Tuple[str, ...] = DEFAULT_DATE_FORMATS

    # ---------------- Output ----------------
    default_table_name: str = "ImportedTable"
    output_dir: Path = Path("output")
    database_url: Optional[str] = None

    # ---------------- Input ----------------
    input_dir: Path = Path("data")

    # ---------------- Logging ----------------
    log_level: str = "INFO"
    log_dir: Path = Path("logs")
    log_file: str = "sheetddl.log"

    # ---------------- Pydantic Settings ----------------
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("inference_threshold", "inference_workers")
    @classmethod
    def _must_be_positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("must be a positive integer")
        return value

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        return value.strip().upper()


def parse_threshold(raw: object, default: Optional[int] = None) -> int:
    """
    Parse a user supplied threshold, falling back to the default on bad input.

    A non-numeric or non-positive value is not fatal: a warning is logged
    and the default threshold is used instead.

    Args:
        raw: Value typed by the user or passed on the command line
        default: Fallback threshold (defaults to settings.inference_threshold)

    Returns:
        int: A positive threshold
    """
    fallback = default if default is not None else settings.inference_threshold
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return fallback

    text = str(raw).strip()
    try:
        value = int(text)
    except ValueError:
        logging.getLogger(__name__).warning(
            "Threshold %r is not a number; using default %d", text, fallback
        )
        return fallback

    if value < 1:
        logging.getLogger(__name__).warning(
            "Threshold %d is not positive; using default %d", value, fallback
        )
        return fallback
    return value


# Singleton instance shared across the app
settings = Settings()
