"""
Centralized configuration for the receipt verification service.
Values come from environment variables (optionally loaded from .env by main.py).
"""

import os
import sys
from dataclasses import dataclass
from typing import Optional

from loguru import logger

DEFAULT_CAIXA_API_BASE_URL = "https://servicebus2.caixa.gov.br/portaldeloterias/api"
DEFAULT_GEMINI_MODEL = "gemini-2.5-flash-lite"
DEFAULT_MAX_UPLOAD_BYTES = 4 * 1024 * 1024


def _is_truthy(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "on"}


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Invalid integer for {name}={raw!r}, using {default}")
        return default


@dataclass(frozen=True)
class AppConfig:
    gemini_api_key: Optional[str]
    gemini_model: str
    caixa_api_base_url: str
    caixa_verify_ssl: bool
    caixa_timeout: int
    max_upload_bytes: int
    log_level: str
    log_file: Optional[str]
    host: str = "0.0.0.0"
    port: int = 8000


def get_app_config() -> AppConfig:
    """
    Build the application configuration from environment variables.

    Returns:
        AppConfig with defaults applied for anything not set
    """
    config = AppConfig(
        gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
        gemini_model=os.getenv("GEMINI_MODEL", DEFAULT_GEMINI_MODEL),
        caixa_api_base_url=os.getenv("CAIXA_API_BASE_URL", DEFAULT_CAIXA_API_BASE_URL).rstrip("/"),
        caixa_verify_ssl=_is_truthy(os.getenv("CAIXA_VERIFY_SSL", "false")),
        caixa_timeout=_int_env("CAIXA_TIMEOUT", 15),
        max_upload_bytes=_int_env("MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES),
        log_level=os.getenv("LOG_LEVEL", "info").upper(),
        log_file=os.getenv("LOG_FILE") or None,
        host=os.getenv("HOST", "0.0.0.0"),
        port=_int_env("PORT", 8000),
    )

    if not config.gemini_api_key:
        logger.warning("GEMINI_API_KEY is not set; receipt image processing will be unavailable")

    return config


def configure_logging(config: AppConfig) -> None:
    """Replace loguru's default sink with the configured level and optional log file."""
    logger.remove()
    logger.add(sys.stderr, level=config.log_level)
    if config.log_file:
        logger.add(config.log_file, level=config.log_level, rotation="5 MB", retention=3)
    logger.info(f"Logging configured (level={config.log_level}, file={config.log_file})")
