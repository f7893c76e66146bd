"""
Environment-driven settings for the booking core and its entry points.

Company defaults, address lookup settings, and public form/embed
parameters are configurable here. Nothing is hardcoded in form or
service logic.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from fieldservice.logging_context import SESSION_LOG_FORMAT, install_session_filter

load_dotenv()

logger = logging.getLogger(__name__)


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


@dataclass(frozen=True)
class BusinessConfig:
    """Company display defaults used when the backend has no company info."""

    default_form_title: str = os.getenv(
        "DEFAULT_FORM_TITLE", "Request a Service Appointment"
    )
    public_form_user_id: str = os.getenv("PUBLIC_FORM_USER_ID", "public_form")


@dataclass(frozen=True)
class MapsConfig:
    """Address autocomplete collaborator settings."""

    api_key: str = os.getenv("MAPS_API_KEY", "")
    country: str = os.getenv("ADDRESS_COUNTRY", "do")
    lookup_timeout_sec: float = _safe_float("ADDRESS_LOOKUP_TIMEOUT", "10.0")


@dataclass(frozen=True)
class FormConfig:
    """Public form, embed snippet, and order numbering settings."""

    public_base_url: str = os.getenv("PUBLIC_FORM_BASE_URL", "http://localhost:5173")
    embed_height_px: int = _safe_int("EMBED_HEIGHT_PX", "800")
    order_number_prefix: str = os.getenv("ORDER_NUMBER_PREFIX", "OS")
    order_number_width: int = _safe_int("ORDER_NUMBER_WIDTH", "4")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    business: BusinessConfig = field(default_factory=BusinessConfig)
    maps: MapsConfig = field(default_factory=MapsConfig)
    form: FormConfig = field(default_factory=FormConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    app_name: str = os.getenv("APP_NAME", "field-service")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if config.maps.lookup_timeout_sec <= 0:
        raise ValueError(
            f"ADDRESS_LOOKUP_TIMEOUT must be > 0, got {config.maps.lookup_timeout_sec}"
        )
    if config.form.embed_height_px < 1:
        raise ValueError(
            f"EMBED_HEIGHT_PX must be >= 1, got {config.form.embed_height_px}"
        )
    if not config.form.order_number_prefix.strip():
        raise ValueError("ORDER_NUMBER_PREFIX must not be empty")
    if config.form.order_number_width < 1:
        raise ValueError(
            f"ORDER_NUMBER_WIDTH must be >= 1, got {config.form.order_number_width}"
        )
    if not config.form.public_base_url.startswith(("http://", "https://")):
        raise ValueError(
            f"PUBLIC_FORM_BASE_URL must be an http(s) URL, got {config.form.public_base_url!r}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format=SESSION_LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    for handler in logging.getLogger().handlers:
        install_session_filter(handler)
    if not config.maps.api_key:
        logger.warning("MAPS_API_KEY is not set; the public form page will not load")
    logger.info("Configuration loaded for '%s'", config.app_name)
    return config


# Singleton instance
settings = load_config()
