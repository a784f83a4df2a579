"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_RADIUS_PRESETS_KM: Tuple[float, ...] = (2.0, 5.0, 10.0, 20.0, 50.0)


class ConfigError(RuntimeError):
    """Raised when configuration values cannot be parsed or are inconsistent."""


@dataclass(frozen=True)
class Settings:
    api_base_url: str
    google_api_key: str = ""
    radius_presets_km: Tuple[float, ...] = DEFAULT_RADIUS_PRESETS_KM
    default_radius_km: float = 10.0
    request_timeout: float = 10.0
    taxonomy_path: Optional[str] = None
    port: int = 8080


def _parse_float(name: str, raw: str) -> float:
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be numeric, got {raw!r}") from exc


def _parse_presets(raw: str) -> Tuple[float, ...]:
    values = [part.strip() for part in raw.split(",") if part.strip()]
    if not values:
        raise ConfigError("RADIUS_PRESETS_KM must list at least one radius")
    presets = tuple(sorted({_parse_float("RADIUS_PRESETS_KM", value) for value in values}))
    if presets[0] <= 0:
        raise ConfigError("RADIUS_PRESETS_KM values must be positive")
    return presets


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    api_base_url = os.getenv("NEARBY_API_BASE_URL", "").rstrip("/")
    google_api_key = os.getenv("GOOGLE_API_KEY", "")
    presets_raw = os.getenv("RADIUS_PRESETS_KM")
    radius_presets_km = _parse_presets(presets_raw) if presets_raw else DEFAULT_RADIUS_PRESETS_KM
    default_radius_km = _parse_float("DEFAULT_RADIUS_KM", os.getenv("DEFAULT_RADIUS_KM", "10"))
    request_timeout = _parse_float("NEARBY_REQUEST_TIMEOUT", os.getenv("NEARBY_REQUEST_TIMEOUT", "10"))
    taxonomy_path = os.getenv("TAXONOMY_PATH") or None
    try:
        port = int(os.getenv("PORT", "8080"))
    except ValueError as exc:
        raise ConfigError("PORT must be an integer") from exc

    if default_radius_km not in radius_presets_km:
        raise ConfigError(
            f"DEFAULT_RADIUS_KM={default_radius_km:g} is not one of RADIUS_PRESETS_KM {radius_presets_km}"
        )
    if not api_base_url:
        logger.warning("NEARBY_API_BASE_URL is not set; live nearby searches will fail.")
    if not google_api_key:
        logger.warning("GOOGLE_API_KEY is not configured; place searches will fail.")

    return Settings(
        api_base_url=api_base_url,
        google_api_key=google_api_key,
        radius_presets_km=radius_presets_km,
        default_radius_km=default_radius_km,
        request_timeout=request_timeout,
        taxonomy_path=taxonomy_path,
        port=port,
    )
