from __future__ import annotations

import os
import re
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


DEFAULT_CACHE_TTL_SECONDS = 60 * 60 * 24

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|h|m|s)")
_DURATION_UNITS = {"h": 3600.0, "m": 60.0, "s": 1.0, "ms": 0.001}


@dataclass
class Settings:
    # Inbound auth
    api_token: str

    # Provider A (Geoapify)
    geocoding_a_api_key: str
    geocoding_a_base_url: str

    # Provider B (Smarty)
    geocoding_b_api_key: str
    geocoding_b_base_url: str
    smarty_referer: str
    smarty_license: str

    # Cache
    cache_backend: str  # redis | memory
    cache_ttl_seconds: float
    cache_maxsize: int
    cache_write_timeout_seconds: float
    redis_host: str
    redis_port: int
    redis_password: str
    redis_db: int

    # HTTP
    http_timeout_seconds: float
    http_user_agent: str

    # Server
    host: str
    port: int
    environment: str
    log_level: str
    coalesce_requests: bool


def _clean(s: str | None) -> str:
    return (s or "").strip().strip('"').strip("'")


def _str(name: str, default: str = "") -> str:
    return _clean(os.getenv(name)) or default


def _int(name: str, default: int) -> int:
    v = _clean(os.getenv(name, str(default)))
    return int(v) if v else default


def _float(name: str, default: float) -> float:
    v = _clean(os.getenv(name, str(default)))
    return float(v) if v else default


def _bool(name: str, default: bool) -> bool:
    v = _clean(os.getenv(name)).lower()
    if not v:
        return default
    return v in ("1", "true", "yes", "on")


def parse_duration(value: str, default: float = DEFAULT_CACHE_TTL_SECONDS) -> float:
    """
    '24h' -> 86400, '1h30m' -> 5400, '45s' -> 45, '3600' -> 3600.
    Anything unparsable (or non-positive) falls back to default.
    """
    value = _clean(value).lower()
    if not value:
        return default

    try:
        seconds = float(value)
    except ValueError:
        pos = 0
        seconds = 0.0
        for m in _DURATION_PART.finditer(value):
            if m.start() != pos:
                return default
            seconds += float(m.group(1)) * _DURATION_UNITS[m.group(2)]
            pos = m.end()
        if pos != len(value):
            return default

    return seconds if seconds > 0 else default


def get_settings() -> Settings:
    """
    Environment (and .env) -> Settings.

    API_TOKEN is mandatory. The cache goes to Redis when CACHE_BACKEND=redis,
    or when CACHE_BACKEND is unset and REDIS_HOST is present.
    """
    api_token = _clean(os.getenv("API_TOKEN"))
    if not api_token:
        raise RuntimeError("Missing API_TOKEN in environment (.env).")

    redis_host = _clean(os.getenv("REDIS_HOST"))
    backend = _clean(os.getenv("CACHE_BACKEND")).lower() or ("redis" if redis_host else "memory")
    if backend not in ("redis", "memory"):
        raise RuntimeError(f"Unsupported CACHE_BACKEND: {backend!r} (expected 'redis' or 'memory').")

    return Settings(
        api_token=api_token,
        # providers
        geocoding_a_api_key=_str("GEOCODING_A_API_KEY"),
        geocoding_a_base_url=_str("GEOCODING_A_BASE_URL", "https://api.geoapify.com/v1/geocode/search"),
        geocoding_b_api_key=_str("GEOCODING_B_API_KEY"),
        geocoding_b_base_url=_str("GEOCODING_B_BASE_URL", "https://us-autocomplete-pro.api.smarty.com/lookup"),
        smarty_referer=_str("SMARTY_REFERER", "localhost:3000"),
        smarty_license=_str("SMARTY_LICENSE", "us-autocomplete-pro-cloud"),
        # cache
        cache_backend=backend,
        cache_ttl_seconds=parse_duration(os.getenv("CACHE_TTL", "24h")),
        cache_maxsize=_int("CACHE_MAXSIZE", 20000),
        cache_write_timeout_seconds=_float("CACHE_WRITE_TIMEOUT_SECONDS", 2.0),
        redis_host=redis_host or "localhost",
        redis_port=_int("REDIS_PORT", 6379),
        redis_password=_clean(os.getenv("REDIS_PASSWORD")),
        redis_db=_int("REDIS_DB", 0),
        # http
        http_timeout_seconds=_float("HTTP_TIMEOUT_SECONDS", 10.0),
        http_user_agent=_str("HTTP_USER_AGENT", "address-validator/0.1.0"),
        # server
        host=_str("HOST", "127.0.0.1"),
        port=_int("PORT", 3000),
        environment=_str("ENVIRONMENT", "development"),
        log_level=_str("LOG_LEVEL", "INFO").upper(),
        coalesce_requests=_bool("COALESCE_REQUESTS", False),
    )
