"""WordPress REST API configuration values."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Final

from mediafixer import __version__

from .env import require_env_vars
from .errors import ConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .storage import get_storage_config

REST_API_PATH: Final[str] = "/wp-json/wp/v2/"
WORDPRESS_TIMEOUT_SECONDS: Final[float] = 20.0
USER_AGENT: Final[str] = f"mediafixer/{__version__}"


@dataclass(frozen=True, slots=True)
class WordPressConfig:
    """Holds WordPress REST API configuration values."""

    base_url: str
    user: str
    app_password: str
    resilience: ResilienceConfig

    @property
    def api_url(self) -> str:
        return self.resilience.base_url or (self.base_url.rstrip("/") + REST_API_PATH)


def _is_cacheable(payload: object) -> bool:
    # WordPress error bodies carry a "code" key.
    return not (isinstance(payload, dict) and "code" in payload)


def _cache_from_environment() -> CacheConfig | None:
    backend = os.getenv("MEDIAFIXER_HTTP_CACHE", "off").strip().lower()
    if backend in {"", "off", "none"}:
        return None
    if backend == "memory":
        return CacheConfig(backend="memory", should_cache=_is_cacheable)
    if backend == "sqlite":
        path = get_storage_config().http_cache_path()
        return CacheConfig(backend="sqlite", sqlite_path=str(path), should_cache=_is_cacheable)
    raise ConfigurationError(f"Unsupported MEDIAFIXER_HTTP_CACHE value: {backend}")


def get_wordpress_config(*, resilience: ResilienceConfig | None = None) -> WordPressConfig:
    values = require_env_vars(
        ("WORDPRESS_BASE_URL", "WORDPRESS_USER", "WORDPRESS_APP_PASSWORD"),
    )
    base_url = values["WORDPRESS_BASE_URL"].strip()
    return WordPressConfig(
        base_url=base_url,
        user=values["WORDPRESS_USER"].strip(),
        app_password=values["WORDPRESS_APP_PASSWORD"].strip(),
        resilience=resilience
        or ResilienceConfig(
            name="wordpress",
            base_url=base_url.rstrip("/") + REST_API_PATH,
            timeout_seconds=WORDPRESS_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
            retry=RetryPolicy(total=3),
            cache=_cache_from_environment(),
            default_headers={"User-Agent": USER_AGENT},
        ),
    )
