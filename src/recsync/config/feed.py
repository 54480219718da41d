"""External feed configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final

from .env import env_float, env_int, optional_env_var
from .errors import ConfigurationError
from .http_resilience import CacheBackend, CacheConfig, ResilienceConfig, RetryPolicy
from .storage import get_http_cache_path

DEFAULT_FEED_TIMEOUT_SECONDS: Final[float] = 30.0
_CACHE_CHOICES: Final[frozenset[str]] = frozenset({"off", "memory", "sqlite"})


@dataclass(frozen=True)
class FeedConfig:
    """Holds settings for fetching records from the external feed."""

    url: str | None
    resilience: ResilienceConfig
    headers: dict[str, str] = field(default_factory=dict[str, str])

    @property
    def timeout_seconds(self) -> float:
        return self.resilience.timeout_seconds


def _build_cache(choice: str) -> CacheConfig | None:
    if choice not in _CACHE_CHOICES:
        choices = ", ".join(sorted(_CACHE_CHOICES))
        raise ConfigurationError(f"FEED_CACHE must be one of {choices}, got {choice!r}")
    if choice == "off":
        return None
    backend: CacheBackend = "sqlite" if choice == "sqlite" else "memory"
    sqlite_path = str(get_http_cache_path()) if backend == "sqlite" else None
    return CacheConfig(
        backend=backend,
        sqlite_path=sqlite_path,
        should_cache=lambda payload: isinstance(payload, list),
    )


def get_feed_config(*, resilience: ResilienceConfig | None = None) -> FeedConfig:
    headers: dict[str, str] = {}
    token = optional_env_var("FEED_AUTH_TOKEN")
    if token:
        headers["Authorization"] = f"Bearer {token}"

    if resilience is None:
        retry_total = env_int("FEED_RETRY_TOTAL", 0)
        resilience = ResilienceConfig(
            name="feed",
            timeout_seconds=env_float("FEED_TIMEOUT_SECONDS", DEFAULT_FEED_TIMEOUT_SECONDS),
            retry=RetryPolicy(total=retry_total) if retry_total > 0 else None,
            cache=_build_cache((optional_env_var("FEED_CACHE") or "off").lower()),
        )

    return FeedConfig(url=optional_env_var("FEED_URL"), resilience=resilience, headers=headers)
