"""
Application settings and environment configuration.

Responsibilities:
- Load configuration from environment variables and the project .env file.
- Validate settings and provide defaults for optional ones.
- Expose one typed, immutable Settings object shared by the API server,
  the cache layer, and the task pool.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from backend_lobbyrisk.config.env import (
    env_float,
    env_int,
    env_list,
    env_str,
    load_lobbyrisk_env,
)

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000
DEFAULT_CACHE_DB_URL = "sqlite:///lobby_risk_cache.db"
CACHE_TTL_SEC = 604800  # 7 days
DEFAULT_POOL_CAPACITY = 5
DEFAULT_RENDER_TIMEOUT_SEC = 60.0
DEFAULT_PROFILE_BASE_URL = "https://steamcommunity.com/profiles"
DEFAULT_SUSPICIOUS_TERMS = ("cheater", "wall", "xitado", "xiter", "Denúncia")
DEFAULT_VAC_BAN_MARKERS = ("VAC ban", "banimento VAC")
DEFAULT_CACHE_TIMEOUT_SEC = 2.0
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "json"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("json", "console")


@dataclass(frozen=True)
class Settings:
    """Service configuration; built once at startup and shared read-only."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    redis_url: str | None = None
    cache_db_url: str = DEFAULT_CACHE_DB_URL
    cache_ttl_sec: int = CACHE_TTL_SEC
    cache_timeout_sec: float = DEFAULT_CACHE_TIMEOUT_SEC
    pool_capacity: int = DEFAULT_POOL_CAPACITY
    render_timeout_sec: float = DEFAULT_RENDER_TIMEOUT_SEC
    batch_deadline_sec: float | None = None
    profile_base_url: str = DEFAULT_PROFILE_BASE_URL
    suspicious_terms: tuple[str, ...] = DEFAULT_SUSPICIOUS_TERMS
    vac_ban_markers: tuple[str, ...] = DEFAULT_VAC_BAN_MARKERS
    cors_origins: tuple[str, ...] = field(default_factory=lambda: ("*",))
    log_level: str = DEFAULT_LOG_LEVEL
    log_format: str = DEFAULT_LOG_FORMAT

    def __post_init__(self) -> None:
        if self.pool_capacity < 1:
            raise ValueError("pool_capacity must be >= 1")
        if self.render_timeout_sec <= 0:
            raise ValueError("render_timeout_sec must be > 0")
        if self.cache_ttl_sec <= 0:
            raise ValueError("cache_ttl_sec must be > 0")
        if self.cache_timeout_sec <= 0:
            raise ValueError("cache_timeout_sec must be > 0")
        if self.batch_deadline_sec is not None and self.batch_deadline_sec <= 0:
            raise ValueError("batch_deadline_sec must be > 0 when set")
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        if self.log_format not in LOG_FORMATS:
            raise ValueError("log_format must be json or console")

    @property
    def cache_backend(self) -> str:
        """'redis' when REDIS_URL is set, else 'sql'."""
        return "redis" if self.redis_url else "sql"


def get_settings() -> Settings:
    """
    Return settings read from the environment (after loading .env).

    Raises:
        ValueError: when a numeric variable cannot be parsed or is out of range.
    """
    load_lobbyrisk_env()
    return Settings(
        host=env_str("HOST", DEFAULT_HOST),
        port=env_int("PORT", DEFAULT_PORT),
        redis_url=env_str("REDIS_URL"),
        cache_db_url=env_str("CACHE_DB_URL", DEFAULT_CACHE_DB_URL),
        cache_ttl_sec=env_int("CACHE_TTL_SEC", CACHE_TTL_SEC),
        cache_timeout_sec=env_float("CACHE_TIMEOUT_SEC", DEFAULT_CACHE_TIMEOUT_SEC),
        pool_capacity=env_int("POOL_CAPACITY", DEFAULT_POOL_CAPACITY),
        render_timeout_sec=env_float("RENDER_TIMEOUT_SEC", DEFAULT_RENDER_TIMEOUT_SEC),
        batch_deadline_sec=env_float("BATCH_DEADLINE_SEC", None),
        profile_base_url=env_str("PROFILE_BASE_URL", DEFAULT_PROFILE_BASE_URL).rstrip("/"),
        suspicious_terms=env_list("SUSPICIOUS_TERMS", DEFAULT_SUSPICIOUS_TERMS),
        vac_ban_markers=env_list("VAC_BAN_MARKERS", DEFAULT_VAC_BAN_MARKERS),
        cors_origins=env_list("CORS_ORIGINS", ("*",)),
        log_level=env_str("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        log_format=env_str("LOG_FORMAT", DEFAULT_LOG_FORMAT).lower(),
    )
