"""
Cache stores: key -> serialized snapshot with per-entry expiry.

RedisCacheStore uses REDIS_URL (SET with EX). SqlCacheStore is SQLAlchemy-backed
(CACHE_DB_URL; PostgreSQL or SQLite) and enforces expiry on read. Both raise
CacheReadDegraded / CacheWriteDegraded when the backend is unavailable.
"""

from __future__ import annotations

import asyncio
import time
from contextlib import contextmanager
from typing import Iterator, Protocol

import redis.asyncio as aioredis
from redis.exceptions import RedisError
from sqlalchemy import Column, Integer, String, Text, create_engine, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from backend_lobbyrisk.config.settings import DEFAULT_CACHE_TIMEOUT_SEC
from backend_lobbyrisk.core.exceptions import CacheReadDegraded, CacheWriteDegraded
from backend_lobbyrisk.lobbyrisk_logging import get_logger

logger = get_logger(__name__)

Base = declarative_base()


class CacheStore(Protocol):
    """Store contract consumed by CacheClient."""

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str, ttl_seconds: int) -> None: ...

    async def close(self) -> None: ...


# -----------------------------------------------------------------------------
# Redis
# -----------------------------------------------------------------------------


class RedisCacheStore:
    """
    Async Redis store. Expiry enforced by Redis (EX).

    Every command is bounded by timeout_sec: socket timeouts on the connection,
    plus an overall wait_for so client-side retries cannot extend it.
    """

    def __init__(
        self,
        url: str,
        *,
        timeout_sec: float = DEFAULT_CACHE_TIMEOUT_SEC,
        client: aioredis.Redis | None = None,
    ) -> None:
        self._url = url
        self.timeout_sec = timeout_sec
        self._client = client or aioredis.Redis.from_url(
            url,
            decode_responses=True,
            socket_timeout=timeout_sec,
            socket_connect_timeout=timeout_sec,
        )

    async def ping(self) -> bool:
        try:
            return bool(await asyncio.wait_for(self._client.ping(), self.timeout_sec))
        except (RedisError, asyncio.TimeoutError) as e:
            logger.warning("redis_ping_failed", error=str(e))
            return False

    async def get(self, key: str) -> str | None:
        try:
            value = await asyncio.wait_for(self._client.get(key), self.timeout_sec)
        except asyncio.TimeoutError as e:
            raise CacheReadDegraded(f"redis get timed out after {self.timeout_sec}s") from e
        except RedisError as e:
            raise CacheReadDegraded(f"redis get failed: {e}") from e
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            await asyncio.wait_for(self._client.set(key, value, ex=ttl_seconds), self.timeout_sec)
        except asyncio.TimeoutError as e:
            raise CacheWriteDegraded(f"redis set timed out after {self.timeout_sec}s") from e
        except RedisError as e:
            raise CacheWriteDegraded(f"redis set failed: {e}") from e

    async def close(self) -> None:
        await self._client.aclose()


# -----------------------------------------------------------------------------
# SQL (SQLAlchemy)
# -----------------------------------------------------------------------------


class ProfileCacheEntry(Base):
    """One cached snapshot per identity; replaced on every write."""

    __tablename__ = "profile_cache"

    key = Column(String(128), primary_key=True)
    payload = Column(Text, nullable=False)
    expires_at = Column(Integer, nullable=False, index=True)  # Unix seconds


class SqlCacheStore:
    """
    SQLAlchemy-backed store. Blocking I/O runs in a worker thread so the event
    loop is never blocked. Expired rows are invisible to get() and purged lazily.
    """

    def __init__(self, url: str, *, clock=time.time) -> None:
        self._url = url
        self._clock = clock
        connect_args = {}
        if url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self._engine = create_engine(url, connect_args=connect_args, pool_pre_ping=True)
        self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self._engine)
        logger.info("cache_sql_engine", url=url.split("?")[0].split("//")[-1])

    def init_db(self) -> None:
        """Create the cache table if it does not exist. Safe to call on every startup."""
        Base.metadata.create_all(bind=self._engine)

    @contextmanager
    def _session_scope(self) -> Iterator[Session]:
        """Single session. Commits on success, rolls back on error."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def _get_sync(self, key: str) -> str | None:
        now = int(self._clock())
        with self._session_scope() as session:
            row = session.get(ProfileCacheEntry, key)
            if row is None:
                return None
            if row.expires_at <= now:
                session.delete(row)
                return None
            return row.payload

    def _set_sync(self, key: str, value: str, ttl_seconds: int) -> None:
        expires_at = int(self._clock()) + int(ttl_seconds)
        with self._session_scope() as session:
            session.merge(ProfileCacheEntry(key=key, payload=value, expires_at=expires_at))

    def purge_expired(self) -> int:
        """Delete all expired rows; returns the number removed."""
        now = int(self._clock())
        with self._session_scope() as session:
            result = session.execute(
                delete(ProfileCacheEntry).where(ProfileCacheEntry.expires_at <= now)
            )
            return result.rowcount or 0

    async def get(self, key: str) -> str | None:
        try:
            return await asyncio.to_thread(self._get_sync, key)
        except SQLAlchemyError as e:
            raise CacheReadDegraded(f"sql get failed: {e}") from e

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            await asyncio.to_thread(self._set_sync, key, value, ttl_seconds)
        except SQLAlchemyError as e:
            raise CacheWriteDegraded(f"sql set failed: {e}") from e

    async def close(self) -> None:
        self._engine.dispose()
