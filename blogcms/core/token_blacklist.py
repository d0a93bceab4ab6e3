from __future__ import annotations

import time

import redis

from blogcms.core.config import settings
from blogcms.core.logging import get_logger

logger = get_logger(__name__)


class TokenBlacklist:
    """Revoked-token registry; Redis when REDIS_URL is configured, process memory otherwise."""

    def __init__(self, redis_url: str | None = None, prefix: str = "jwt-bl") -> None:
        self._prefix = prefix
        self._store: dict[str, float] = {}
        self._redis: redis.Redis | None = None
        if redis_url:
            self._redis = redis.Redis.from_url(redis_url, decode_responses=True)

    def _key(self, jti: str) -> str:
        return f"{self._prefix}:{jti}"

    def add(self, jti: str, ttl_seconds: int) -> None:
        ttl = max(int(ttl_seconds), 1)
        if self._redis is not None:
            self._redis.setex(self._key(jti), ttl, "1")
            return
        self._store[jti] = time.time() + ttl

    def contains(self, jti: str) -> bool:
        if self._redis is not None:
            return bool(self._redis.exists(self._key(jti)))
        expires_at = self._store.get(jti)
        if not expires_at:
            return False
        if expires_at < time.time():
            self._store.pop(jti, None)
            return False
        return True


_blacklist: TokenBlacklist | None = None


def _get_blacklist() -> TokenBlacklist:
    global _blacklist
    if _blacklist is None:
        _blacklist = TokenBlacklist(redis_url=settings.REDIS_URL)
    return _blacklist


def revoke_token(jti: str, expires_in_seconds: int) -> None:
    if not settings.JWT_BLACKLIST_ENABLED or not jti:
        return
    ttl = max(int(expires_in_seconds) + settings.JWT_BLACKLIST_TTL_LEEWAY_SECONDS, 1)
    _get_blacklist().add(jti, ttl)
    logger.info("Access token revoked", extra={"jti": jti, "ttl": ttl})


def is_token_revoked(jti: str) -> bool:
    if not settings.JWT_BLACKLIST_ENABLED or not jti:
        return False
    return _get_blacklist().contains(jti)
