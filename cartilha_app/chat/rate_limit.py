"""Limite de requisições por cliente com backend em memória ou Redis."""

from __future__ import annotations

import importlib
import importlib.util
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from cartilha_app.config import AppSettings


class RateLimiter(Protocol):
    def check(self, key: str) -> bool:
        """Registra uma requisição de ``key`` e informa se ela é permitida."""

    def reset(self, key: str | None = None) -> None:
        """Remove a janela de ``key``, ou de todas as chaves."""


class NoopRateLimiter:
    def check(self, key: str) -> bool:
        del key
        return True

    def reset(self, key: str | None = None) -> None:
        del key


@dataclass
class _Window:
    count: int
    reset_at: float


@dataclass
class InMemoryRateLimiter:
    """Janela fixa por chave; janelas expiradas são descartadas a cada checagem."""

    max_requests: int = 20
    window_seconds: float = 60.0
    clock: Callable[[], float] = time.monotonic
    _windows: dict[str, _Window] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def _evict_expired(self, now: float) -> None:
        expired = [key for key, window in self._windows.items() if now > window.reset_at]
        for key in expired:
            del self._windows[key]

    def check(self, key: str) -> bool:
        with self._lock:
            now = self.clock()
            self._evict_expired(now)
            window = self._windows.get(key)
            if window is None:
                self._windows[key] = _Window(count=1, reset_at=now + self.window_seconds)
                return True

            if window.count >= self.max_requests:
                return False

            window.count += 1
            return True

    def reset(self, key: str | None = None) -> None:
        with self._lock:
            if key is None:
                self._windows.clear()
            else:
                self._windows.pop(key, None)


class RedisRateLimiter:
    def __init__(
        self,
        client: object,
        max_requests: int,
        window_seconds: int,
        key_prefix: str,
    ) -> None:
        self._client = client
        self._max_requests = max_requests
        self._window_seconds = window_seconds
        self._key_prefix = key_prefix

    def _key(self, key: str) -> str:
        return f"{self._key_prefix}:{key}"

    def check(self, key: str) -> bool:
        redis_key = self._key(key)
        count = int(self._client.incr(redis_key))
        if count == 1:
            self._client.expire(redis_key, self._window_seconds)
        return count <= self._max_requests

    def reset(self, key: str | None = None) -> None:
        if key is None:
            for redis_key in self._client.scan_iter(f"{self._key_prefix}:*"):
                self._client.delete(redis_key)
            return
        self._client.delete(self._key(key))


def _build_redis_client(url: str) -> object | None:
    if importlib.util.find_spec("redis") is None:
        return None

    redis_module = importlib.import_module("redis")
    redis_constructor = getattr(redis_module, "Redis", None)
    if redis_constructor is None:
        return None
    return redis_constructor.from_url(url)


def resolve_rate_limiter(settings: AppSettings) -> RateLimiter:
    if settings.RATE_LIMIT_BACKEND == "none":
        return NoopRateLimiter()

    if settings.RATE_LIMIT_BACKEND == "redis":
        client = _build_redis_client(settings.RATE_LIMIT_REDIS_URL)
        if client is not None:
            return RedisRateLimiter(
                client=client,
                max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
                window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
                key_prefix=settings.RATE_LIMIT_KEY_PREFIX,
            )

    return InMemoryRateLimiter(
        max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
        window_seconds=float(settings.RATE_LIMIT_WINDOW_SECONDS),
    )
