from cartilha_app.chat.rate_limit import (
    InMemoryRateLimiter,
    NoopRateLimiter,
    resolve_rate_limiter,
)
from cartilha_app.config import AppSettings


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_in_memory_limiter_blocks_after_max_requests() -> None:
    clock = FakeClock()
    limiter = InMemoryRateLimiter(max_requests=2, window_seconds=60, clock=clock)

    assert limiter.check("1.2.3.4") is True
    assert limiter.check("1.2.3.4") is True
    assert limiter.check("1.2.3.4") is False
    assert limiter.check("5.6.7.8") is True

    clock.now += 61
    assert limiter.check("1.2.3.4") is True


def test_in_memory_limiter_reset() -> None:
    limiter = InMemoryRateLimiter(max_requests=1, window_seconds=60, clock=FakeClock())

    assert limiter.check("cliente") is True
    assert limiter.check("cliente") is False

    limiter.reset("cliente")
    assert limiter.check("cliente") is True

    limiter.reset()
    assert limiter.check("cliente") is True


def test_resolve_rate_limiter_by_backend() -> None:
    assert isinstance(
        resolve_rate_limiter(AppSettings(RATE_LIMIT_BACKEND="none")),
        NoopRateLimiter,
    )

    limiter = resolve_rate_limiter(
        AppSettings(RATE_LIMIT_BACKEND="memory", RATE_LIMIT_MAX_REQUESTS=3)
    )
    assert isinstance(limiter, InMemoryRateLimiter)
    assert limiter.max_requests == 3
