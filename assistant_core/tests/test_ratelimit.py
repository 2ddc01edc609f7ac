import pytest

from assistant_core.domain.exceptions import RateLimitError
from assistant_core.infrastructure.ratelimit import RequestRateLimiter


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_allows_up_to_limit_then_rejects():
    clock = FakeClock()
    limiter = RequestRateLimiter(window_seconds=60, max_requests=3, clock=clock)
    for _ in range(3):
        limiter.hit("1.2.3.4")
    with pytest.raises(RateLimitError) as exc_info:
        limiter.hit("1.2.3.4")
    assert exc_info.value.http_status == 429
    assert exc_info.value.extra["retry_after"] == 60


def test_keys_are_independent():
    limiter = RequestRateLimiter(window_seconds=60, max_requests=1, clock=FakeClock())
    limiter.hit("a")
    limiter.hit("b")
    with pytest.raises(RateLimitError):
        limiter.hit("a")


def test_window_slides():
    clock = FakeClock()
    limiter = RequestRateLimiter(window_seconds=60, max_requests=2, clock=clock)
    limiter.hit("a")
    clock.now += 30
    limiter.hit("a")
    clock.now += 31
    limiter.hit("a")
    with pytest.raises(RateLimitError) as exc_info:
        limiter.hit("a")
    assert exc_info.value.extra["retry_after"] == 29
