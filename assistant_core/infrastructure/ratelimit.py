"""聊天接口的请求限流。

按客户端地址计数，任意 window_seconds 秒内最多放行 max_requests 次；
超出时抛出 RateLimitError，由 API 层映射为 429。
进程内计数，多进程部署时每个进程各自计数。
"""

import math
import time
from collections import deque
from threading import Lock
from typing import Callable, Deque, Dict

from assistant_core.domain.exceptions import RateLimitError


class RequestRateLimiter:
    """滑动窗口限流器。"""

    def __init__(
        self,
        window_seconds: float,
        max_requests: int,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.window_seconds = window_seconds
        self.max_requests = max_requests
        self._clock = clock
        self._hits: Dict[str, Deque[float]] = {}
        self._lock = Lock()

    def hit(self, key: str) -> None:
        """记录一次请求，超出配额时抛出 RateLimitError。"""

        now = self._clock()
        with self._lock:
            hits = self._hits.setdefault(key, deque())
            while hits and now - hits[0] >= self.window_seconds:
                hits.popleft()
            if len(hits) >= self.max_requests:
                retry_after = max(1, math.ceil(self.window_seconds - (now - hits[0])))
                raise RateLimitError(
                    code="RATE_LIMITED",
                    message="Too many requests, please try again later.",
                    retry_after=retry_after,
                )
            hits.append(now)
            self._evict_idle(now)

    def _evict_idle(self, now: float) -> None:
        idle = [k for k, v in self._hits.items() if not v or now - v[-1] >= self.window_seconds]
        for k in idle:
            self._hits.pop(k, None)
