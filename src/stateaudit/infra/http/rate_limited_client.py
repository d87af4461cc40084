import threading
import time

import httpx


class RateLimitedClient:
    """HTTP client with simple interval-based rate limiting."""

    def __init__(self, rate_per_second: float = 5.0, timeout: float = 30.0) -> None:
        self._min_interval = 1.0 / rate_per_second
        self._last_request_time = 0.0
        self._lock = threading.Lock()
        self._client = httpx.Client(timeout=timeout)

    def _wait_for_slot(self) -> None:
        with self._lock:
            now = time.monotonic()
            elapsed = now - self._last_request_time
            if elapsed < self._min_interval:
                time.sleep(self._min_interval - elapsed)
            self._last_request_time = time.monotonic()

    def get(self, url: str, params: dict | None = None) -> httpx.Response:
        self._wait_for_slot()
        return self._client.get(url, params=params)

    def post(self, url: str, json: dict | list | None = None) -> httpx.Response:
        self._wait_for_slot()
        return self._client.post(url, json=json)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "RateLimitedClient":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
