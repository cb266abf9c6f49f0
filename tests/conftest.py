"""
Shared fixtures: an in-memory fetcher and a manually advanced clock
"""

from typing import Dict, List, Optional

import pytest

from compliance_probe.core.config import ProbeConfig
from compliance_probe.models.probe import FetchResult


class FakeClock:
    """Monotonic clock in seconds that only moves when told to"""

    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: int):
        self.now += ms / 1000


class FakeFetcher:
    """
    Serves registered pages from memory

    Unknown URLs answer 404. Every call advances the clock by ``latency_ms``.
    """

    def __init__(self, clock: Optional[FakeClock] = None, latency_ms: int = 0):
        self.pages: Dict[str, FetchResult] = {}
        self.calls: List[str] = []
        self.clock = clock
        self.latency_ms = latency_ms

    def add(self, url: str, content: str = "", headers: Optional[Dict[str, str]] = None, status: int = 200):
        self.pages[url] = FetchResult(
            url=url,
            content=content,
            headers={name.lower(): value for name, value in (headers or {}).items()},
            status_code=status,
        )

    def fail(self, url: str, error: str):
        self.pages[url] = FetchResult(url=url, error=error)

    async def fetch(self, url, timeout_ms=None, max_bytes=None, accept=None, treat_error_status_as_data=False):
        self.calls.append(url)
        if self.clock is not None:
            self.clock.advance(self.latency_ms)

        page = self.pages.get(url)
        if page is None:
            page = FetchResult(url=url, status_code=404)

        result = FetchResult(
            url=url,
            content=page.content,
            headers=dict(page.headers),
            status_code=page.status_code,
            error=page.error,
        )
        if max_bytes is not None and len(result.content) > max_bytes:
            result.content = result.content[:max_bytes]
            result.truncated = True
        if result.error is None and (result.status_code or 0) >= 400 and not treat_error_status_as_data:
            result.error = f"Request failed with status {result.status_code}"
        return result


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fetcher(clock):
    return FakeFetcher(clock=clock)


@pytest.fixture
def probe_config():
    return ProbeConfig()
