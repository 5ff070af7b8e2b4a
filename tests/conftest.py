from typing import Dict, Union

import pytest

from log2abuse.lookup import AbuseLookupEngine, RateLimiter
from tests.helpers import FakeClock, FakeSource


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_engine(fake_clock):
    """构建使用假查询源与假时钟的查询引擎"""
    def _make(responses: Dict[str, Union[str, Exception]], duration: float = 0.0) -> AbuseLookupEngine:
        source = FakeSource(responses, clock=fake_clock, duration=duration)
        limiter = RateLimiter(min_interval=1.0, clock=fake_clock, sleep=fake_clock.sleep)
        return AbuseLookupEngine(source=source, limiter=limiter)
    return _make
