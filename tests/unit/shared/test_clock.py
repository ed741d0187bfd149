from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from shared.domain.clock import FrozenClock, SystemClock

pytestmark = pytest.mark.unit

T0 = datetime(2026, 1, 1, tzinfo=timezone.utc)


class TestFrozenClock:
    def test_returns_fixed_instant(self):
        clock = FrozenClock(T0)
        assert clock.now() == T0
        assert clock.now() == T0

    def test_tick_advances_each_reading(self):
        clock = FrozenClock(T0, tick=timedelta(seconds=5))
        assert clock.now() == T0
        assert clock.now() == T0 + timedelta(seconds=5)

    def test_advance(self):
        clock = FrozenClock(T0)
        clock.advance(timedelta(hours=1))
        assert clock.now() == T0 + timedelta(hours=1)

    def test_rejects_naive_datetime(self):
        with pytest.raises(ValueError):
            FrozenClock(datetime(2026, 1, 1))


def test_system_clock_is_timezone_aware():
    assert SystemClock().now().tzinfo is not None
