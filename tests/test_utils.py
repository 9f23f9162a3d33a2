from datetime import UTC, date, datetime, timedelta, timezone

import pytest

from batteryguard.utils import Clock, FixedClock, SystemClock, TimeUtils, format_capacity, format_level


@pytest.mark.parametrize(
    "level, expected",
    [(100, "100%"), (49.0, "49%"), (49.37, "49.37%"), (0, "0%")],
)
def test_format_level(level: float, expected: str) -> None:
    assert format_level(level) == expected


@pytest.mark.parametrize(
    "mah, expected",
    [(2500, "2500 mAh"), (9999, "9999 mAh"), (10000, "10 Ah"), (12500, "12.5 Ah")],
)
def test_format_capacity(mah: float, expected: str) -> None:
    assert format_capacity(mah) == expected


def test_ensure_utc() -> None:
    naive = datetime(2025, 1, 1, 8, 0)
    assert TimeUtils.ensure_utc(naive) == datetime(2025, 1, 1, 8, 0, tzinfo=UTC)

    eastern = datetime(2025, 1, 1, 8, 0, tzinfo=timezone(timedelta(hours=-5)))
    converted = TimeUtils.ensure_utc(eastern)
    assert converted.hour == 13
    assert converted.utcoffset() == timedelta(0)


def test_elapsed_days_is_fractional() -> None:
    start = datetime(2025, 1, 1, tzinfo=UTC)
    assert TimeUtils.elapsed_days(start, start + timedelta(hours=36)) == 1.5
    assert TimeUtils.elapsed_days(start + timedelta(days=1), start) == -1


def test_days_between() -> None:
    assert TimeUtils.days_between(date(2025, 2, 27), date(2025, 3, 1)) == 2


def test_fixed_clock() -> None:
    clock = FixedClock(datetime(2025, 1, 1))
    assert isinstance(clock, Clock)
    assert clock.now().tzinfo is not None

    clock.advance(days=2, hours=3)
    assert clock.now() == datetime(2025, 1, 3, 3, 0, tzinfo=UTC)

    clock.set(datetime(2030, 5, 5, tzinfo=UTC))
    assert clock.now().year == 2030


def test_system_clock_is_aware() -> None:
    assert SystemClock().now().tzinfo is not None
