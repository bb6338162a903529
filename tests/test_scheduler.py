"""
Tests for the automatic business day closing scheduler.
"""

from datetime import datetime, timedelta

import pytest

from business_day_calculator.core.scheduler import (
    BusinessDayScheduler,
    closing_window,
    next_scheduled_close,
    seconds_until_next_minute,
)
from business_day_calculator.data.schemas import BusinessDayConfig, Config


@pytest.fixture
def night_settings():
    """Bar open from 22:00 to 05:00 with automatic closing."""
    return Config(auto_start_time="22:00", business_day_end_hour="05:00", auto_close_enabled=True)


@pytest.fixture
def closed_windows():
    """Collects the windows passed to the close handler."""
    return []


@pytest.fixture
def scheduler(night_settings, closed_windows):
    """Scheduler wired to fixed settings and a collecting handler."""
    sched = BusinessDayScheduler(lambda: night_settings, closed_windows.append)
    sched.start()
    return sched


class TestClosingWindow:
    """Tests for closing_window."""

    def test_overnight_started_yesterday(self):
        config = BusinessDayConfig(auto_start_time="22:00", business_day_end_hour="05:00")
        now = datetime(2024, 3, 16, 5, 0, 12)

        window = closing_window(now, config)

        assert window.start == datetime(2024, 3, 15, 22, 0)
        assert window.end == now

    def test_same_day_started_today(self):
        config = BusinessDayConfig(auto_start_time="09:00", business_day_end_hour="17:00")
        now = datetime(2024, 3, 15, 17, 0)

        assert closing_window(now, config).start == datetime(2024, 3, 15, 9, 0)

    def test_no_end_hour_is_a_full_day(self):
        config = BusinessDayConfig(auto_start_time="06:00")
        now = datetime(2024, 3, 15, 6, 0)

        assert closing_window(now, config).start == datetime(2024, 3, 14, 6, 0)


class TestNextScheduledClose:
    """Tests for next_scheduled_close."""

    def test_later_today(self):
        assert next_scheduled_close(datetime(2024, 3, 15, 3, 0), "05:00") == datetime(
            2024, 3, 15, 5, 0
        )

    def test_tomorrow_when_passed(self):
        assert next_scheduled_close(datetime(2024, 3, 15, 6, 0), "05:00") == datetime(
            2024, 3, 16, 5, 0
        )

    def test_tomorrow_when_exactly_now(self):
        assert next_scheduled_close(datetime(2024, 3, 15, 5, 0), "05:00") == datetime(
            2024, 3, 16, 5, 0
        )


class TestSecondsUntilNextMinute:
    """Tests for seconds_until_next_minute."""

    def test_mid_minute(self):
        assert seconds_until_next_minute(datetime(2024, 3, 16, 4, 59, 30)) == 30

    def test_start_of_minute(self):
        assert seconds_until_next_minute(datetime(2024, 3, 16, 5, 0)) == 60

    def test_fractional_seconds(self):
        result = seconds_until_next_minute(datetime(2024, 3, 16, 4, 59, 59, 500000))
        assert result == pytest.approx(0.5)


class TestBusinessDayScheduler:
    """Tests for BusinessDayScheduler."""

    def test_closes_at_end_hour(self, scheduler, closed_windows):
        window = scheduler.check(datetime(2024, 3, 16, 5, 0, 3))

        assert window is not None
        assert window.start == datetime(2024, 3, 15, 22, 0)
        assert closed_windows == [window]
        assert scheduler.last_close_time == datetime(2024, 3, 16, 5, 0, 3)

    def test_does_nothing_at_other_times(self, scheduler, closed_windows):
        assert scheduler.check(datetime(2024, 3, 16, 4, 59)) is None
        assert scheduler.check(datetime(2024, 3, 16, 5, 1)) is None
        assert closed_windows == []

    def test_no_duplicate_within_a_minute(self, scheduler, closed_windows):
        first = datetime(2024, 3, 16, 5, 0, 0)
        scheduler.check(first)
        scheduler.check(first + timedelta(seconds=30))

        assert len(closed_windows) == 1

    def test_closes_again_next_day(self, scheduler, closed_windows):
        scheduler.check(datetime(2024, 3, 16, 5, 0))
        scheduler.check(datetime(2024, 3, 17, 5, 0))

        assert len(closed_windows) == 2

    def test_disabled(self, closed_windows):
        settings = Config(auto_start_time="22:00", business_day_end_hour="05:00")
        sched = BusinessDayScheduler(lambda: settings, closed_windows.append)

        assert sched.check(datetime(2024, 3, 16, 5, 0)) is None
        assert closed_windows == []

    def test_no_settings(self, closed_windows):
        sched = BusinessDayScheduler(lambda: None, closed_windows.append)

        assert sched.check(datetime(2024, 3, 16, 5, 0)) is None
        assert sched.force_close(datetime(2024, 3, 16, 5, 0)) is None

    def test_handler_error_is_contained(self, night_settings):
        def failing_handler(window):
            raise RuntimeError("database unavailable")

        sched = BusinessDayScheduler(lambda: night_settings, failing_handler)

        assert sched.check(datetime(2024, 3, 16, 5, 0)) is None
        assert sched.is_closing_in_progress is False
        assert sched.last_close_time is None

    def test_force_close(self, scheduler, closed_windows):
        window = scheduler.force_close(datetime(2024, 3, 16, 2, 0))

        assert window.start == datetime(2024, 3, 15, 22, 0)
        assert window.end == datetime(2024, 3, 16, 2, 0)
        assert len(closed_windows) == 1

    def test_status(self, scheduler):
        status = scheduler.status(datetime(2024, 3, 16, 3, 0))

        assert status.is_running is True
        assert status.is_closing_in_progress is False
        assert status.auto_close_enabled is True
        assert status.business_day_end_hour == "05:00"
        assert status.next_scheduled_close == datetime(2024, 3, 16, 5, 0)

    def test_status_when_stopped(self, scheduler):
        scheduler.stop()
        status = scheduler.status(datetime(2024, 3, 16, 3, 0))

        assert status.is_running is False
        assert status.next_scheduled_close is None
