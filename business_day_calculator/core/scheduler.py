"""
Automatic business day closing.

The scheduler does not own a timer. Whoever hosts it (a cron job, an
APScheduler job, a loop in a worker) calls check() once a minute; the
scheduler decides whether the business day ends at that minute and, if so,
hands the closing window to the on_close callback.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Optional

from business_day_calculator.core.calculator import crosses_midnight, end_time_source
from business_day_calculator.core.time_parser import TimeParser, parse_time_of_day
from business_day_calculator.data.schemas import (
    BusinessDayConfig,
    ClosingWindow,
    Config,
    SchedulerStatus,
)

logger = logging.getLogger(__name__)

SettingsProvider = Callable[[], Optional[Config]]
CloseHandler = Callable[[ClosingWindow], Any]

# Minimum time between two automatic closes
DUPLICATE_CLOSE_GUARD = timedelta(seconds=60)


def seconds_until_next_minute(now: datetime) -> float:
    """Seconds from now to the start of the next minute, for check() loops."""
    return 60 - now.second - now.microsecond / 1_000_000


def _today_at(now: datetime, hour: int, minute: int) -> datetime:
    return now.replace(hour=0, minute=0, second=0, microsecond=0) + timedelta(
        hours=hour, minutes=minute
    )


def closing_window(
    now: datetime,
    config: BusinessDayConfig,
    parser: TimeParser = parse_time_of_day,
) -> ClosingWindow:
    """
    Determine the business day that ends at a given instant.

    Args:
        now: Instant of the closing.
        config: Business day configuration.
        parser: Time string parser.

    Returns:
        ClosingWindow starting at the auto start time, yesterday for
        business days that cross midnight and today otherwise, and ending
        at now.
    """
    start_time = parser(config.auto_start_time)
    end_time = parser(end_time_source(config))

    start = _today_at(now, start_time.hour, start_time.minute)
    if crosses_midnight(start_time, end_time):
        start -= timedelta(days=1)

    return ClosingWindow(start=start, end=now)


def next_scheduled_close(
    now: datetime,
    business_day_end_hour: str,
    parser: TimeParser = parse_time_of_day,
) -> datetime:
    """
    Next instant at which the business day ends.

    Today at the end hour, or tomorrow if that has already passed.
    """
    end_time = parser(business_day_end_hour)
    candidate = _today_at(now, end_time.hour, end_time.minute)

    if candidate <= now:
        candidate += timedelta(days=1)

    return candidate


class BusinessDayScheduler:
    """Decides when to close the business day and triggers the closing."""

    def __init__(
        self,
        settings_provider: SettingsProvider,
        on_close: CloseHandler,
        parser: TimeParser = parse_time_of_day,
    ):
        """
        Initialize the scheduler.

        Args:
            settings_provider: Returns the current venue settings, or None
                when no settings exist yet.
            on_close: Called with the ClosingWindow of every closing.
            parser: Time string parser.
        """
        self.settings_provider = settings_provider
        self.on_close = on_close
        self.parser = parser
        self.is_running = False
        self.is_closing_in_progress = False
        self.last_close_time: Optional[datetime] = None

    def start(self) -> None:
        """Mark the scheduler as running."""
        self.is_running = True
        logger.info("Business day scheduler started")

    def stop(self) -> None:
        """Mark the scheduler as stopped."""
        if self.is_running:
            self.is_running = False
            logger.info("Business day scheduler stopped")

    def check(self, now: datetime) -> Optional[ClosingWindow]:
        """
        Close the business day if it ends at the current minute.

        Args:
            now: Current time in the venue's timezone.

        Returns:
            The ClosingWindow that was closed, or None.
        """
        if self.is_closing_in_progress:
            return None

        settings = self.settings_provider()
        if settings is None or not settings.auto_close_enabled:
            return None

        config = settings.business_day_config()
        end_time = self.parser(end_time_source(config))
        if (now.hour, now.minute) != end_time.as_tuple():
            return None

        if self.last_close_time and now - self.last_close_time < DUPLICATE_CLOSE_GUARD:
            logger.info("Skipping auto-close, already closed within the last minute")
            return None

        return self._close(now, config)

    def force_close(self, now: datetime) -> Optional[ClosingWindow]:
        """
        Close the business day immediately.

        Returns:
            The ClosingWindow that was closed, or None if a closing is
            already in progress or no settings are available.
        """
        if self.is_closing_in_progress:
            logger.info("Cannot force close, closing already in progress")
            return None

        settings = self.settings_provider()
        if settings is None:
            logger.error("No settings found for forced closing")
            return None

        return self._close(now, settings.business_day_config())

    def _close(self, now: datetime, config: BusinessDayConfig) -> Optional[ClosingWindow]:
        self.is_closing_in_progress = True
        try:
            window = closing_window(now, config, self.parser)
            logger.info(
                "Closing business day from %s to %s",
                window.start.isoformat(),
                window.end.isoformat(),
            )
            self.on_close(window)
            self.last_close_time = now
            logger.info("Automatic business day closing completed")
            return window
        except Exception:
            logger.exception("Error during automatic closing")
            return None
        finally:
            self.is_closing_in_progress = False

    def status(self, now: datetime) -> SchedulerStatus:
        """Snapshot of the scheduler state."""
        settings = self.settings_provider()
        auto_close_enabled = bool(settings and settings.auto_close_enabled)
        end_hour = end_time_source(settings.business_day_config()) if settings else "06:00"

        next_close = None
        if self.is_running and auto_close_enabled:
            next_close = next_scheduled_close(now, end_hour, self.parser)

        return SchedulerStatus(
            is_running=self.is_running,
            is_closing_in_progress=self.is_closing_in_progress,
            last_close_time=self.last_close_time,
            auto_close_enabled=auto_close_enabled,
            business_day_end_hour=end_hour,
            next_scheduled_close=next_close,
        )
