"""
Business day calculations.

A business day is the trading period of a venue. It starts at the configured
auto start time and may run past midnight, so a sale made at 02:00 on a
Wednesday can belong to Tuesday's business day. Every function here is pure;
the configuration is always passed in explicitly.
"""

from datetime import date, datetime, time, timedelta
from typing import List, Optional, Union

from business_day_calculator.core.time_parser import TimeParser, parse_time_of_day
from business_day_calculator.data.schemas import (
    BusinessDayConfig,
    BusinessDayRange,
    TimeOfDay,
)

DateLike = Union[date, datetime]

ONE_DAY = timedelta(days=1)

# Seconds and microseconds applied to the last minute of a business day
END_OF_MINUTE = timedelta(seconds=59, microseconds=999000)


def _midnight(day: DateLike) -> datetime:
    """Return midnight of the given calendar day, keeping any tzinfo."""
    if isinstance(day, datetime):
        return datetime.combine(day.date(), time.min, tzinfo=day.tzinfo)
    return datetime.combine(day, time.min)


def _as_date(day: DateLike) -> date:
    if isinstance(day, datetime):
        return day.date()
    return day


def _at(day: DateLike, time_of_day: TimeOfDay) -> datetime:
    """
    Return the calendar day at the given time of day.

    Hours and minutes are added to midnight rather than set directly, so
    out-of-range values roll over into the following days.
    """
    return _midnight(day) + timedelta(hours=time_of_day.hour, minutes=time_of_day.minute)


def end_time_source(config: BusinessDayConfig) -> str:
    return config.business_day_end_hour or config.auto_start_time


def crosses_midnight(start_time: TimeOfDay, end_time: TimeOfDay) -> bool:
    """
    Whether a business day with these times ends on the next calendar day.

    Equal start and end times count as crossing: that is a full 24 hour day.
    """
    return end_time.as_tuple() <= start_time.as_tuple()


def business_day_range(
    day: DateLike,
    config: BusinessDayConfig,
    parser: TimeParser = parse_time_of_day,
) -> BusinessDayRange:
    """
    Calculate the range of the business day starting on a calendar date.

    Args:
        day: Anchor date. The time of day of a datetime is ignored.
        config: Business day configuration.
        parser: Time string parser.

    Returns:
        BusinessDayRange from the start time (seconds zeroed) to the end
        time at :59.999, on the next calendar day when the day crosses
        midnight.
    """
    start_time = parser(config.auto_start_time)
    end_time = parser(end_time_source(config))

    start = _at(day, start_time)

    end_day = _midnight(day)
    if crosses_midnight(start_time, end_time):
        end_day += ONE_DAY
    end = _at(end_day, end_time) + END_OF_MINUTE

    return BusinessDayRange(start=start, end=end)


def transaction_business_day(
    timestamp: datetime,
    config: BusinessDayConfig,
    parser: TimeParser = parse_time_of_day,
) -> datetime:
    """
    Find the business day a transaction belongs to.

    Only the auto start time is used; the end hour does not affect
    bucketing.

    Args:
        timestamp: Transaction timestamp.
        config: Business day configuration.
        parser: Time string parser.

    Returns:
        Start instant of the business day, used as its identifier.
    """
    start_time = parser(config.auto_start_time)

    same_day_start = _at(timestamp, start_time)
    prev_day_start = _at(_midnight(timestamp) - ONE_DAY, start_time)

    if timestamp < same_day_start:
        return prev_day_start

    return same_day_start


def business_days_in_range(
    start_date: DateLike,
    end_date: DateLike,
    config: BusinessDayConfig,
    parser: TimeParser = parse_time_of_day,
) -> List[BusinessDayRange]:
    """
    List the business days anchored on each calendar day of a period.

    Args:
        start_date: First anchor date (inclusive). A datetime keeps its
            tzinfo in the returned ranges.
        end_date: Last anchor date (inclusive), only its calendar date is
            compared.
        config: Business day configuration.
        parser: Time string parser.

    Returns:
        One BusinessDayRange per calendar day in ascending order, empty if
        start_date is after end_date.
    """
    ranges: List[BusinessDayRange] = []
    current = start_date
    last = _as_date(end_date)

    while _as_date(current) <= last:
        ranges.append(business_day_range(current, config, parser))
        current += ONE_DAY

    return ranges


def hours_in_business_day(
    auto_start_time: str,
    business_day_end_hour: Optional[str] = None,
    parser: TimeParser = parse_time_of_day,
) -> int:
    """
    Number of whole hours in a business day, for display.

    Minutes are ignored. A result of zero or less means the day crosses
    midnight and 24 is added.
    """
    start_hours = parser(auto_start_time).hour
    end_hours = parser(business_day_end_hour or auto_start_time).hour

    hours = end_hours - start_hours
    if hours <= 0:
        hours += 24

    return hours


class BusinessDayCalculator:
    """Business day calculations bound to one venue configuration."""

    def __init__(
        self,
        config: BusinessDayConfig,
        parser: TimeParser = parse_time_of_day,
    ):
        """
        Initialize the calculator.

        Args:
            config: Business day configuration of the venue.
            parser: Time string parser, lenient by default.
        """
        self.config = config
        self.parser = parser

    def range_for(self, day: DateLike) -> BusinessDayRange:
        """Range of the business day anchored on a calendar date."""
        return business_day_range(day, self.config, self.parser)

    def business_day_of(self, timestamp: datetime) -> datetime:
        """Business day identifier of a transaction timestamp."""
        return transaction_business_day(timestamp, self.config, self.parser)

    group_key = business_day_of

    def range_for_timestamp(self, timestamp: datetime) -> BusinessDayRange:
        """Range of the business day a timestamp is bucketed into."""
        return self.range_for(self.business_day_of(timestamp))

    def days_between(self, start_date: DateLike, end_date: DateLike) -> List[BusinessDayRange]:
        """Business days anchored on each calendar day of a period."""
        return business_days_in_range(start_date, end_date, self.config, self.parser)

    def hours(self) -> int:
        """Number of whole hours in the configured business day."""
        return hours_in_business_day(
            self.config.auto_start_time,
            self.config.business_day_end_hour,
            self.parser,
        )

    @property
    def is_overnight(self) -> bool:
        """Whether the configured business day ends on the next calendar day."""
        return crosses_midnight(
            self.parser(self.config.auto_start_time),
            self.parser(end_time_source(self.config)),
        )
