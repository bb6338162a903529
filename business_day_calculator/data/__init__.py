"""
Data models and loaders for the business day calculator.
"""

from business_day_calculator.data.schemas import (
    BusinessDayConfig,
    BusinessDayRange,
    BusinessDaySummary,
    ClosingSummary,
    ClosingWindow,
    Config,
    PaymentMethodStats,
    SchedulerStatus,
    TillStats,
    TimeOfDay,
    Transaction,
    to_wall_clock,
)

__all__ = [
    "BusinessDayConfig",
    "BusinessDayRange",
    "BusinessDaySummary",
    "ClosingSummary",
    "ClosingWindow",
    "Config",
    "PaymentMethodStats",
    "SchedulerStatus",
    "TillStats",
    "TimeOfDay",
    "Transaction",
    "to_wall_clock",
]
