"""
Core business logic for business day calculation.
"""

from business_day_calculator.core.calculator import (
    BusinessDayCalculator,
    business_day_range,
    business_days_in_range,
    hours_in_business_day,
    transaction_business_day,
)
from business_day_calculator.core.closing import (
    calculate_closing_summary,
    current_business_day_start,
    group_by_business_day,
)
from business_day_calculator.core.scheduler import BusinessDayScheduler
from business_day_calculator.core.time_parser import (
    parse_time_of_day,
    parse_time_of_day_strict,
)

__all__ = [
    "BusinessDayCalculator",
    "BusinessDayScheduler",
    "business_day_range",
    "business_days_in_range",
    "calculate_closing_summary",
    "current_business_day_start",
    "group_by_business_day",
    "hours_in_business_day",
    "parse_time_of_day",
    "parse_time_of_day_strict",
    "transaction_business_day",
]
