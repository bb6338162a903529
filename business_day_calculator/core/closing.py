"""
Daily closing summaries and per-business-day grouping of transactions.
"""

from collections import defaultdict
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from business_day_calculator.core.calculator import (
    business_day_range,
    transaction_business_day,
)
from business_day_calculator.core.time_parser import TimeParser, parse_time_of_day
from business_day_calculator.data.schemas import (
    BusinessDayConfig,
    BusinessDaySummary,
    ClosingSummary,
    PaymentMethodStats,
    TillStats,
    Transaction,
)


def till_key(transaction: Transaction) -> str:
    """Key a transaction's till as '<till_id>-<till_name>'."""
    return f"{transaction.till_id}-{transaction.till_name}"


def summarize(transactions: Iterable[Transaction]) -> ClosingSummary:
    """
    Aggregate transactions into a closing summary.

    Args:
        transactions: Transactions to aggregate, all of them are counted.

    Returns:
        ClosingSummary with totals per payment method and per till.
    """
    summary = ClosingSummary()

    for transaction in transactions:
        summary.transactions += 1
        summary.total_sales += transaction.total
        summary.total_tax += transaction.tax
        summary.total_tips += transaction.tip

        method = summary.payment_methods.setdefault(
            transaction.payment_method, PaymentMethodStats()
        )
        method.count += 1
        method.total += transaction.total

        till = summary.tills.setdefault(till_key(transaction), TillStats())
        till.transactions += 1
        till.total += transaction.total

    return summary


def calculate_closing_summary(
    transactions: Iterable[Transaction],
    start: datetime,
    end: datetime,
) -> ClosingSummary:
    """
    Summarize the transactions made between two instants.

    Args:
        transactions: Candidate transactions.
        start: First instant included.
        end: First instant excluded.

    Returns:
        ClosingSummary of the transactions with start <= created_at < end.
    """
    return summarize(t for t in transactions if start <= t.created_at < end)


def group_by_business_day(
    transactions: Iterable[Transaction],
    config: BusinessDayConfig,
    parser: TimeParser = parse_time_of_day,
) -> List[BusinessDaySummary]:
    """
    Summarize transactions per business day.

    Args:
        transactions: Transactions to group.
        config: Business day configuration.
        parser: Time string parser.

    Returns:
        One BusinessDaySummary per business day that has transactions,
        ordered by business day.
    """
    buckets: Dict[datetime, List[Transaction]] = defaultdict(list)
    for transaction in transactions:
        key = transaction_business_day(transaction.created_at, config, parser)
        buckets[key].append(transaction)

    return [
        BusinessDaySummary(
            business_day=business_day,
            window=business_day_range(business_day, config, parser),
            summary=summarize(buckets[business_day]),
        )
        for business_day in sorted(buckets)
    ]


def current_business_day_start(
    now: datetime,
    config: BusinessDayConfig,
    last_manual_close: Optional[datetime] = None,
    parser: TimeParser = parse_time_of_day,
) -> datetime:
    """
    Start of the business day in progress at a given instant.

    A manual close during the business day starts a new period, so the
    more recent of the automatic cutoff and the last manual close wins.
    """
    cutoff = transaction_business_day(now, config, parser)

    if last_manual_close is not None and last_manual_close > cutoff:
        return last_manual_close

    return cutoff


def is_within_business_day(timestamp: datetime, business_day_start: datetime) -> bool:
    """Whether a timestamp is on or after the business day start."""
    return timestamp >= business_day_start
