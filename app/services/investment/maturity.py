"""
Investment maturity math.

Elapsed time is measured in the product's period unit:

- day / week: elapsed milliseconds divided by the unit length
- month: calendar month difference plus day-of-month difference / 30.44

The month rule is a fractional approximation kept for compatibility
with existing investments; it is not a strict calendar month.
"""

from datetime import datetime
from decimal import ROUND_DOWN, Decimal

from app.config.business_constants import (
    DAYS_PER_MONTH_APPROXIMATION,
    MONEY_QUANTUM,
    MS_PER_DAY,
    MS_PER_WEEK,
)
from app.models.enums import ReturnPeriodUnit
from app.utils.datetime_utils import ensure_utc


def elapsed_periods(
    last_return_date: datetime,
    now: datetime,
    unit: ReturnPeriodUnit | str,
) -> float:
    """
    Compute elapsed time since last return in period units.

    Args:
        last_return_date: Last applied return (or creation time)
        now: Evaluation time
        unit: Period unit of the product

    Returns:
        Elapsed periods (may be fractional or negative)

    Raises:
        ValueError: Unknown period unit
    """
    unit = ReturnPeriodUnit(unit)
    last = ensure_utc(last_return_date)
    now = ensure_utc(now)

    if unit is ReturnPeriodUnit.MONTH:
        months = (now.year - last.year) * 12 + (now.month - last.month)
        days = (now.day - last.day) / DAYS_PER_MONTH_APPROXIMATION
        return months + days

    diff_ms = (now - last).total_seconds() * 1000
    if unit is ReturnPeriodUnit.WEEK:
        return diff_ms / MS_PER_WEEK
    return diff_ms / MS_PER_DAY


def is_return_due(
    last_return_date: datetime,
    now: datetime,
    unit: ReturnPeriodUnit | str,
    return_period: int,
) -> bool:
    """Check whether a full return period has elapsed."""
    return elapsed_periods(last_return_date, now, unit) >= return_period


def calculate_return_amount(
    amount_invested: Decimal, return_rate: Decimal
) -> Decimal:
    """
    Return paid for one period.

    Args:
        amount_invested: Investment principal
        return_rate: Percent per period

    Returns:
        Return amount truncated to ledger precision
    """
    return (amount_invested * return_rate / Decimal("100")).quantize(
        MONEY_QUANTUM, rounding=ROUND_DOWN
    )


def investment_idempotency_key(
    investment_id: int, last_return_date: datetime
) -> str:
    """Key identifying one return period of an investment."""
    return f"investment:{investment_id}:{ensure_utc(last_return_date).isoformat()}"
