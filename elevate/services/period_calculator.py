"""Monthly billing period enumeration and first-month pro-ration.

A period is a calendar month identified by its first day. Aware datetimes are
converted to UTC before taking the calendar month: 2024-04-01T02:00+05:30 is
2024-03-31 in UTC and bills from March.
"""

import calendar
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import TYPE_CHECKING, Iterator

from elevate.services.errors import MalformedDateError
from elevate.services.money import ZERO, round_half_up, to_decimal

if TYPE_CHECKING:
    from elevate.services.rate_resolver import ChargeRate


def parse_date(value: object) -> date:
    """Interpret a stored date value.

    Accepts ``date``, ``datetime`` (converted to UTC when aware) and ISO 8601 strings
    ("2024-03-15", "2024-03-15T10:30:00Z").

    Raises:
        MalformedDateError: If the value cannot be interpreted as a date
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip()
        try:
            if len(text) == 10:
                return date.fromisoformat(text)
            return parse_date(datetime.fromisoformat(text.replace("Z", "+00:00")))
        except ValueError as e:
            raise MalformedDateError(value) from e
    raise MalformedDateError(value)


def month_start(value: object) -> date:
    """First day of the (UTC) calendar month containing ``value``."""
    return parse_date(value).replace(day=1)


def next_month(period: date) -> date:
    """First day of the month after ``period``."""
    if period.month == 12:
        return date(period.year + 1, 1, 1)
    return date(period.year, period.month + 1, 1)


def enumerate_periods(start_date: object, horizon: object) -> Iterator[date]:
    """Yield first-of-month dates from the month of ``start_date`` through ``horizon``'s month.

    Each call returns a fresh generator, so the sequence can be restarted. A start after
    the horizon yields nothing.
    """
    period = month_start(start_date)
    last = month_start(horizon)
    while period <= last:
        yield period
        period = next_month(period)


def is_standalone(community_type: str | None) -> bool:
    return "standalone" in (community_type or "").lower()


def monthly_total(community_type: str | None, rate: "ChargeRate", flat_size: object) -> Decimal:
    """Full monthly charge for a unit before pro-ration.

    Standalone communities bill the fixed amount; all others bill rate * floor area.
    A missing floor area bills nothing.
    """
    if is_standalone(community_type):
        return rate.fixed_amount
    size = to_decimal(flat_size)
    if size is None:
        return ZERO
    return rate.rate_per_area * size


def compute_amount(monthly_total: object, period_date: object, start_date: object) -> int | None:
    """Amount to bill for one period.

    Outside the start month the full monthly total is billed. In the start month the
    total is pro-rated by days active (start day inclusive) over days in the month; a
    unit that starts on the 1st is billed the full month.

    Returns:
        Rounded amount, or None when the monthly total is not positive (period skipped)
    """
    total = to_decimal(monthly_total)
    if total is None or total <= 0:
        return None

    start = parse_date(start_date)
    period = month_start(period_date)
    if (period.year, period.month) != (start.year, start.month):
        return round_half_up(total)

    days_in_month = calendar.monthrange(start.year, start.month)[1]
    days_active = days_in_month - start.day + 1
    if 0 < days_active < days_in_month:
        return round_half_up(total * days_active / days_in_month)
    return round_half_up(total)


__all__ = [
    "parse_date",
    "month_start",
    "next_month",
    "enumerate_periods",
    "is_standalone",
    "monthly_total",
    "compute_amount",
]
