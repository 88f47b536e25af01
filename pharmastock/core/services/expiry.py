"""Expiry windows and reporting date ranges."""

import calendar
from datetime import date, datetime, timedelta
from enum import Enum
from typing import TypeVar

D = TypeVar("D", bound=date)


class ExpiryWindow(str, Enum):
    """Look-ahead windows for the "expiring soon" catalog filter."""

    THIRTY_DAYS = "30days"
    SIX_MONTHS = "6months"


class SalesRange(str, Enum):
    """Named look-back ranges for sales history."""

    TODAY = "Today"
    LAST_7_DAYS = "Last 7 Days"
    LAST_30_DAYS = "Last 30 Days"
    LAST_3_MONTHS = "Last 3 Months"
    LAST_YEAR = "Last Year"


def add_months(moment: D, months: int) -> D:
    """Shift by whole calendar months, clamping the day to the target month."""
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def expiry_window_bounds(window: ExpiryWindow, now: datetime) -> tuple[datetime, datetime]:
    """Return (now, now + window) for an expiry filter."""
    if window is ExpiryWindow.THIRTY_DAYS:
        return now, now + timedelta(days=30)
    return now, add_months(now, 6)


def sales_range_bounds(
    sales_range: SalesRange | None, now: datetime
) -> tuple[datetime, datetime]:
    """Return (start, now) for a named range; unknown or missing means 30 days."""
    if sales_range is SalesRange.TODAY:
        start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    elif sales_range is SalesRange.LAST_7_DAYS:
        start = now - timedelta(days=7)
    elif sales_range is SalesRange.LAST_3_MONTHS:
        start = add_months(now, -3)
    elif sales_range is SalesRange.LAST_YEAR:
        start = add_months(now, -12)
    else:
        start = now - timedelta(days=30)
    return start, now
