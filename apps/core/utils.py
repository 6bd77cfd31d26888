"""Utility functions for date ranges and date coercion."""
from __future__ import annotations

import calendar
from datetime import date, datetime
from typing import Optional, Union

from dateutil import parser as date_parser


def get_month_range(year: int, month: int) -> tuple[date, date]:
    """
    Get first-last day date range for a calendar month.
    Raises ValueError for an invalid month.
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {month}")
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def coerce_date(value: Union[date, datetime, str, None]) -> Optional[date]:
    """
    Turn a date, datetime or ISO-ish string into a date.

    Returns None for empty values. Raises ValueError when a string
    cannot be parsed.
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date_parser.isoparse(value.strip()).date()
        except (ValueError, OverflowError) as exc:
            raise ValueError(f"Invalid date: {value!r}") from exc
    raise ValueError(f"Invalid date: {value!r}")
