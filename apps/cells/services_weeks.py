"""Week bucketing of weekly reports (Monday to Sunday)."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser

from apps.core.utils import coerce_date

from .snapshot import sort_reports

# Fixed English abbreviations so labels never depend on the process locale.
MONTH_ABBR = (
    'Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
    'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec',
)

LABEL_SEPARATOR = '–'


@dataclass(frozen=True)
class WeekBucket:
    label: str
    start: date
    end: date
    reports: tuple = ()

    def __contains__(self, day):
        return self.start <= day <= self.end

    @property
    def report_count(self):
        return len(self.reports)


def week_bounds(day) -> tuple[date, date]:
    """Return the (Monday, Sunday) pair of the week containing ``day``."""
    day = coerce_date(day)
    monday = day - timedelta(days=day.isoweekday() - 1)
    return monday, monday + timedelta(days=6)


def week_label(day) -> str:
    """Label such as 'Aug 5–Aug 11, 2025'; identical for every day of a week."""
    monday, sunday = week_bounds(day)
    return (
        f'{MONTH_ABBR[monday.month - 1]} {monday.day}'
        f'{LABEL_SEPARATOR}'
        f'{MONTH_ABBR[sunday.month - 1]} {sunday.day}, {sunday.year}'
    )


def week_end_from_label(label: str) -> date:
    """Parse the Sunday back out of a week label."""
    try:
        end_part = label.split(LABEL_SEPARATOR, 1)[1]
        return date_parser.parse(end_part.strip()).date()
    except (IndexError, ValueError, OverflowError) as exc:
        raise ValueError(f"Invalid week label: {label!r}") from exc


def latest_week_label(labels) -> Optional[str]:
    """Label whose Sunday is the most recent, or None for no labels."""
    labels = list(labels)
    if not labels:
        return None
    return max(labels, key=week_end_from_label)


def bucket_reports(reports) -> list[WeekBucket]:
    """Group reports by meeting week, newest week first."""
    grouped = {}
    for report in sort_reports(reports):
        monday, sunday = week_bounds(report.date_of_meeting)
        grouped.setdefault(monday, []).append(report)

    buckets = []
    for monday in sorted(grouped, reverse=True):
        buckets.append(WeekBucket(
            label=week_label(monday),
            start=monday,
            end=monday + timedelta(days=6),
            reports=tuple(grouped[monday]),
        ))
    return buckets


def parse_week_label(label: str) -> tuple[date, date]:
    """
    Return the (Monday, Sunday) pair a week label names.

    Raises ValueError unless ``label`` is exactly the label ``week_label``
    gives for that week, so a window can never straddle two weeks.
    """
    end = week_end_from_label(label)
    if end.isoweekday() != 7 or label.strip() != week_label(end):
        raise ValueError(f"Invalid week label: {label!r}")
    return week_bounds(end)


def find_bucket(reports, label: str) -> WeekBucket:
    """Bucket for ``label``; empty when no report falls in that week."""
    start, end = parse_week_label(label)
    selected = [r for r in sort_reports(reports) if start <= r.date_of_meeting <= end]
    return WeekBucket(label=week_label(start), start=start, end=end, reports=tuple(selected))
