"""Performance trends: report-over-report momentum and weekly rankings."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from apps.core.constants import PerformanceTrend

from . import conf
from .services_weeks import week_label
from .snapshot import ReportRecord, sort_reports


@dataclass(frozen=True)
class WeeklyRanking:
    """Top and lowest report of a week. lowest is None when it is the top."""
    week_label: Optional[str] = None
    top: Optional[ReportRecord] = None
    lowest: Optional[ReportRecord] = None

    def as_dict(self):
        return {
            'week': self.week_label,
            'top_report_id': self.top.id if self.top else None,
            'top_cell_group_id': self.top.cell_group_id if self.top else None,
            'top_attendance': self.top.attendance_count if self.top else None,
            'lowest_report_id': self.lowest.id if self.lowest else None,
            'lowest_cell_group_id': self.lowest.cell_group_id if self.lowest else None,
            'lowest_attendance': self.lowest.attendance_count if self.lowest else None,
        }


class PerformanceTrendEngine:
    """Classifies attendance momentum and ranks groups within a week."""

    @staticmethod
    def previous_report(report, reports):
        """Most recent other report of the same group strictly before ``report``."""
        earlier = [
            r for r in reports
            if r.cell_group_id == report.cell_group_id
            and r.id != report.id
            and r.date_of_meeting < report.date_of_meeting
        ]
        if not earlier:
            return None
        return sort_reports(earlier)[-1]

    @staticmethod
    def report_trend(report, previous):
        """Growing/declining/stable against the previous report; stable without one."""
        if previous is None:
            return PerformanceTrend.STABLE
        if report.attendance_count > previous.attendance_count:
            return PerformanceTrend.GROWING
        if report.attendance_count < previous.attendance_count:
            return PerformanceTrend.DECLINING
        return PerformanceTrend.STABLE

    @staticmethod
    def is_high_absentee(report, threshold=None):
        """True when the report's absentee count exceeds the threshold."""
        if threshold is None:
            threshold = conf.high_absentee_threshold()
        return report.absentee_count > threshold

    @staticmethod
    def weekly_ranking(bucket):
        """
        Rank a week's reports by attendance, highest first.

        With a single report the lowest slot stays empty; the comparison is
        by identity so two groups with equal attendance are both shown.
        """
        if not bucket.reports:
            return WeeklyRanking(week_label=bucket.label)

        ordered = sorted(
            sort_reports(bucket.reports),
            key=lambda r: r.attendance_count,
            reverse=True,
        )
        top = ordered[0]
        lowest = ordered[-1]
        return WeeklyRanking(
            week_label=bucket.label,
            top=top,
            lowest=None if lowest is top else lowest,
        )

    @staticmethod
    def annotate_reports(reports, threshold=None):
        """
        Per-report performance facts.

        Returns dict of report id -> {'trend', 'previous_report_id',
        'attendance', 'absentee_count', 'visitor_count', 'high_absentees',
        'week'}.
        """
        reports = list(reports)
        annotated = {}
        for report in sort_reports(reports):
            previous = PerformanceTrendEngine.previous_report(report, reports)
            trend = PerformanceTrendEngine.report_trend(report, previous)
            annotated[report.id] = {
                'cell_group_id': report.cell_group_id,
                'date_of_meeting': report.date_of_meeting,
                'week': week_label(report.date_of_meeting),
                'trend': trend.value,
                'previous_report_id': previous.id if previous else None,
                'attendance': report.attendance_count,
                'absentee_count': report.absentee_count,
                'visitor_count': report.visitor_count,
                'high_absentees': PerformanceTrendEngine.is_high_absentee(report, threshold),
            }
        return annotated
