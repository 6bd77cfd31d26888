"""Annotated view of a cell snapshot for the presentation layer."""
from .services_attendance import AttendanceLedger
from .services_health import HealthScorer
from .services_performance import PerformanceTrendEngine, WeeklyRanking
from .services_visitors import VisitorTracker
from .services_weeks import bucket_reports, find_bucket, latest_week_label


class CellAnalyticsService:
    """Snapshot in, plain records out."""

    @staticmethod
    def week_labels(snapshot):
        """Distinct week labels of every report, newest first."""
        return [bucket.label for bucket in bucket_reports(snapshot.reports)]

    @staticmethod
    def ranking(snapshot, week_label=None):
        """Top/lowest report of ``week_label``, defaulting to the latest week."""
        if week_label is None:
            week_label = latest_week_label(CellAnalyticsService.week_labels(snapshot))
        if week_label is None:
            return WeeklyRanking()
        return PerformanceTrendEngine.weekly_ranking(find_bucket(snapshot.reports, week_label))

    @staticmethod
    def build_annotated_view(snapshot, week_label=None):
        """
        Every derived fact the presentation layer needs, keyed by id.

        Returns dict with week, groups, reports, members, follow_ups and
        visitors sections.
        """
        groups = {
            record['id']: record
            for record in HealthScorer.group_health_records(snapshot)
        }

        members = {}
        follow_ups = []
        visitors = {}
        for group_id in snapshot.groups:
            for row in AttendanceLedger.member_streaks(snapshot, group_id):
                members.setdefault(row['member_id'], {})[group_id] = row['streak']
                if row['needs_follow_up']:
                    follow_ups.append(row)
            for row in VisitorTracker.visitor_recurrence(snapshot, group_id):
                visitors.setdefault(row['visitor_id'], {})[group_id] = row['is_repeat']

        follow_ups.sort(key=lambda row: (-row['streak'], row['name'] or ''))

        return {
            'week': CellAnalyticsService.ranking(snapshot, week_label).as_dict(),
            'groups': groups,
            'reports': PerformanceTrendEngine.annotate_reports(snapshot.reports),
            'members': members,
            'follow_ups': follow_ups,
            'visitors': visitors,
        }
