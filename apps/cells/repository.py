"""Loads immutable snapshots of cell data from the database."""
import logging
from collections import defaultdict

from django.db import DatabaseError

from apps.core.constants import Roles

from .exceptions import UpstreamFailure
from .snapshot import (
    CellSnapshot, CellGroupRecord, MemberRef, VisitorRecord,
    ReportRecord, ReportNotes, HealthSample,
)

logger = logging.getLogger(__name__)


def _pairs(through_model, left, right, **filters):
    """Map left id -> set of right ids from an M2M through table."""
    mapping = defaultdict(set)
    for left_id, right_id in through_model.objects.filter(**filters).values_list(left, right):
        mapping[left_id].add(right_id)
    return mapping


class SnapshotRepository:
    """
    Builds a CellSnapshot from current persisted state.

    Every call reads fresh rows; nothing is cached between calls so a
    database failure is never masked by stale data.
    """

    @classmethod
    def load(cls):
        """Snapshot of every active cell group with its full history."""
        return cls._load()

    @classmethod
    def load_for_group(cls, group_id):
        """Snapshot restricted to one cell group (members and visitors stay global)."""
        return cls._load(group_id=group_id)

    @classmethod
    def _load(cls, group_id=None):
        try:
            return cls._build(group_id)
        except DatabaseError as exc:
            logger.error(f'Snapshot load failed (group={group_id}): {exc}')
            raise UpstreamFailure(kind='cell_group', entity_id=group_id) from exc

    @staticmethod
    def _build(group_id=None):
        from apps.members.models import Member
        from .models import (
            CellGroup, CellGroupMembership, Visitor, WeeklyReport, HealthHistoryRecord,
        )

        groups_qs = CellGroup.objects.all()
        reports_qs = WeeklyReport.objects.all()
        samples_qs = HealthHistoryRecord.objects.all()
        memberships_qs = CellGroupMembership.objects.all()
        if group_id is not None:
            groups_qs = groups_qs.filter(pk=group_id)
            reports_qs = reports_qs.filter(cell_group_id=group_id)
            samples_qs = samples_qs.filter(cell_group_id=group_id)
            memberships_qs = memberships_qs.filter(cell_group_id=group_id)
        reports_qs = reports_qs.filter(cell_group__in=groups_qs)

        rosters = defaultdict(set)
        for cell_group_id, member_id in memberships_qs.values_list('cell_group_id', 'member_id'):
            rosters[cell_group_id].add(member_id)

        groups = [
            CellGroupRecord(
                id=g.id,
                name=g.name,
                leader_id=g.leader_id,
                zone_id=g.zone_id,
                status_id=g.status_id,
                location=g.location,
                health_score=g.health_score,
                roster=frozenset(rosters.get(g.id, ())),
            )
            for g in groups_qs
        ]

        # Historical reports may reference deactivated members; keep them resolvable.
        members = [
            MemberRef(
                id=m.id,
                first_name=m.first_name,
                last_name=m.last_name,
                is_leader=m.role in Roles.LEADER_ROLES,
            )
            for m in Member.all_objects.all()
        ]

        visitors = [
            VisitorRecord(
                id=v.id,
                first_name=v.first_name,
                surname=v.surname,
                status=v.status,
                follow_up_status=v.follow_up_status,
                cell_group_id=v.cell_group_id,
            )
            for v in Visitor.all_objects.all()
        ]

        report_filter = {'weeklyreport__in': reports_qs}
        attendees = _pairs(WeeklyReport.attendees.through, 'weeklyreport_id', 'member_id', **report_filter)
        absentees = _pairs(WeeklyReport.absentees.through, 'weeklyreport_id', 'member_id', **report_filter)
        visits = _pairs(WeeklyReport.visitors.through, 'weeklyreport_id', 'visitor_id', **report_filter)

        reports = [
            ReportRecord(
                id=r.id,
                cell_group_id=r.cell_group_id,
                date_of_meeting=r.date_of_meeting,
                leader_id=r.leader_id,
                attendee_ids=frozenset(attendees.get(r.id, ())),
                absentee_ids=frozenset(absentees.get(r.id, ())),
                visitor_ids=frozenset(visits.get(r.id, ())),
                attendance=r.attendance,
                absentee_reasons=dict(r.absentee_reasons or {}),
                notes=ReportNotes.from_values(
                    topic=r.topic,
                    testimonies=r.testimonies,
                    prayer_requests=r.prayer_requests,
                    follow_ups=r.follow_ups,
                    challenges=r.challenges,
                    support_needed=r.support_needed,
                ),
            )
            for r in reports_qs
        ]

        samples = [
            HealthSample(
                id=s.id,
                cell_group_id=s.cell_group_id,
                report_date=s.report_date,
                health_score=s.health_score,
                attendance=s.attendance,
                notes=s.notes,
            )
            for s in samples_qs.filter(cell_group__in=groups_qs)
        ]

        return CellSnapshot.build(
            groups=groups,
            members=members,
            visitors=visitors,
            reports=reports,
            health_samples=samples,
        )
