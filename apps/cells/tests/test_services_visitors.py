"""Tests for visitor recurrence and the follow-up workflow."""
import uuid
from datetime import date

import pytest

from apps.core.constants import VisitorStatus, FollowUpStatus
from apps.cells.services_visitors import (
    VisitorTracker,
    VisitorWorkflowService,
    advance_follow_up,
    normalize_follow_up,
)
from apps.cells.snapshot import CellSnapshot
from apps.members.models import Member

from .factories import (
    CellGroupRecordFactory,
    ReportRecordFactory,
    VisitorRecordFactory,
    VisitorFactory,
)


class TestFollowUpCycle:
    """pending -> in_progress -> done -> pending."""

    def test_full_cycle(self):
        assert advance_follow_up(FollowUpStatus.PENDING) == FollowUpStatus.IN_PROGRESS
        assert advance_follow_up(FollowUpStatus.IN_PROGRESS) == FollowUpStatus.DONE
        assert advance_follow_up(FollowUpStatus.DONE) == FollowUpStatus.PENDING

    def test_plain_strings(self):
        assert advance_follow_up('done') == FollowUpStatus.PENDING

    def test_unknown_status_treated_as_pending(self):
        assert normalize_follow_up('lost') == FollowUpStatus.PENDING
        assert normalize_follow_up(None) == FollowUpStatus.PENDING
        assert advance_follow_up('lost') == FollowUpStatus.IN_PROGRESS


class TestVisitCounts:
    """Recurrence is counted per cell group."""

    def _setup(self):
        visitor = VisitorRecordFactory(first_name='Jean', surname='Dupont')
        group_a = CellGroupRecordFactory(name='A')
        group_b = CellGroupRecordFactory(name='B')
        reports = [
            ReportRecordFactory(cell_group_id=group_a.id, date_of_meeting=date(2025, 1, 5),
                                visitor_ids=frozenset({visitor.id})),
            ReportRecordFactory(cell_group_id=group_b.id, date_of_meeting=date(2025, 1, 12),
                                visitor_ids=frozenset({visitor.id})),
        ]
        return visitor, group_a, group_b, reports

    def test_visits_in_two_groups_are_not_repeats(self):
        visitor, group_a, group_b, reports = self._setup()

        assert VisitorTracker.visit_count(visitor.id, group_a.id, reports) == 1
        assert VisitorTracker.is_repeat_visitor(visitor.id, group_a.id, reports) is False
        assert VisitorTracker.is_repeat_visitor(visitor.id, group_b.id, reports) is False

    def test_second_visit_same_group_is_repeat(self):
        visitor, group_a, group_b, reports = self._setup()
        reports.append(ReportRecordFactory(
            cell_group_id=group_a.id,
            date_of_meeting=date(2025, 1, 19),
            visitor_ids=frozenset({visitor.id}),
        ))

        assert VisitorTracker.visit_count(visitor.id, group_a.id, reports) == 2
        assert VisitorTracker.is_repeat_visitor(visitor.id, group_a.id, reports) is True

    def test_visitor_recurrence_rows(self):
        visitor, group_a, group_b, reports = self._setup()
        ghost_id = uuid.uuid4()
        reports.append(ReportRecordFactory(
            cell_group_id=group_a.id,
            date_of_meeting=date(2025, 1, 19),
            visitor_ids=frozenset({visitor.id, ghost_id}),
        ))
        snapshot = CellSnapshot.build(
            groups=[group_a, group_b], visitors=[visitor], reports=reports,
        )

        rows = VisitorTracker.visitor_recurrence(snapshot, group_a.id)

        assert rows[0]['visitor_id'] == visitor.id
        assert rows[0]['name'] == 'Jean Dupont'
        assert rows[0]['visit_count'] == 2
        assert rows[0]['is_repeat'] is True
        assert rows[1]['visitor_id'] == ghost_id
        assert rows[1]['unresolved'] is True
        assert rows[1]['is_repeat'] is False


class TestActiveVisitors:

    def test_converted_excluded(self):
        new = VisitorRecordFactory(first_name='Marie')
        converted = VisitorRecordFactory(first_name='Paul', status=VisitorStatus.CONVERTED)
        followed = VisitorRecordFactory(first_name='Luc', status=VisitorStatus.FOLLOWED_UP)

        active = VisitorTracker.active_visitors([new, converted, followed])

        assert [v.id for v in active] == [new.id, followed.id]

    def test_search(self):
        marie = VisitorRecordFactory(first_name='Marie', surname='Tremblay')
        luc = VisitorRecordFactory(first_name='Luc', surname='Gagnon')
        assert VisitorTracker.active_visitors([marie, luc], search='tremb') == [marie]


@pytest.mark.django_db
class TestVisitorWorkflowService:
    """Persisted follow-up transitions and conversions."""

    def test_advance_saves(self):
        visitor = VisitorFactory(follow_up_status=FollowUpStatus.DONE)

        VisitorWorkflowService.advance(visitor)

        visitor.refresh_from_db()
        assert visitor.follow_up_status == FollowUpStatus.PENDING

    def test_convert_creates_member(self):
        visitor = VisitorFactory(first_name='Anne', surname='Roy', email='anne@example.com')

        VisitorWorkflowService.convert(visitor)

        visitor.refresh_from_db()
        assert visitor.status == VisitorStatus.CONVERTED
        assert visitor.member is not None
        assert visitor.member.first_name == 'Anne'
        assert visitor.member.last_name == 'Roy'
        assert visitor.member.email == 'anne@example.com'

    def test_convert_twice_is_noop(self):
        visitor = VisitorFactory()
        VisitorWorkflowService.convert(visitor)
        count = Member.objects.count()

        VisitorWorkflowService.convert(visitor)

        assert Member.objects.count() == count
