"""Tests for the attendance ledger."""
import uuid
from datetime import date

import pytest

from apps.cells.exceptions import ReportValidationError, EntityNotFound
from apps.cells.services_attendance import AttendanceLedger
from apps.cells.snapshot import CellSnapshot

from .factories import (
    CellGroupRecordFactory,
    MemberRefFactory,
    ReportRecordFactory,
)


class TestDeriveAbsentees:
    """Tests for derive_absentees."""

    def test_roster_minus_attendees(self):
        a, b, c = uuid.uuid4(), uuid.uuid4(), uuid.uuid4()
        assert AttendanceLedger.derive_absentees({a, b, c}, {a}) == {b, c}

    def test_everyone_present(self):
        a, b = uuid.uuid4(), uuid.uuid4()
        assert AttendanceLedger.derive_absentees({a, b}, {a, b}) == set()

    def test_empty_roster(self):
        assert AttendanceLedger.derive_absentees(set(), set()) == set()

    def test_disjoint_and_covering(self):
        """Attendees and absentees never overlap and together form the roster."""
        roster = {uuid.uuid4() for _ in range(6)}
        attendees = set(list(roster)[:2])
        absentees = AttendanceLedger.derive_absentees(roster, attendees)
        assert not attendees & absentees
        assert attendees | absentees == roster

    def test_attendee_outside_roster_rejected(self):
        roster = {uuid.uuid4()}
        stranger = uuid.uuid4()
        with pytest.raises(ReportValidationError) as exc_info:
            AttendanceLedger.derive_absentees(roster, {stranger})
        assert exc_info.value.entity_id == stranger
        assert exc_info.value.kind == 'member'


class TestConsecutiveAbsences:
    """Tests for consecutive_absences."""

    def _reports(self, group_id, member_id, pattern):
        """pattern: list of (date, absent) pairs."""
        return [
            ReportRecordFactory(
                cell_group_id=group_id,
                date_of_meeting=day,
                absentee_ids=frozenset({member_id}) if absent else frozenset(),
                attendee_ids=frozenset() if absent else frozenset({member_id}),
            )
            for day, absent in pattern
        ]

    def test_streak_stops_at_first_attendance(self):
        """Absent on 12th, present 19th, absent 26th and 5th: streak is 1."""
        group_id, member_id = uuid.uuid4(), uuid.uuid4()
        reports = self._reports(group_id, member_id, [
            (date(2025, 1, 5), True),
            (date(2025, 1, 12), True),
            (date(2025, 1, 19), False),
            (date(2025, 1, 26), True),
        ])
        assert AttendanceLedger.consecutive_absences(member_id, group_id, reports) == 1

    def test_two_most_recent_absences(self):
        group_id, member_id = uuid.uuid4(), uuid.uuid4()
        reports = self._reports(group_id, member_id, [
            (date(2025, 1, 5), True),
            (date(2025, 1, 12), False),
            (date(2025, 1, 19), True),
            (date(2025, 1, 26), True),
        ])
        assert AttendanceLedger.consecutive_absences(member_id, group_id, reports) == 2

    def test_input_order_is_irrelevant(self):
        group_id, member_id = uuid.uuid4(), uuid.uuid4()
        reports = self._reports(group_id, member_id, [
            (date(2025, 1, 26), True),
            (date(2025, 1, 5), False),
            (date(2025, 1, 19), True),
            (date(2025, 1, 12), True),
        ])
        assert AttendanceLedger.consecutive_absences(member_id, group_id, reports) == 3

    def test_other_groups_ignored(self):
        group_id, member_id = uuid.uuid4(), uuid.uuid4()
        reports = self._reports(group_id, member_id, [(date(2025, 1, 5), True)])
        reports += self._reports(uuid.uuid4(), member_id, [(date(2025, 1, 12), False)])
        assert AttendanceLedger.consecutive_absences(member_id, group_id, reports) == 1

    def test_no_reports(self):
        assert AttendanceLedger.consecutive_absences(uuid.uuid4(), uuid.uuid4(), []) == 0

    @pytest.mark.parametrize('reverse_input', [False, True])
    def test_same_date_reports_walked_by_id(self, reverse_input):
        """Two meetings on one date: the lower id is walked first."""
        group_id, member_id = uuid.uuid4(), uuid.uuid4()
        earlier_week = ReportRecordFactory(
            cell_group_id=group_id,
            date_of_meeting=date(2025, 1, 5),
            absentee_ids=frozenset({member_id}),
        )
        absent = ReportRecordFactory(
            id=uuid.UUID(int=1),
            cell_group_id=group_id,
            date_of_meeting=date(2025, 1, 12),
            absentee_ids=frozenset({member_id}),
        )
        present = ReportRecordFactory(
            id=uuid.UUID(int=2),
            cell_group_id=group_id,
            date_of_meeting=date(2025, 1, 12),
            attendee_ids=frozenset({member_id}),
        )
        reports = [earlier_week, absent, present]
        if reverse_input:
            reports.reverse()

        assert AttendanceLedger.consecutive_absences(member_id, group_id, reports) == 1

    @pytest.mark.parametrize('reverse_input', [False, True])
    def test_same_date_present_first_stops_walk(self, reverse_input):
        group_id, member_id = uuid.uuid4(), uuid.uuid4()
        present = ReportRecordFactory(
            id=uuid.UUID(int=1),
            cell_group_id=group_id,
            date_of_meeting=date(2025, 1, 12),
            attendee_ids=frozenset({member_id}),
        )
        absent = ReportRecordFactory(
            id=uuid.UUID(int=2),
            cell_group_id=group_id,
            date_of_meeting=date(2025, 1, 12),
            absentee_ids=frozenset({member_id}),
        )
        reports = [present, absent]
        if reverse_input:
            reports.reverse()

        assert AttendanceLedger.consecutive_absences(member_id, group_id, reports) == 0


class TestNeedsFollowUp:

    def test_threshold_boundary(self):
        assert AttendanceLedger.needs_follow_up(3) is True
        assert AttendanceLedger.needs_follow_up(2) is False

    def test_explicit_threshold(self):
        assert AttendanceLedger.needs_follow_up(2, threshold=2) is True

    def test_threshold_from_settings(self, settings):
        settings.CELLS_FOLLOW_UP_STREAK_THRESHOLD = 5
        assert AttendanceLedger.needs_follow_up(4) is False
        assert AttendanceLedger.needs_follow_up(5) is True


class TestMemberStreaks:
    """Tests for member_streaks and at_risk_members."""

    def _snapshot(self):
        alice = MemberRefFactory(first_name='Alice', last_name='Martin')
        bob = MemberRefFactory(first_name='Bob', last_name='Roy')
        group = CellGroupRecordFactory(
            name='Cellule Nord',
            roster=frozenset({alice.id, bob.id}),
        )
        ghost_id = uuid.uuid4()
        reports = [
            ReportRecordFactory(
                cell_group_id=group.id,
                date_of_meeting=day,
                attendee_ids=frozenset({bob.id}),
                absentee_ids=frozenset({alice.id, ghost_id}),
            )
            for day in [date(2025, 1, 5), date(2025, 1, 12), date(2025, 1, 19)]
        ]
        snapshot = CellSnapshot.build(
            groups=[group], members=[alice, bob], reports=reports,
        )
        return snapshot, group, alice, bob, ghost_id

    def test_rows_sorted_by_streak(self):
        snapshot, group, alice, bob, ghost_id = self._snapshot()

        rows = AttendanceLedger.member_streaks(snapshot, group.id)

        assert [row['member_id'] for row in rows] == [ghost_id, alice.id, bob.id]
        assert rows[1]['streak'] == 3
        assert rows[1]['needs_follow_up'] is True
        assert rows[1]['name'] == 'Alice Martin'
        assert rows[-1]['streak'] == 0

    def test_unresolved_member_is_flagged_not_fatal(self):
        snapshot, group, alice, bob, ghost_id = self._snapshot()

        row = next(
            row for row in AttendanceLedger.member_streaks(snapshot, group.id)
            if row['member_id'] == ghost_id
        )

        assert row['unresolved'] is True
        assert row['name'] is None
        assert row['on_roster'] is False
        assert row['streak'] == 3

    def test_unknown_group(self):
        snapshot, *_ = self._snapshot()
        with pytest.raises(EntityNotFound) as exc_info:
            AttendanceLedger.member_streaks(snapshot, uuid.uuid4())
        assert exc_info.value.kind == 'cell_group'

    def test_at_risk_members(self):
        snapshot, group, alice, bob, ghost_id = self._snapshot()

        rows = AttendanceLedger.at_risk_members(snapshot)

        assert {row['member_id'] for row in rows} == {alice.id, ghost_id}
        assert all(row['cell_group_name'] == 'Cellule Nord' for row in rows)

    def test_at_risk_with_higher_threshold(self):
        snapshot, *_ = self._snapshot()
        assert AttendanceLedger.at_risk_members(snapshot, threshold=4) == []


class TestAbsenteeTrends:

    def test_weekly_totals(self):
        group = CellGroupRecordFactory()
        reports = [
            ReportRecordFactory(
                cell_group_id=group.id,
                date_of_meeting=date(2025, 1, 7),
                attendee_ids=frozenset({uuid.uuid4()}),
                absentee_ids=frozenset({uuid.uuid4(), uuid.uuid4()}),
            ),
            ReportRecordFactory(
                cell_group_id=group.id,
                date_of_meeting=date(2025, 1, 9),
                attendance=7,
                absentee_ids=frozenset({uuid.uuid4()}),
            ),
            ReportRecordFactory(
                cell_group_id=group.id,
                date_of_meeting=date(2025, 1, 14),
            ),
        ]
        snapshot = CellSnapshot.build(groups=[group], reports=reports)

        trends = AttendanceLedger.absentee_trends(snapshot)

        assert [row['week'] for row in trends] == ['Jan 13–Jan 19, 2025', 'Jan 6–Jan 12, 2025']
        assert trends[1]['report_count'] == 2
        assert trends[1]['total_absentees'] == 3
        assert trends[1]['total_attendance'] == 8
        assert trends[0]['total_absentees'] == 0
