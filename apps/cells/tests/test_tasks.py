"""Tests for cells Celery tasks."""
import pytest

from apps.core.constants import VisitorStatus
from apps.cells.services_reports import WeeklyReportService
from apps.cells.signals import member_needs_follow_up, repeat_visitor_detected
from apps.cells.tasks import scan_follow_up_conditions

from .factories import CellGroupFactory, VisitorFactory, add_to_roster


@pytest.fixture
def received():
    """Collect rows sent through the follow-up signals."""
    rows = {'members': [], 'visitors': []}

    def on_member(sender, row, **kwargs):
        rows['members'].append(row)

    def on_visitor(sender, row, **kwargs):
        rows['visitors'].append(row)

    member_needs_follow_up.connect(on_member)
    repeat_visitor_detected.connect(on_visitor)
    yield rows
    member_needs_follow_up.disconnect(on_member)
    repeat_visitor_detected.disconnect(on_visitor)


@pytest.mark.django_db
class TestScanFollowUpConditions:

    def test_flags_absent_members_and_repeat_visitors(self, received):
        group = CellGroupFactory()
        alice, bob = add_to_roster(group, 2)
        regular = VisitorFactory(cell_group=group)
        converted = VisitorFactory(cell_group=group)
        for day in ['2025-01-05', '2025-01-12', '2025-01-19']:
            WeeklyReportService.submit(group, {
                'date_of_meeting': day,
                'attendee_ids': [alice.pk],
                'visitor_ids': [regular.pk, converted.pk],
            })
        converted.status = VisitorStatus.CONVERTED
        converted.save()

        result = scan_follow_up_conditions()

        assert result == {'follow_ups': 1, 'repeat_visitors': 1}
        assert [row['member_id'] for row in received['members']] == [bob.pk]
        assert [row['visitor_id'] for row in received['visitors']] == [regular.pk]

    def test_nothing_to_report(self, received):
        group = CellGroupFactory()
        alice, = add_to_roster(group, 1)
        WeeklyReportService.submit(group, {
            'date_of_meeting': '2025-01-05',
            'attendee_ids': [alice.pk],
        })

        assert scan_follow_up_conditions() == {'follow_ups': 0, 'repeat_visitors': 0}
        assert received == {'members': [], 'visitors': []}
