"""Celery tasks surfacing follow-up conditions from cell reports."""
import logging

from celery import shared_task

from .signals import member_needs_follow_up, repeat_visitor_detected

logger = logging.getLogger(__name__)


@shared_task
def scan_follow_up_conditions():
    """
    Find members absent 3+ meetings in a row and repeat visitors.

    Each condition is sent as a signal; delivering alerts is left to
    whoever listens. Converted visitors are skipped.
    """
    from .repository import SnapshotRepository
    from .services_attendance import AttendanceLedger
    from .services_visitors import VisitorTracker

    snapshot = SnapshotRepository.load()

    at_risk = AttendanceLedger.at_risk_members(snapshot)
    for row in at_risk:
        member_needs_follow_up.send(sender=scan_follow_up_conditions, row=row)

    repeat_visitors = 0
    for group_id in snapshot.groups:
        for row in VisitorTracker.visitor_recurrence(snapshot, group_id):
            if not row['is_repeat'] or row['unresolved']:
                continue
            if snapshot.visitors[row['visitor_id']].is_converted:
                continue
            repeat_visitors += 1
            repeat_visitor_detected.send(sender=scan_follow_up_conditions, row=row)

    logger.info(
        f'Follow-up scan: {len(at_risk)} members need follow-up, '
        f'{repeat_visitors} repeat visitors.'
    )
    return {'follow_ups': len(at_risk), 'repeat_visitors': repeat_visitors}
