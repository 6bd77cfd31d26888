"""Visitor recurrence tracking and the follow-up / conversion workflow."""
import logging

from django.db import transaction

from apps.core.constants import (
    VisitorStatus, FollowUpStatus, FOLLOW_UP_TRANSITIONS, REPEAT_VISIT_THRESHOLD,
)

logger = logging.getLogger(__name__)


def normalize_follow_up(status):
    """Unknown or missing follow-up values count as pending."""
    try:
        return FollowUpStatus(status)
    except ValueError:
        return FollowUpStatus.PENDING


def advance_follow_up(status):
    """Next follow-up state: pending -> in_progress -> done -> pending."""
    return FOLLOW_UP_TRANSITIONS[normalize_follow_up(status)]


class VisitorTracker:
    """Counts visits and filters visitor lists."""

    @staticmethod
    def visit_count(visitor_id, group_id, reports):
        """Number of reports of ``group_id`` that list the visitor."""
        return sum(
            1 for r in reports
            if r.cell_group_id == group_id and visitor_id in r.visitor_ids
        )

    @staticmethod
    def is_repeat_visitor(visitor_id, group_id, reports):
        return VisitorTracker.visit_count(visitor_id, group_id, reports) > REPEAT_VISIT_THRESHOLD

    @staticmethod
    def active_visitors(visitors, search=None):
        """
        Visitors that may be offered for new reports.

        Converted visitors are always excluded; ``search`` matches the name
        case-insensitively.
        """
        selected = [v for v in visitors if v.status != VisitorStatus.CONVERTED]
        if search:
            needle = search.lower()
            selected = [v for v in selected if needle in v.full_name.lower()]
        return selected

    @staticmethod
    def visitor_recurrence(snapshot, group_id):
        """
        Visit counts of every visitor seen in a group's reports.

        Returns list of dicts with visitor_id, name, visit_count, is_repeat,
        status and unresolved, most frequent visitor first.
        """
        snapshot.group(group_id)
        reports = snapshot.reports_for(group_id)

        counts = {}
        for report in reports:
            for visitor_id in report.visitor_ids:
                counts[visitor_id] = counts.get(visitor_id, 0) + 1

        rows = []
        for visitor_id, count in counts.items():
            visitor = snapshot.visitors.get(visitor_id)
            rows.append({
                'visitor_id': visitor_id,
                'cell_group_id': group_id,
                'name': visitor.full_name if visitor else None,
                'status': visitor.status if visitor else None,
                'unresolved': visitor is None,
                'visit_count': count,
                'is_repeat': count > REPEAT_VISIT_THRESHOLD,
            })
        rows.sort(key=lambda row: (-row['visit_count'], row['name'] or '', str(row['visitor_id'])))
        return rows


class VisitorWorkflowService:
    """Persists follow-up transitions and conversions of Visitor rows."""

    @staticmethod
    def advance(visitor):
        """Move the visitor's follow-up to its next state and save."""
        previous = visitor.follow_up_status
        visitor.follow_up_status = advance_follow_up(previous)
        visitor.save(update_fields=['follow_up_status', 'updated_at'])
        logger.info(
            f'Visitor follow-up advanced: {visitor.full_name} '
            f'({previous} -> {visitor.follow_up_status})'
        )
        return visitor

    @staticmethod
    @transaction.atomic
    def convert(visitor):
        """
        Mark the visitor as converted and link a Member record.

        An existing linked member is reused. Converting twice is a no-op.
        """
        from apps.members.models import Member

        if visitor.status == VisitorStatus.CONVERTED:
            return visitor

        if visitor.member_id is None:
            visitor.member = Member.objects.create(
                first_name=visitor.first_name,
                last_name=visitor.surname,
                email=visitor.email,
                phone=visitor.phone,
            )

        visitor.status = VisitorStatus.CONVERTED
        visitor.save(update_fields=['status', 'member', 'updated_at'])
        logger.info(
            f'Visitor converted to member: {visitor.full_name} '
            f'(member {visitor.member_id})'
        )
        return visitor
