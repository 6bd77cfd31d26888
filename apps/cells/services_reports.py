"""Weekly report submission, health history submission, monthly consolidation."""
import logging
from decimal import Decimal

from django.db import transaction
from django.utils.translation import gettext as _

from apps.core.constants import VisitorStatus
from apps.core.utils import get_month_range

from .exceptions import ReportValidationError
from .services_attendance import AttendanceLedger
from .services_health import round_half_up
from .validators import ReportValidator

logger = logging.getLogger(__name__)

NOTE_FIELDS = [
    'topic', 'testimonies', 'prayer_requests',
    'follow_ups', 'challenges', 'support_needed',
]


class WeeklyReportService:
    """Creates, replaces and deletes weekly reports with derived absentees."""

    @staticmethod
    def _known_member_ids(member_ids):
        from apps.members.models import Member
        ids = [m for m in member_ids if m]
        return set(Member.all_objects.filter(pk__in=ids).values_list('pk', flat=True))

    @staticmethod
    def _check_visitors(group, visitor_ids, allowed_converted=()):
        """Visitors must exist; converted ones only if already on the report."""
        from .models import Visitor

        visitor_ids = set(visitor_ids)
        found = {
            v.pk: v for v in Visitor.all_objects.filter(pk__in=visitor_ids)
        }
        missing = visitor_ids - set(found)
        if missing:
            raise ReportValidationError(
                detail={'visitor_ids': [_('Visiteur introuvable.')]},
                kind='visitor',
                entity_id=sorted(missing, key=str)[0],
            )
        for visitor in found.values():
            if visitor.status == VisitorStatus.CONVERTED and visitor.pk not in allowed_converted:
                raise ReportValidationError(
                    detail={'visitor_ids': [_('Ce visiteur est déjà converti.')]},
                    kind='visitor',
                    entity_id=visitor.pk,
                )
        return visitor_ids

    @staticmethod
    def _prepare(group, data, allowed_converted=()):
        roster_ids = group.roster_ids()
        attendee_ids = set(data.get('attendee_ids') or [])

        leader_id = ReportValidator.resolve_leader_id(group, data.get('leader_id'))
        leader_id, meeting_date = ReportValidator.validate(
            group,
            leader_id,
            data.get('date_of_meeting'),
            roster_ids,
            known_member_ids=WeeklyReportService._known_member_ids([leader_id]),
        )
        absentee_ids = AttendanceLedger.derive_absentees(roster_ids, attendee_ids)
        visitor_ids = WeeklyReportService._check_visitors(
            group, data.get('visitor_ids') or [], allowed_converted
        )

        absentee_keys = {str(member_id) for member_id in absentee_ids}
        reasons = {
            str(member_id): reason
            for member_id, reason in (data.get('absentee_reasons') or {}).items()
            if str(member_id) in absentee_keys and reason
        }

        fields = {
            'date_of_meeting': meeting_date,
            'leader_id': leader_id,
            'attendance': data.get('attendance'),
            'absentee_reasons': reasons,
        }
        for name in NOTE_FIELDS:
            fields[name] = data.get(name) or ''
        return fields, attendee_ids, absentee_ids, visitor_ids

    @staticmethod
    def _replace_links(report, attendee_ids, absentee_ids, visitor_ids):
        """Rewrite the M2M rows directly so inactive members are replaced too."""
        links = [
            (report.attendees, attendee_ids),
            (report.absentees, absentee_ids),
            (report.visitors, visitor_ids),
        ]
        for manager, ids in links:
            manager.through.objects.filter(weeklyreport=report).delete()
            manager.add(*ids)

    @staticmethod
    def _lock_group(group):
        from .models import CellGroup
        return CellGroup.objects.select_for_update().get(pk=group.pk)

    @staticmethod
    @transaction.atomic
    def submit(group, data):
        """
        Validate and persist a new report for ``group``.

        Absentees are the roster minus the attendees at this moment.
        Nothing is written when validation fails.
        """
        from .models import WeeklyReport

        group = WeeklyReportService._lock_group(group)
        fields, attendee_ids, absentee_ids, visitor_ids = WeeklyReportService._prepare(group, data)

        report = WeeklyReport.objects.create(cell_group=group, **fields)
        WeeklyReportService._replace_links(report, attendee_ids, absentee_ids, visitor_ids)

        logger.info(
            f'Weekly report submitted: {group.name} {report.date_of_meeting} '
            f'({len(attendee_ids)} present, {len(absentee_ids)} absent, '
            f'{len(visitor_ids)} visitors)'
        )
        return report

    @staticmethod
    @transaction.atomic
    def update(report, data):
        """Replace every field of ``report``; absentees are derived again."""
        group = WeeklyReportService._lock_group(report.cell_group)
        already_listed = set(
            report.visitors.through.objects
            .filter(weeklyreport=report)
            .values_list('visitor_id', flat=True)
        )
        fields, attendee_ids, absentee_ids, visitor_ids = WeeklyReportService._prepare(
            group, data, allowed_converted=already_listed
        )

        for name, value in fields.items():
            setattr(report, name, value)
        report.save()
        WeeklyReportService._replace_links(report, attendee_ids, absentee_ids, visitor_ids)

        logger.info(f'Weekly report updated: {group.name} {report.date_of_meeting}')
        return report

    @staticmethod
    def delete(report):
        """Remove the report for good; aggregates drop it on next computation."""
        label = f'{report.cell_group.name} {report.date_of_meeting}'
        report.delete()
        logger.info(f'Weekly report deleted: {label}')

    @staticmethod
    def last_report(group):
        """Most recent report of a group by (date_of_meeting, id), or None."""
        from .models import WeeklyReport
        return (
            WeeklyReport.objects
            .filter(cell_group=group)
            .order_by('-date_of_meeting', '-id')
            .first()
        )

    @staticmethod
    def prefill(group):
        """
        Starting values for a new report, taken from the group's last report.

        Returns dict with leader_id, attendee_ids (only members still on the
        roster) and the last report's id.
        """
        last = WeeklyReportService.last_report(group)
        roster_ids = group.roster_ids()
        attendee_ids = []
        if last is not None:
            attendee_ids = [
                member_id
                for member_id in last.attendees.values_list('pk', flat=True)
                if member_id in roster_ids
            ]
        return {
            'last_report_id': last.pk if last else None,
            'last_date_of_meeting': last.date_of_meeting if last else None,
            'leader_id': group.leader_id,
            'attendee_ids': attendee_ids,
        }


class HealthHistoryService:
    """Appends health history rows and mirrors the score onto the group."""

    @staticmethod
    @transaction.atomic
    def record(group, report_date, health_score, attendance=Decimal('0'), notes=''):
        from .models import CellGroup, HealthHistoryRecord

        entry = HealthHistoryRecord.objects.create(
            cell_group=group,
            report_date=report_date,
            health_score=health_score,
            attendance=attendance,
            notes=notes or '',
        )
        CellGroup.objects.filter(pk=group.pk).update(health_score=health_score)
        group.health_score = health_score
        logger.info(f'Health history recorded: {group.name} {report_date} score={health_score}')
        return entry


def consolidated_report(snapshot, month, year):
    """
    Per-group totals of the reports held in a calendar month.

    Returns dict with month, year, groups (list) and totals.
    """
    start, end = get_month_range(year, month)
    rows = []
    totals = {
        'report_count': 0,
        'total_attendance': 0,
        'total_visitors': 0,
        'total_absentees': 0,
    }

    for group in sorted(snapshot.groups.values(), key=lambda g: g.name.lower()):
        reports = [
            r for r in snapshot.reports_for(group.id)
            if start <= r.date_of_meeting <= end
        ]
        attendance = sum(r.attendance_count for r in reports)
        row = {
            'cell_group_id': group.id,
            'cell_group_name': group.name,
            'report_count': len(reports),
            'total_attendance': attendance,
            'average_attendance': (
                round_half_up(Decimal(attendance) / len(reports), 1) if reports else 0.0
            ),
            'total_visitors': sum(r.visitor_count for r in reports),
            'total_absentees': sum(r.absentee_count for r in reports),
        }
        rows.append(row)
        for key in totals:
            totals[key] += row[key]

    return {
        'month': month,
        'year': year,
        'start': start,
        'end': end,
        'groups': rows,
        'totals': totals,
    }
