"""Attendance ledger: absentee derivation and consecutive-absence streaks."""
from . import conf
from .exceptions import ReportValidationError
from .services_weeks import bucket_reports
from .snapshot import sort_reports


def _walk_streak(member_id, newest_first):
    count = 0
    for report in newest_first:
        if member_id in report.absentee_ids:
            count += 1
        else:
            break
    return count


class AttendanceLedger:
    """Derives absentee sets and absence streaks from report history."""

    @staticmethod
    def derive_absentees(roster_ids, attendee_ids):
        """Absentees are the roster minus the attendees.

        Raises ReportValidationError when an attendee is not on the roster.
        """
        roster = set(roster_ids)
        attendees = set(attendee_ids)
        outsiders = attendees - roster
        if outsiders:
            raise ReportValidationError(
                detail={
                    'attendees': [
                        f'Membre hors de la liste de la cellule: {member_id}'
                        for member_id in sorted(outsiders, key=str)
                    ]
                },
                kind='member',
                entity_id=sorted(outsiders, key=str)[0],
            )
        return roster - attendees

    @staticmethod
    def consecutive_absences(member_id, group_id, reports):
        """Count the most recent reports of a group the member missed in a row.

        The walk starts at the newest report and stops at the first report
        where the member is not listed as absent.
        """
        own = [r for r in reports if r.cell_group_id == group_id]
        return _walk_streak(member_id, sort_reports(own, newest_first=True))

    @staticmethod
    def needs_follow_up(streak, threshold=None):
        """True when the streak reaches the follow-up threshold."""
        if threshold is None:
            threshold = conf.follow_up_streak_threshold()
        return streak >= threshold

    @staticmethod
    def member_streaks(snapshot, group_id, threshold=None):
        """
        Streak of every member on the roster or referenced by the group's reports.

        Returns list of dicts with member_id, name, streak, needs_follow_up,
        on_roster and unresolved, longest streak first.
        """
        group = snapshot.group(group_id)
        newest_first = snapshot.reports_for(group_id, newest_first=True)

        member_ids = set(group.roster)
        for report in newest_first:
            member_ids |= report.attendee_ids
            member_ids |= report.absentee_ids

        rows = []
        for member_id in member_ids:
            member = snapshot.members.get(member_id)
            streak = _walk_streak(member_id, newest_first)
            rows.append({
                'member_id': member_id,
                'cell_group_id': group_id,
                'name': member.full_name if member else None,
                'unresolved': member is None,
                'on_roster': member_id in group.roster,
                'streak': streak,
                'needs_follow_up': AttendanceLedger.needs_follow_up(streak, threshold),
            })

        rows.sort(key=lambda row: (-row['streak'], row['name'] or '', str(row['member_id'])))
        return rows

    @staticmethod
    def at_risk_members(snapshot, threshold=None):
        """
        Members flagged for follow-up across every cell group.

        Returns list of streak rows enriched with cell_group_name.
        """
        flagged = []
        for group in snapshot.groups.values():
            for row in AttendanceLedger.member_streaks(snapshot, group.id, threshold):
                if row['needs_follow_up']:
                    flagged.append({**row, 'cell_group_name': group.name})

        flagged.sort(key=lambda row: (-row['streak'], row['cell_group_name'], row['name'] or ''))
        return flagged

    @staticmethod
    def absentee_trends(snapshot):
        """
        Absentee totals per meeting week, newest week first.

        Returns list of {'week', 'start', 'end', 'report_count',
        'total_absentees', 'total_attendance'} dicts.
        """
        trends = []
        for bucket in bucket_reports(snapshot.reports):
            trends.append({
                'week': bucket.label,
                'start': bucket.start,
                'end': bucket.end,
                'report_count': bucket.report_count,
                'total_absentees': sum(r.absentee_count for r in bucket.reports),
                'total_attendance': sum(r.attendance_count for r in bucket.reports),
            })
        return trends
