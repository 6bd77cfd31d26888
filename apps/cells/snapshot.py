"""Immutable snapshot records the analytics engine computes over.

A snapshot is loaded once per request by ``SnapshotRepository`` and handed
to the pure service functions; nothing in here touches the database.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Mapping, Optional
from uuid import UUID

from apps.core.constants import VisitorStatus, FollowUpStatus

from .exceptions import EntityNotFound


@dataclass(frozen=True)
class MemberRef:
    id: UUID
    first_name: str
    last_name: str
    is_leader: bool = False

    @property
    def full_name(self) -> str:
        return f'{self.first_name} {self.last_name}'.strip()


@dataclass(frozen=True)
class CellGroupRecord:
    id: UUID
    name: str
    leader_id: Optional[UUID] = None
    zone_id: Optional[UUID] = None
    status_id: Optional[UUID] = None
    location: str = ''
    health_score: Decimal = Decimal('0')
    roster: frozenset = frozenset()

    @property
    def member_count(self) -> int:
        return len(self.roster)


@dataclass(frozen=True)
class VisitorRecord:
    id: UUID
    first_name: str
    surname: str = ''
    status: str = VisitorStatus.NEW
    follow_up_status: str = FollowUpStatus.PENDING
    cell_group_id: Optional[UUID] = None

    @property
    def full_name(self) -> str:
        return ' '.join(filter(None, [self.first_name, self.surname]))

    @property
    def is_converted(self) -> bool:
        return self.status == VisitorStatus.CONVERTED


@dataclass(frozen=True)
class ReportNotes:
    """Free-text report fields; None when the leader left them empty."""
    topic: Optional[str] = None
    testimonies: Optional[str] = None
    prayer_requests: Optional[str] = None
    follow_ups: Optional[str] = None
    challenges: Optional[str] = None
    support_needed: Optional[str] = None

    @classmethod
    def from_values(cls, **values):
        return cls(**{key: (value or None) for key, value in values.items()})


@dataclass(frozen=True)
class ReportRecord:
    id: UUID
    cell_group_id: UUID
    date_of_meeting: date
    leader_id: Optional[UUID] = None
    attendee_ids: frozenset = frozenset()
    absentee_ids: frozenset = frozenset()
    visitor_ids: frozenset = frozenset()
    attendance: Optional[int] = None
    absentee_reasons: Mapping = field(default_factory=dict)
    notes: ReportNotes = field(default_factory=ReportNotes)

    @property
    def attendance_count(self) -> int:
        """Attendee count, or the declared headcount when no list was taken."""
        if self.attendee_ids:
            return len(self.attendee_ids)
        return self.attendance or 0

    @property
    def absentee_count(self) -> int:
        return len(self.absentee_ids)

    @property
    def visitor_count(self) -> int:
        return len(self.visitor_ids)


@dataclass(frozen=True)
class HealthSample:
    id: UUID
    cell_group_id: UUID
    report_date: date
    health_score: Decimal
    attendance: Decimal = Decimal('0')
    notes: str = ''


def sort_reports(reports, newest_first=False):
    """Order reports by meeting date, ties broken by id ascending."""
    ordered = sorted(reports, key=lambda r: r.id)
    return sorted(ordered, key=lambda r: r.date_of_meeting, reverse=newest_first)


@dataclass(frozen=True)
class CellSnapshot:
    """Everything the engine needs, fetched in one go."""
    groups: Mapping = field(default_factory=dict)
    members: Mapping = field(default_factory=dict)
    visitors: Mapping = field(default_factory=dict)
    reports: tuple = ()
    health_samples: tuple = ()

    @classmethod
    def build(cls, groups=(), members=(), visitors=(), reports=(), health_samples=()):
        return cls(
            groups={g.id: g for g in groups},
            members={m.id: m for m in members},
            visitors={v.id: v for v in visitors},
            reports=tuple(sort_reports(reports)),
            health_samples=tuple(
                sorted(health_samples, key=lambda s: (s.report_date, s.id))
            ),
        )

    def group(self, group_id):
        try:
            return self.groups[group_id]
        except KeyError:
            raise EntityNotFound('cell_group', group_id) from None

    def member(self, member_id):
        try:
            return self.members[member_id]
        except KeyError:
            raise EntityNotFound('member', member_id) from None

    def visitor(self, visitor_id):
        try:
            return self.visitors[visitor_id]
        except KeyError:
            raise EntityNotFound('visitor', visitor_id) from None

    def reports_for(self, group_id, newest_first=False):
        """Reports of one group in canonical order."""
        selected = [r for r in self.reports if r.cell_group_id == group_id]
        if newest_first:
            return sort_reports(selected, newest_first=True)
        return selected

    def samples_for(self, group_id):
        return [s for s in self.health_samples if s.cell_group_id == group_id]
