"""Preconditions a weekly report must meet before it is accepted."""
from django.utils.translation import gettext as _

from apps.core.utils import coerce_date

from .exceptions import ReportValidationError


class ReportValidator:
    """Rejects reports without a resolvable leader or a usable meeting date."""

    @staticmethod
    def resolve_leader_id(group, leader_id=None):
        """Explicit leader from the payload, else the group's own leader."""
        return leader_id or group.leader_id

    @staticmethod
    def validate_leader(group, leader_id, roster_ids, known_member_ids=None):
        """
        The leader must exist and be the group's leader or on its roster.

        ``known_member_ids`` limits existence checks to an already fetched
        set; None skips the existence check.
        """
        if not leader_id:
            raise ReportValidationError(
                detail={'leader_id': [_('Aucun leader assigné à cette cellule.')]},
                kind='cell_group',
                entity_id=group.id,
            )
        if known_member_ids is not None and leader_id not in known_member_ids:
            raise ReportValidationError(
                detail={'leader_id': [_('Leader introuvable.')]},
                kind='member',
                entity_id=leader_id,
            )
        if leader_id != group.leader_id and leader_id not in roster_ids:
            raise ReportValidationError(
                detail={'leader_id': [_('Ce leader n\'appartient pas à cette cellule.')]},
                kind='member',
                entity_id=leader_id,
            )
        return leader_id

    @staticmethod
    def validate_date(group, value):
        """Return the meeting date as a date, rejecting missing or malformed values."""
        try:
            meeting_date = coerce_date(value)
        except ValueError:
            meeting_date = None
            message = _('Date de réunion invalide.')
        else:
            message = _('La date de réunion est requise.')

        if meeting_date is None:
            raise ReportValidationError(
                detail={'date_of_meeting': [message]},
                kind='cell_group',
                entity_id=group.id,
            )
        return meeting_date

    @classmethod
    def validate(cls, group, leader_id, date_of_meeting, roster_ids, known_member_ids=None):
        """
        Run every precondition. Returns (leader_id, meeting_date).
        """
        leader_id = cls.resolve_leader_id(group, leader_id)
        leader_id = cls.validate_leader(group, leader_id, roster_ids, known_member_ids)
        meeting_date = cls.validate_date(group, date_of_meeting)
        return leader_id, meeting_date
