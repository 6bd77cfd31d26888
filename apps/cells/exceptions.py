"""Errors raised by the cell analytics engine.

All of them are DRF API exceptions so the default exception handler
renders them; each carries the entity kind and id it concerns.
"""
from django.utils.translation import gettext_lazy as _
from rest_framework import status
from rest_framework.exceptions import APIException


class CellEngineError(APIException):
    """Base class carrying the entity kind and id the error is about."""

    def __init__(self, detail=None, kind=None, entity_id=None):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(detail=detail)


class ReportValidationError(CellEngineError):
    """A weekly report failed its preconditions. Never retried."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = _('Rapport invalide.')
    default_code = 'report_invalid'


class EntityNotFound(CellEngineError):
    """A referenced cell group, member or visitor is not in the snapshot."""

    status_code = status.HTTP_404_NOT_FOUND
    default_detail = _('Référence introuvable.')
    default_code = 'unresolved_reference'

    def __init__(self, kind, entity_id, detail=None):
        if detail is None:
            detail = _('%(kind)s introuvable: %(id)s') % {
                'kind': kind, 'id': entity_id,
            }
        super().__init__(detail=detail, kind=kind, entity_id=entity_id)


class UpstreamFailure(CellEngineError):
    """The persistence layer failed; the caller may retry."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = _('Source de données indisponible. Réessayez plus tard.')
    default_code = 'upstream_failure'
    retryable = True
