"""DRF permission classes for role-based access control."""
from rest_framework import permissions

from .constants import Roles


class IsMember(permissions.BasePermission):
    """Allows any authenticated user."""
    message = "Vous devez être un membre pour accéder à cette ressource."

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated)


class IsGroupLeader(permissions.BasePermission):
    """Requires group_leader role or higher."""
    message = "Vous devez être un leader de cellule pour accéder à cette ressource."

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False

        if request.user.is_staff:
            return True

        if hasattr(request.user, 'member_profile'):
            allowed = set(Roles.LEADER_ROLES) | {Roles.ADMIN}
            return request.user.member_profile.role in allowed

        return False


class IsPastorOrAdmin(permissions.BasePermission):
    """Requires pastor or admin role."""
    message = "Vous devez être pasteur ou administrateur pour accéder à cette ressource."

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False

        if request.user.is_staff:
            return True

        if hasattr(request.user, 'member_profile'):
            return request.user.member_profile.role in {Roles.PASTOR, Roles.ADMIN}

        return False
