"""Tests for core permissions."""
from unittest.mock import Mock

import pytest

from apps.core.constants import Roles
from apps.core.permissions import IsMember, IsGroupLeader, IsPastorOrAdmin


@pytest.fixture
def mock_request():
    """Mock request object."""
    request = Mock()
    request.user = Mock()
    request.user.is_authenticated = True
    request.user.is_staff = False
    return request


@pytest.fixture
def mock_view():
    return Mock()


def _with_role(request, role):
    request.user.member_profile = Mock()
    request.user.member_profile.role = role
    return request


class TestIsMember:
    """Tests for IsMember permission."""

    def test_authenticated_user_allowed(self, mock_request, mock_view):
        assert IsMember().has_permission(mock_request, mock_view) is True

    def test_unauthenticated_user_denied(self, mock_request, mock_view):
        mock_request.user.is_authenticated = False
        assert IsMember().has_permission(mock_request, mock_view) is False

    def test_no_user_denied(self, mock_view):
        request = Mock()
        request.user = None
        assert IsMember().has_permission(request, mock_view) is False


class TestIsGroupLeader:
    """Tests for IsGroupLeader permission."""

    @pytest.mark.parametrize('role', [
        Roles.GROUP_LEADER, Roles.ZONE_LEADER, Roles.PASTOR, Roles.ADMIN,
    ])
    def test_leader_roles_allowed(self, mock_request, mock_view, role):
        request = _with_role(mock_request, role)
        assert IsGroupLeader().has_permission(request, mock_view) is True

    def test_plain_member_denied(self, mock_request, mock_view):
        request = _with_role(mock_request, Roles.MEMBER)
        assert IsGroupLeader().has_permission(request, mock_view) is False

    def test_staff_allowed_without_profile(self, mock_view):
        request = Mock()
        request.user = Mock(spec=['is_authenticated', 'is_staff'])
        request.user.is_authenticated = True
        request.user.is_staff = True
        assert IsGroupLeader().has_permission(request, mock_view) is True

    def test_user_without_profile_denied(self, mock_view):
        request = Mock()
        request.user = Mock(spec=['is_authenticated', 'is_staff'])
        request.user.is_authenticated = True
        request.user.is_staff = False
        assert IsGroupLeader().has_permission(request, mock_view) is False


class TestIsPastorOrAdmin:
    """Tests for IsPastorOrAdmin permission."""

    @pytest.mark.parametrize('role', [Roles.PASTOR, Roles.ADMIN])
    def test_pastor_and_admin_allowed(self, mock_request, mock_view, role):
        request = _with_role(mock_request, role)
        assert IsPastorOrAdmin().has_permission(request, mock_view) is True

    def test_group_leader_denied(self, mock_request, mock_view):
        request = _with_role(mock_request, Roles.GROUP_LEADER)
        assert IsPastorOrAdmin().has_permission(request, mock_view) is False

    def test_unauthenticated_denied(self, mock_request, mock_view):
        mock_request.user.is_authenticated = False
        assert IsPastorOrAdmin().has_permission(mock_request, mock_view) is False
