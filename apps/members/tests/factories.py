"""Test factories for members app."""
import factory
from django.contrib.auth import get_user_model
from factory.django import DjangoModelFactory

from apps.core.constants import Roles
from apps.members.models import Member

User = get_user_model()


class UserFactory(DjangoModelFactory):
    """Creates Django User instances for testing."""

    class Meta:
        model = User

    username = factory.Sequence(lambda n: f'user{n}')
    email = factory.LazyAttribute(lambda obj: f'{obj.username}@example.com')
    first_name = factory.Faker('first_name')
    last_name = factory.Faker('last_name')
    password = factory.PostGenerationMethodCall('set_password', 'testpass123')


class MemberFactory(DjangoModelFactory):
    """Creates Member instances."""

    class Meta:
        model = Member

    first_name = factory.Faker('first_name')
    last_name = factory.Faker('last_name')
    email = factory.LazyAttribute(
        lambda obj: f'{obj.first_name.lower()}.{obj.last_name.lower()}@example.com'
    )
    phone = factory.Sequence(lambda n: f'514-555-{n:04d}')
    role = Roles.MEMBER


class MemberWithUserFactory(MemberFactory):
    """Creates Member with a linked User account for authentication tests."""

    user = factory.SubFactory(UserFactory)


class GroupLeaderFactory(MemberWithUserFactory):
    """Creates a cell group leader with a user account."""

    role = Roles.GROUP_LEADER


class PastorFactory(MemberWithUserFactory):
    """Creates a pastor with a user account."""

    role = Roles.PASTOR
