"""
Tests for core models.
"""
import uuid

import pytest

from apps.cells.models import Zone


@pytest.mark.django_db
class TestBaseModel:
    """Tests for BaseModel through a concrete subclass."""

    def test_uuid_primary_key(self):
        zone = Zone(name='Nord')
        assert isinstance(zone.id, uuid.UUID)

    def test_timestamps_set(self):
        zone = Zone.objects.create(name='Nord')
        assert zone.created_at is not None
        assert zone.updated_at is not None

    def test_deactivate_hides_from_default_manager(self):
        zone = Zone.objects.create(name='Nord')

        zone.deactivate()

        assert not Zone.objects.filter(pk=zone.pk).exists()
        assert Zone.all_objects.filter(pk=zone.pk).exists()

    def test_activate(self):
        zone = Zone.objects.create(name='Nord', is_active=False)

        zone.activate()

        assert Zone.objects.filter(pk=zone.pk).exists()
