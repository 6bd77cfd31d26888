"""Tests for weekly report preconditions."""
import uuid
from datetime import date

import pytest

from apps.cells.exceptions import ReportValidationError
from apps.cells.validators import ReportValidator

from .factories import CellGroupRecordFactory


class TestValidateLeader:

    def test_group_leader_accepted(self):
        group = CellGroupRecordFactory()
        assert ReportValidator.validate_leader(group, group.leader_id, set()) == group.leader_id

    def test_roster_member_accepted(self):
        group = CellGroupRecordFactory()
        member_id = uuid.uuid4()
        assert ReportValidator.validate_leader(group, member_id, {member_id}) == member_id

    def test_outsider_rejected(self):
        group = CellGroupRecordFactory()
        outsider = uuid.uuid4()
        with pytest.raises(ReportValidationError) as exc_info:
            ReportValidator.validate_leader(group, outsider, {uuid.uuid4()})
        assert exc_info.value.entity_id == outsider
        assert 'leader_id' in exc_info.value.detail

    def test_missing_leader_rejected(self):
        group = CellGroupRecordFactory(leader_id=None)
        with pytest.raises(ReportValidationError) as exc_info:
            ReportValidator.validate_leader(group, None, set())
        assert exc_info.value.kind == 'cell_group'

    def test_unknown_member_rejected(self):
        group = CellGroupRecordFactory()
        with pytest.raises(ReportValidationError):
            ReportValidator.validate_leader(
                group, group.leader_id, set(), known_member_ids=set(),
            )


class TestResolveLeaderId:

    def test_falls_back_to_group_leader(self):
        group = CellGroupRecordFactory()
        assert ReportValidator.resolve_leader_id(group, None) == group.leader_id

    def test_explicit_leader_wins(self):
        group = CellGroupRecordFactory()
        explicit = uuid.uuid4()
        assert ReportValidator.resolve_leader_id(group, explicit) == explicit


class TestValidateDate:

    def test_string_date(self):
        group = CellGroupRecordFactory()
        assert ReportValidator.validate_date(group, '2025-01-05') == date(2025, 1, 5)

    def test_missing_date(self):
        group = CellGroupRecordFactory()
        with pytest.raises(ReportValidationError) as exc_info:
            ReportValidator.validate_date(group, '')
        assert 'date_of_meeting' in exc_info.value.detail

    def test_malformed_date(self):
        group = CellGroupRecordFactory()
        with pytest.raises(ReportValidationError):
            ReportValidator.validate_date(group, '05/01/20x5')


class TestValidate:

    def test_returns_leader_and_date(self):
        group = CellGroupRecordFactory()
        leader_id, meeting_date = ReportValidator.validate(
            group, group.leader_id, date(2025, 1, 5), set(),
        )
        assert leader_id == group.leader_id
        assert meeting_date == date(2025, 1, 5)
