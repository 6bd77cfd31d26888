"""Serializers for cells models."""
from rest_framework import serializers

from apps.core.constants import HealthSortOrder
from .models import CellGroup, Visitor, WeeklyReport, HealthHistoryRecord


class CellGroupSerializer(serializers.ModelSerializer):
    leader_name = serializers.CharField(source='leader.full_name', read_only=True, default=None)
    zone_name = serializers.CharField(source='zone.name', read_only=True, default=None)
    status_name = serializers.CharField(source='status.name', read_only=True, default=None)
    member_count = serializers.ReadOnlyField()

    class Meta:
        model = CellGroup
        fields = ['id', 'name', 'zone', 'zone_name', 'leader', 'leader_name',
                  'location', 'status', 'status_name', 'health_score',
                  'member_count']
        read_only_fields = ['health_score']


class VisitorSerializer(serializers.ModelSerializer):
    full_name = serializers.ReadOnlyField()

    class Meta:
        model = Visitor
        fields = ['id', 'first_name', 'surname', 'full_name', 'phone', 'email',
                  'date_of_first_visit', 'how_heard', 'invited_by',
                  'cell_group', 'member', 'status', 'follow_up_status',
                  'next_follow_up_date', 'notes']
        read_only_fields = ['member', 'status', 'follow_up_status']


class WeeklyReportSerializer(serializers.ModelSerializer):
    cell_group_name = serializers.CharField(source='cell_group.name', read_only=True)
    leader_name = serializers.CharField(source='leader.full_name', read_only=True)
    attendee_ids = serializers.PrimaryKeyRelatedField(source='attendees', many=True, read_only=True)
    absentee_ids = serializers.PrimaryKeyRelatedField(source='absentees', many=True, read_only=True)
    visitor_ids = serializers.PrimaryKeyRelatedField(source='visitors', many=True, read_only=True)

    class Meta:
        model = WeeklyReport
        fields = ['id', 'cell_group', 'cell_group_name', 'date_of_meeting',
                  'leader', 'leader_name', 'attendee_ids', 'absentee_ids',
                  'absentee_reasons', 'visitor_ids', 'attendance', 'topic',
                  'testimonies', 'prayer_requests', 'follow_ups', 'challenges',
                  'support_needed', 'created_at', 'updated_at']


class WeeklyReportWriteSerializer(serializers.Serializer):
    """Payload shape only; business rules live in WeeklyReportService."""
    cell_group_id = serializers.UUIDField()
    date_of_meeting = serializers.CharField(allow_blank=True, required=False)
    leader_id = serializers.UUIDField(required=False, allow_null=True)
    attendee_ids = serializers.ListField(child=serializers.UUIDField(), required=False, default=list)
    visitor_ids = serializers.ListField(child=serializers.UUIDField(), required=False, default=list)
    absentee_reasons = serializers.DictField(child=serializers.CharField(allow_blank=True), required=False, default=dict)
    attendance = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    topic = serializers.CharField(max_length=255, allow_blank=True, required=False)
    testimonies = serializers.CharField(allow_blank=True, required=False)
    prayer_requests = serializers.CharField(allow_blank=True, required=False)
    follow_ups = serializers.CharField(allow_blank=True, required=False)
    challenges = serializers.CharField(allow_blank=True, required=False)
    support_needed = serializers.CharField(allow_blank=True, required=False)


class HealthHistoryRecordSerializer(serializers.ModelSerializer):
    class Meta:
        model = HealthHistoryRecord
        fields = ['id', 'cell_group', 'report_date', 'health_score',
                  'attendance', 'notes', 'created_at']
        read_only_fields = ['cell_group', 'created_at']


class HealthDashboardQuerySerializer(serializers.Serializer):
    search = serializers.CharField(required=False, allow_blank=True)
    low_health = serializers.BooleanField(required=False, default=False)
    sort = serializers.ChoiceField(
        choices=HealthSortOrder.CHOICES,
        required=False,
        default=HealthSortOrder.NAME,
    )


class ConsolidatedQuerySerializer(serializers.Serializer):
    month = serializers.IntegerField(min_value=1, max_value=12)
    year = serializers.IntegerField(min_value=1900, max_value=9999)
