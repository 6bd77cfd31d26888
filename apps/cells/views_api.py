"""REST API endpoints for cell groups, weekly reports, visitors and analytics."""
from django.utils.translation import gettext as _
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import viewsets, status, filters
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from apps.core.permissions import IsMember, IsGroupLeader, IsPastorOrAdmin

from .exceptions import EntityNotFound, ReportValidationError
from .models import CellGroup, Visitor, WeeklyReport, HealthHistoryRecord
from .repository import SnapshotRepository
from .serializers import (
    CellGroupSerializer,
    VisitorSerializer,
    WeeklyReportSerializer,
    WeeklyReportWriteSerializer,
    HealthHistoryRecordSerializer,
    HealthDashboardQuerySerializer,
    ConsolidatedQuerySerializer,
)
from .services import CellAnalyticsService
from .services_attendance import AttendanceLedger
from .services_health import HealthScorer
from .services_reports import WeeklyReportService, HealthHistoryService, consolidated_report
from .services_visitors import VisitorTracker, VisitorWorkflowService
from .services_weeks import parse_week_label


def _string_keys(value):
    """JSON objects need string keys; ids are UUIDs in the engine output."""
    if isinstance(value, dict):
        return {str(key): _string_keys(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_string_keys(item) for item in value]
    return value


def _week_param(request):
    """The `?week=` label, or None; a malformed label is a 400."""
    label = request.query_params.get('week') or None
    if label is not None:
        try:
            parse_week_label(label)
        except ValueError:
            raise ValidationError({'week': [_('Semaine invalide.')]})
    return label


class CellGroupViewSet(viewsets.ModelViewSet):
    """Cell groups with their attendance streaks, health history and visitors."""

    queryset = CellGroup.objects.select_related('leader', 'zone', 'status')
    serializer_class = CellGroupSerializer
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['zone', 'status', 'leader']
    search_fields = ['name', 'location', 'leader__first_name', 'leader__last_name']
    ordering_fields = ['name', 'health_score', 'created_at']
    ordering = ['name']

    def get_permissions(self):
        if self.action in ['create', 'update', 'partial_update', 'destroy']:
            return [IsPastorOrAdmin()]
        if self.action == 'health_history' and self.request.method == 'POST':
            return [IsGroupLeader()]
        return [IsMember()]

    @action(detail=True, methods=['get'])
    def streaks(self, request, pk=None):
        """Consecutive-absence streak of every member seen in the group."""
        group = self.get_object()
        snapshot = SnapshotRepository.load_for_group(group.pk)
        rows = AttendanceLedger.member_streaks(snapshot, group.pk)
        return Response(rows)

    @action(detail=True, methods=['get'], url_path='last-report')
    def last_report(self, request, pk=None):
        """Values to prefill a new report with."""
        group = self.get_object()
        return Response(WeeklyReportService.prefill(group))

    @action(detail=True, methods=['get', 'post'], url_path='health-history')
    def health_history(self, request, pk=None):
        group = self.get_object()

        if request.method == 'POST':
            serializer = HealthHistoryRecordSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            entry = HealthHistoryService.record(group, **serializer.validated_data)
            return Response(
                HealthHistoryRecordSerializer(entry).data,
                status=status.HTTP_201_CREATED,
            )

        records = HealthHistoryRecord.objects.filter(cell_group=group)
        return Response({
            'records': HealthHistoryRecordSerializer(records, many=True).data,
            'summary': HealthScorer.summarize_history(records).as_dict(),
        })

    @action(detail=True, methods=['get'])
    def visitors(self, request, pk=None):
        """Visit counts of the visitors recorded in this group's reports."""
        group = self.get_object()
        snapshot = SnapshotRepository.load_for_group(group.pk)
        return Response(VisitorTracker.visitor_recurrence(snapshot, group.pk))


class WeeklyReportViewSet(viewsets.ModelViewSet):
    """
    Weekly reports.

    Writes go through WeeklyReportService, which derives absentees from
    the roster; PUT replaces the whole report and PATCH is not offered.
    """

    queryset = (
        WeeklyReport.objects
        .select_related('cell_group', 'leader')
        .prefetch_related('attendees', 'absentees', 'visitors')
    )
    serializer_class = WeeklyReportSerializer
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['cell_group', 'leader', 'date_of_meeting']
    search_fields = ['cell_group__name', 'leader__first_name', 'leader__last_name', 'topic']
    ordering_fields = ['date_of_meeting', 'created_at']
    http_method_names = ['get', 'post', 'put', 'delete', 'head', 'options']

    def get_permissions(self):
        if self.action in ['create', 'update', 'destroy']:
            return [IsGroupLeader()]
        return [IsMember()]

    def get_queryset(self):
        queryset = super().get_queryset()
        week = _week_param(self.request) if self.action == 'list' else None
        if week is not None:
            queryset = queryset.filter(date_of_meeting__range=parse_week_label(week))
        return queryset

    def get_serializer_class(self):
        if self.action in ['create', 'update']:
            return WeeklyReportWriteSerializer
        return WeeklyReportSerializer

    @staticmethod
    def _resolve_group(group_id):
        try:
            return CellGroup.objects.get(pk=group_id)
        except CellGroup.DoesNotExist:
            raise EntityNotFound('cell_group', group_id)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        group = self._resolve_group(data['cell_group_id'])

        report = WeeklyReportService.submit(group, data)
        return Response(WeeklyReportSerializer(report).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        report = self.get_object()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        if data['cell_group_id'] != report.cell_group_id:
            raise ReportValidationError(
                detail={'cell_group_id': [_('Un rapport ne peut pas changer de cellule.')]},
                kind='weekly_report',
                entity_id=report.pk,
            )

        report = WeeklyReportService.update(report, data)
        return Response(WeeklyReportSerializer(report).data)

    def destroy(self, request, *args, **kwargs):
        WeeklyReportService.delete(self.get_object())
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=['get'])
    def weeks(self, request):
        """Distinct week labels of every report, newest first."""
        snapshot = SnapshotRepository.load()
        return Response(CellAnalyticsService.week_labels(snapshot))


class VisitorViewSet(viewsets.ModelViewSet):
    """
    Visitors and their follow-up workflow.

    The list shows visitors not yet converted; a converted visitor
    stays reachable by id.
    """

    queryset = Visitor.objects.select_related('cell_group', 'member')
    serializer_class = VisitorSerializer
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_fields = ['cell_group', 'follow_up_status']
    ordering_fields = ['surname', 'first_name', 'date_of_first_visit', 'created_at']
    ordering = ['surname', 'first_name']

    def get_permissions(self):
        if self.action in ['destroy']:
            return [IsPastorOrAdmin()]
        if self.action in ['create', 'update', 'partial_update', 'advance_follow_up', 'convert']:
            return [IsGroupLeader()]
        return [IsMember()]

    def list(self, request, *args, **kwargs):
        visitors = VisitorTracker.active_visitors(
            self.filter_queryset(self.get_queryset()),
            search=request.query_params.get('search'),
        )
        page = self.paginate_queryset(visitors)
        if page is not None:
            serializer = self.get_serializer(page, many=True)
            return self.get_paginated_response(serializer.data)
        return Response(self.get_serializer(visitors, many=True).data)

    @action(detail=True, methods=['post'], url_path='advance-follow-up')
    def advance_follow_up(self, request, pk=None):
        """pending -> in_progress -> done -> pending."""
        visitor = VisitorWorkflowService.advance(self.get_object())
        return Response(self.get_serializer(visitor).data)

    @action(detail=True, methods=['post'])
    def convert(self, request, pk=None):
        visitor = VisitorWorkflowService.convert(self.get_object())
        return Response(self.get_serializer(visitor).data)


class AnalyticsViewSet(viewsets.ViewSet):
    """Read-only analytics computed from a fresh snapshot on every call."""

    permission_classes = [IsMember]

    def _snapshot(self):
        return SnapshotRepository.load()

    @action(detail=False, methods=['get'], url_path='view')
    def annotated(self, request):
        """Every derived fact for the selected (or latest) week."""
        week = _week_param(request)
        data = CellAnalyticsService.build_annotated_view(self._snapshot(), week)
        return Response(_string_keys(data))

    @action(detail=False, methods=['get'])
    def dashboard(self, request):
        """Health dashboard with search, low-health filter and sorting."""
        query = HealthDashboardQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data

        snapshot = self._snapshot()
        groups = HealthScorer.filter_groups(
            snapshot.groups.values(),
            search=params.get('search'),
            low_health_only=params['low_health'],
            sort_by=params['sort'],
        )
        return Response({
            'summary': HealthScorer.dashboard_summary(groups),
            'groups': HealthScorer.group_health_records(snapshot, groups),
        })

    @action(detail=False, methods=['get'])
    def ranking(self, request):
        week = _week_param(request)
        ranking = CellAnalyticsService.ranking(self._snapshot(), week)
        return Response(ranking.as_dict())

    @action(detail=False, methods=['get'], url_path='at-risk')
    def at_risk(self, request):
        """Members absent from enough consecutive meetings to need follow-up."""
        return Response(AttendanceLedger.at_risk_members(self._snapshot()))

    @action(detail=False, methods=['get'], url_path='absentee-trends')
    def absentee_trends(self, request):
        return Response(AttendanceLedger.absentee_trends(self._snapshot()))

    @action(detail=False, methods=['get'])
    def consolidated(self, request):
        """Per-group monthly totals."""
        query = ConsolidatedQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data
        return Response(consolidated_report(self._snapshot(), params['month'], params['year']))
