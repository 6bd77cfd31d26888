"""Cell groups admin configuration."""
from django.contrib import admin

from apps.core.admin import BaseModelAdmin

from .models import (
    Zone, CellStatus, CellGroup, CellGroupMembership,
    Visitor, WeeklyReport, HealthHistoryRecord,
)


class CellGroupMembershipInline(admin.TabularInline):
    """Inline for managing a cell group's roster."""
    model = CellGroupMembership
    extra = 0
    raw_id_fields = ['member']


class HealthHistoryInline(admin.TabularInline):
    model = HealthHistoryRecord
    extra = 0
    fields = ['report_date', 'health_score', 'attendance', 'notes']


@admin.register(Zone)
class ZoneAdmin(BaseModelAdmin):
    list_display = ['name', 'is_active']
    search_fields = ['name']
    ordering = ['name']


@admin.register(CellStatus)
class CellStatusAdmin(BaseModelAdmin):
    list_display = ['name', 'is_active']
    search_fields = ['name']
    ordering = ['name']


@admin.register(CellGroup)
class CellGroupAdmin(BaseModelAdmin):
    list_display = ['name', 'zone', 'leader', 'status', 'health_score', 'is_active']
    list_filter = ['zone', 'status', 'is_active']
    search_fields = ['name', 'location', 'leader__first_name', 'leader__last_name']
    raw_id_fields = ['leader']
    ordering = ['name']
    inlines = [CellGroupMembershipInline, HealthHistoryInline]


@admin.register(Visitor)
class VisitorAdmin(BaseModelAdmin):
    list_display = ['surname', 'first_name', 'cell_group', 'status', 'follow_up_status', 'date_of_first_visit']
    list_filter = ['status', 'follow_up_status', 'cell_group']
    search_fields = ['first_name', 'surname', 'email', 'phone']
    raw_id_fields = ['member']
    ordering = ['surname', 'first_name']


@admin.register(WeeklyReport)
class WeeklyReportAdmin(BaseModelAdmin):
    list_display = ['cell_group', 'date_of_meeting', 'leader', 'attendance']
    list_filter = ['cell_group', 'date_of_meeting']
    search_fields = ['cell_group__name', 'topic', 'leader__first_name', 'leader__last_name']
    raw_id_fields = ['leader', 'attendees', 'absentees', 'visitors']
    date_hierarchy = 'date_of_meeting'
    ordering = ['-date_of_meeting']
