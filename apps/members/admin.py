"""Member management admin configuration."""
from django.contrib import admin

from apps.core.admin import BaseModelAdmin

from .models import Member


@admin.register(Member)
class MemberAdmin(BaseModelAdmin):
    list_display = ['last_name', 'first_name', 'email', 'phone', 'role', 'is_active']
    list_filter = ['role', 'is_active']
    search_fields = ['first_name', 'last_name', 'email', 'phone']
    ordering = ['last_name', 'first_name']
    raw_id_fields = ['user']
