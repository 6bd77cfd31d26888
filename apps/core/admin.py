"""Base admin classes for all apps."""
from django.contrib import admin
from django.utils.translation import gettext_lazy as _


class BaseModelAdmin(admin.ModelAdmin):
    """
    Admin for BaseModel subclasses.

    Lists inactive rows too, since deactivated members and groups still
    appear in report history.
    """
    list_display = ['id', 'created_at', 'updated_at', 'is_active']
    list_filter = ['is_active', 'created_at']
    search_fields = ['id']
    readonly_fields = ['id', 'created_at', 'updated_at']
    ordering = ['-created_at']
    actions = ['deactivate_selected', 'activate_selected']

    def get_queryset(self, request):
        return self.model.all_objects.all()

    @admin.action(description=_('Désactiver la sélection'))
    def deactivate_selected(self, request, queryset):
        updated = queryset.update(is_active=False)
        self.message_user(request, _('%(count)d élément(s) désactivé(s).') % {'count': updated})

    @admin.action(description=_('Réactiver la sélection'))
    def activate_selected(self, request, queryset):
        updated = queryset.update(is_active=True)
        self.message_user(request, _('%(count)d élément(s) réactivé(s).') % {'count': updated})
