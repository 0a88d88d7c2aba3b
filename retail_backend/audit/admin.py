# audit/admin.py

from django.contrib import admin

from audit.models import AuditLog


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ("occurred_at", "entity_name", "entity_id", "action", "user")
    list_filter = ("entity_name", "action")
    search_fields = ("entity_name", "entity_id", "action")
    readonly_fields = ("user", "entity_name", "entity_id", "action", "changes_json", "occurred_at")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
