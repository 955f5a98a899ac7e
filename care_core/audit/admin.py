# care_core/audit/admin.py
from django.contrib import admin

from care_core.audit.models import AuditEntry


@admin.register(AuditEntry)
class AuditEntryAdmin(admin.ModelAdmin):
    list_display = ("transaction_type", "actor", "target", "occurred_at")
    list_filter = ("transaction_type",)
    search_fields = ("actor", "target", "detail")
    readonly_fields = ("transaction_type", "actor", "target", "occurred_at", "detail", "request_id")
    ordering = ("-occurred_at",)

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
