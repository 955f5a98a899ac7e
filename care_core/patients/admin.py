from django.contrib import admin

from care_core.patients.models import Patient


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ("user", "first_name", "last_name", "date_of_birth", "gender", "updated_at")
    list_filter = ("gender", "state")
    search_fields = ("user__username", "first_name", "last_name", "email", "phone")
    readonly_fields = ("created_at", "updated_at")
    ordering = ("last_name", "first_name")
