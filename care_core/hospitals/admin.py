from django.contrib import admin

from care_core.hospitals.models import Hospital


@admin.register(Hospital)
class HospitalAdmin(admin.ModelAdmin):
    list_display = ("name", "address", "state", "zip", "updated_at")
    list_filter = ("state",)
    search_fields = ("name", "address", "zip")
    readonly_fields = ("created_at", "updated_at")
    ordering = ("name",)
