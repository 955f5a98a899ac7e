from django.contrib import admin

from care_core.visits.models import OfficeVisit, OphthalmologySurgery


@admin.register(OfficeVisit)
class OfficeVisitAdmin(admin.ModelAdmin):
    list_display = ("id", "patient", "hcp", "hospital", "date", "type", "prescheduled")
    list_filter = ("type", "prescheduled", "hospital")
    search_fields = ("patient__username", "hcp__username", "notes")
    readonly_fields = ("created_at", "updated_at")
    ordering = ("-date",)


@admin.register(OphthalmologySurgery)
class OphthalmologySurgeryAdmin(admin.ModelAdmin):
    list_display = ("id", "patient", "hcp", "hospital", "date", "surgery_type")
    list_filter = ("surgery_type", "hospital")
    search_fields = ("patient__username", "hcp__username", "notes")
    readonly_fields = ("created_at", "updated_at")
    ordering = ("-date",)
