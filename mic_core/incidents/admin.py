from django.contrib import admin

from mic_core.incidents.models import IncidentLog, IncidentType


@admin.register(IncidentType)
class IncidentTypeAdmin(admin.ModelAdmin):
    list_display = ("name", "category", "severity_level", "requires_notification", "is_active")
    list_filter = ("category", "is_active", "requires_notification")
    search_fields = ("name",)


@admin.register(IncidentLog)
class IncidentLogAdmin(admin.ModelAdmin):
    list_display = ("log_date", "client", "incident_type", "count", "location", "user")
    list_filter = ("log_date", "incident_type__category")
    search_fields = ("client__full_name", "incident_type__name", "location")
    raw_id_fields = ("user", "client", "incident_type")
