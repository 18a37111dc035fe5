from django.contrib import admin

from mic_core.clients.models import Client


@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    list_display = ("full_name", "is_active", "created_at")
    list_filter = ("is_active",)
    search_fields = ("full_name",)

    def has_delete_permission(self, request, obj=None):
        return False
