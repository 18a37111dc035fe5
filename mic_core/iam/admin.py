from django.contrib import admin

from mic_core.iam.models import UserProfile


@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    list_display = ("user", "email", "full_name", "role", "updated_at")
    list_filter = ("role",)
    search_fields = ("email", "full_name", "user__username")
