"""Admin interface for accounts app."""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from unfold.admin import ModelAdmin

from accounts.models import AiventUser


@admin.register(AiventUser)
class AiventUserAdmin(UserAdmin, ModelAdmin):  # type: ignore[type-arg,misc]
    list_display = ["username", "email", "preferred_name", "is_staff", "date_joined"]
    search_fields = ["username", "email", "preferred_name", "first_name", "last_name"]
    fieldsets = (
        *(UserAdmin.fieldsets or ()),
        ("Profile", {"fields": ("preferred_name",)}),
    )
