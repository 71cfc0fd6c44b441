"""Admin registration for the custom User model."""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Default user admin extended with seller and verification flags."""

    list_display = ("username", "email", "is_seller", "email_verified", "is_active", "date_joined")
    list_filter = ("is_seller", "is_staff", "is_active", "email_verified")
    search_fields = ("username", "email", "first_name", "last_name", "phone")
    ordering = ("-date_joined",)
    readonly_fields = ("last_login", "date_joined")

    fieldsets = (
        (None, {"fields": ("username", "password")}),
        ("Personal info", {"fields": ("first_name", "last_name", "email", "phone", "email_verified")}),
        ("Marketplace", {"fields": ("is_seller",)}),
        ("Permissions", {"fields": ("is_active", "is_staff", "is_superuser", "groups", "user_permissions")}),
        ("Important dates", {"fields": ("last_login", "date_joined")}),
    )

    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("username", "email", "is_seller", "password1", "password2"),
            },
        ),
    )

    filter_horizontal = ("groups", "user_permissions")
