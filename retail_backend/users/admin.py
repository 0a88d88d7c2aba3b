# users/admin.py

"""
STAFF ACCOUNTS (Django Admin)

Back office staff are managed here: who can ring up orders, who can
void them, who can adjust stock. The role column is the only thing that
drives API capabilities; groups/permissions only matter inside the admin.
"""

from __future__ import annotations

from django.contrib import admin
from django.contrib.auth import get_user_model
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

from permissions.roles import ROLE_CAPABILITIES

User = get_user_model()


@admin.register(User)
class StaffUserAdmin(DjangoUserAdmin):
    ordering = ("-created_at",)
    list_display = ("email", "username", "role", "capability_count", "is_active", "created_at")
    list_filter = ("role", "is_active", "is_superuser")
    search_fields = ("email", "username", "first_name", "last_name")
    readonly_fields = ("created_at", "updated_at", "last_login")

    fieldsets = (
        ("Sign in", {"fields": ("email", "username", "password")}),
        ("Staff profile", {"fields": ("first_name", "last_name", "role")}),
        ("Admin access", {"fields": ("is_active", "is_staff", "is_superuser", "groups")}),
        ("Timestamps", {"fields": ("created_at", "updated_at", "last_login")}),
    )

    add_fieldsets = (
        (
            "New staff member",
            {
                "classes": ("wide",),
                "fields": ("email", "role", "password1", "password2"),
            },
        ),
    )

    @admin.display(description="Capabilities")
    def capability_count(self, obj):
        if obj.is_superuser:
            return "all"
        return len(ROLE_CAPABILITIES.get(obj.role, ()))
