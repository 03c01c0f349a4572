# users/admin.py

"""
USERS ADMIN

Role assignment (admin / owner / staff) happens here. The list shows which
users currently hold ledger access so a demoted owner is easy to spot.
"""

from __future__ import annotations

from django.contrib import admin
from django.contrib.auth import get_user_model
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

User = get_user_model()


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    ordering = ("email",)
    list_display = ("email", "display_name", "role", "ledger_access", "is_active")
    list_filter = ("role", "is_active")
    search_fields = ("email", "username", "first_name", "last_name")
    readonly_fields = ("last_login", "created_at", "updated_at")

    fieldsets = (
        (None, {"fields": ("email", "password")}),
        ("Profile", {"fields": ("username", "first_name", "last_name")}),
        ("Ledger role", {"fields": ("role", "is_active")}),
        ("Django admin", {"fields": ("is_staff", "is_superuser")}),
        ("Audit", {"fields": ("last_login", "created_at", "updated_at")}),
    )

    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": (
                    "email",
                    "username",
                    "first_name",
                    "last_name",
                    "role",
                    "password1",
                    "password2",
                ),
            },
        ),
    )

    @admin.display(boolean=True, description="Ledger access")
    def ledger_access(self, obj):
        return obj.has_ledger_access
