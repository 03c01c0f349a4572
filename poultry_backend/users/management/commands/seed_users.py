# users/management/commands/seed_users.py

from __future__ import annotations

from dataclasses import dataclass

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from permissions.roles import ROLE_ADMIN, ROLE_OWNER, ROLE_STAFF


@dataclass(frozen=True)
class SeedUserSpec:
    role: str
    email: str
    first_name: str = ""
    last_name: str = ""


SEED_USERS = [
    SeedUserSpec(ROLE_ADMIN, "admin@example.com", "System", "Admin"),
    SeedUserSpec(ROLE_OWNER, "owner@example.com", "Business", "Owner"),
    SeedUserSpec(ROLE_STAFF, "staff@example.com", "Yard", "Staff"),
]


class Command(BaseCommand):
    help = "Seed one admin, one owner and one staff user (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--password",
            type=str,
            default="Pass1234!",
            help="Password for seeded users (default: Pass1234!)",
        )
        parser.add_argument(
            "--force-password",
            action="store_true",
            help="Reset password for existing seeded users too.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        password = options.get("password") or ""
        force_password = bool(options.get("force_password"))

        if len(password) < 6:
            raise CommandError("--password must be at least 6 characters.")

        User = get_user_model()

        created_count = 0
        updated_count = 0

        for spec in SEED_USERS:
            user = User.objects.filter(email=spec.email).first()

            if user is None:
                User.objects.create_user(
                    email=spec.email,
                    password=password,
                    role=spec.role,
                    first_name=spec.first_name,
                    last_name=spec.last_name,
                    is_staff=spec.role == ROLE_ADMIN,
                    is_superuser=spec.role == ROLE_ADMIN,
                )
                created_count += 1
                continue

            dirty = False
            if user.role != spec.role:
                user.role = spec.role
                dirty = True
            if not user.is_active:
                user.is_active = True
                dirty = True
            if force_password:
                user.set_password(password)
                dirty = True

            if dirty:
                user.save()
                updated_count += 1

        self.stdout.write(
            self.style.SUCCESS(
                f"Seeded users: created={created_count} updated={updated_count}"
            )
        )
