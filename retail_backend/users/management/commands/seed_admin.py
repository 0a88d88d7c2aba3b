# users/management/commands/seed_admin.py

"""
PATH: users/management/commands/seed_admin.py

Bootstrap the first admin account.

- Does nothing if any user already exists (idempotent).
- Credentials come from AUTO_ADMIN_EMAIL / AUTO_ADMIN_PASSWORD, or --email / --password.
- Never prints the password.
"""

from __future__ import annotations

import os

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction


class Command(BaseCommand):
    help = "Create a default admin user when the user table is empty."

    def add_arguments(self, parser):
        parser.add_argument("--email", default=None)
        parser.add_argument("--password", default=None)

    def handle(self, *args, **options):
        email = (options.get("email") or os.environ.get("AUTO_ADMIN_EMAIL") or "").strip()
        password = (options.get("password") or os.environ.get("AUTO_ADMIN_PASSWORD") or "").strip()

        User = get_user_model()

        with transaction.atomic():
            if User.objects.exists():
                self.stdout.write(self.style.WARNING("Users already exist. Skipping."))
                return

            if not email or not password:
                raise CommandError(
                    "Set AUTO_ADMIN_EMAIL and AUTO_ADMIN_PASSWORD (or pass --email/--password)."
                )

            User.objects.create_superuser(email=email, password=password, username="admin")

        self.stdout.write(self.style.SUCCESS(f"Admin user created: {email}"))
