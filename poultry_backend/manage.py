#!/usr/bin/env python
"""
PATH: manage.py

Django management entrypoint for the poultry ledger.

Settings resolve through backend.settings.ensure_settings_module():
DJANGO_SETTINGS_MODULE, then DJANGO_ENV (dev|prod), then dev.

Common commands:
    python manage.py migrate
    python manage.py seed_users --password <secret>
"""

from __future__ import annotations

import sys


def main() -> None:
    from backend.settings import ensure_settings_module

    ensure_settings_module()

    from django.core.management import execute_from_command_line

    execute_from_command_line(sys.argv)


if __name__ == "__main__":
    main()
