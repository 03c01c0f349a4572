# backend/settings/__init__.py
"""
PATH: backend/settings/__init__.py

Settings selection shared by manage.py, wsgi.py and asgi.py.

Order:
1. DJANGO_SETTINGS_MODULE, when it names a concrete module
2. DJANGO_ENV=dev|prod
3. backend.settings.dev

The package itself defines no settings.
"""

from __future__ import annotations

import os

SETTINGS_BY_ENV = {
    "dev": "backend.settings.dev",
    "prod": "backend.settings.prod",
}


def ensure_settings_module() -> str:
    current = (os.environ.get("DJANGO_SETTINGS_MODULE") or "").strip()
    if current and current != __name__:
        return current

    env_name = (os.environ.get("DJANGO_ENV") or "dev").strip().lower()
    if env_name not in SETTINGS_BY_ENV:
        raise RuntimeError(
            f"DJANGO_ENV must be one of {sorted(SETTINGS_BY_ENV)}, got {env_name!r}."
        )

    os.environ["DJANGO_SETTINGS_MODULE"] = SETTINGS_BY_ENV[env_name]
    return SETTINGS_BY_ENV[env_name]
