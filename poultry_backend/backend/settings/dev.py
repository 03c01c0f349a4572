# backend/settings/dev.py
"""
PATH: backend/settings/dev.py

LOCAL DEVELOPMENT SETTINGS
SQLite by default, permissive local CORS, chattier domain loggers.
"""

from __future__ import annotations

from .base import *  # noqa: F403
from .base import BASE_DIR, DATABASES, LOGGING, env  # explicit for Ruff (F405)

DEBUG = True

ALLOWED_HOSTS = env.list("ALLOWED_HOSTS", default=["localhost", "127.0.0.1"])

CORS_ALLOWED_ORIGINS = env.list(
    "CORS_ALLOWED_ORIGINS", default=["http://localhost:5173"]
)

CSRF_TRUSTED_ORIGINS = env.list(
    "CSRF_TRUSTED_ORIGINS", default=["http://localhost:5173"]
)

CORS_ALLOW_CREDENTIALS = True

_dev_log_level = env("LOG_LEVEL", default="DEBUG").strip().upper()
for _name in ("receivables", "documents", "inventory", "finance", "api"):
    LOGGING["loggers"][_name]["level"] = _dev_log_level

# SQLite has no row locks: BEGIN IMMEDIATE takes the write lock up front so
# concurrent finalizes queue on the invoice counter instead of racing it.
# File-backed test DB so worker threads share it.
if DATABASES["default"]["ENGINE"] == "django.db.backends.sqlite3":
    DATABASES["default"].setdefault("OPTIONS", {}).update(
        {"transaction_mode": "IMMEDIATE", "timeout": 20}
    )
    DATABASES["default"].setdefault("TEST", {}).setdefault(
        "NAME", str(BASE_DIR / "test_db.sqlite3")
    )
