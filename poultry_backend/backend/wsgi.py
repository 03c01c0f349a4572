# backend/wsgi.py
"""
WSGI entrypoint (gunicorn backend.wsgi).
Production deployments set DJANGO_ENV=prod or DJANGO_SETTINGS_MODULE.
"""

from django.core.wsgi import get_wsgi_application

from backend.settings import ensure_settings_module

ensure_settings_module()

application = get_wsgi_application()
