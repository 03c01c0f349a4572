# backend/asgi.py
"""
PATH: backend/asgi.py

ASGI entrypoint. Same settings resolution as wsgi.py.
"""

from django.core.asgi import get_asgi_application

from backend.settings import ensure_settings_module

ensure_settings_module()

application = get_asgi_application()
