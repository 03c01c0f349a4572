# users/urls.py

from django.urls import path

from .views import MeView

app_name = "users"

urlpatterns = [
    # Token issue/refresh live at /api/auth/jwt/... (backend/urls.py)
    path("me/", MeView.as_view(), name="me"),
]
