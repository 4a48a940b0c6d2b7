"""URL patterns for the `core` app."""
from django.urls import path

from .views import HealthView, LoginView

urlpatterns = [
    path("health/", HealthView.as_view(), name="health"),
    path("auth/login/", LoginView.as_view(), name="login"),
]
