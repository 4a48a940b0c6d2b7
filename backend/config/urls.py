"""
Root URL configuration for the backend project.

Each app owns its own `urls.py`; everything the dashboard talks to lives
under /api/.
"""
from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", include("core.urls")),
    path("api/", include("callcenter.urls")),
    path("api/", include("supervision.urls")),
    # Climate routes are matched last: `<climate_parameter>` only accepts
    # the registered parameter slugs.
    path("api/", include("climate.urls")),
]

# In development it is convenient to serve uploaded student files
# directly from Django.
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
