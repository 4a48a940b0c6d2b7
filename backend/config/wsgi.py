"""
WSGI config for the Agromet backend.

Exposes the application object so gunicorn / mod_wsgi can serve the API.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

application = get_wsgi_application()
