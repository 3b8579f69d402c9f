"""
WSGI config for the SmartHealthcare project.

It exposes the WSGI callable as a module-level variable named ``application``.
Plain WSGI serves the HTTP API only; the real-time channel needs the ASGI
entrypoint in ``smarthealthcare.asgi``.
"""
import os

from django.core.wsgi import get_wsgi_application  # type: ignore

# Set the default settings module for the 'django' program.
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'smarthealthcare.settings')

application = get_wsgi_application()
