"""
ASGI config for the marketplace backend.

Uvicorn uses this entry point to serve the Django application. Chat is
plain HTTP polling, so only the HTTP protocol is routed here.

For more information on this file, see:
https://docs.djangoproject.com/en/5.2/howto/deployment/asgi/
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

application = get_asgi_application()
