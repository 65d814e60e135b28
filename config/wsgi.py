"""
WSGI entry point for campus_events.

ASGI (``config.asgi``) is the primary deployment target because it also
serves Socket.IO; this module remains for plain HTTP hosts and ``runserver``.
"""

import os

from django.core.wsgi import get_wsgi_application

if "DJANGO_SETTINGS_MODULE" not in os.environ:
    local = os.environ.get("BUILD_ENV", "production").lower() == "local"
    os.environ["DJANGO_SETTINGS_MODULE"] = (
        "config.settings.local" if local else "config.settings.production"
    )

application = get_wsgi_application()
