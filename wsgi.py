"""Web Server Gateway Interface entry-point."""

from iotsa_auth.factory import create_web_app

application = create_web_app()
