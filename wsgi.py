"""
WSGI Entry Point for Gunicorn

    gunicorn wsgi:app

The configuration is chosen by FLASK_ENV (production on the server).
"""

from app_init import create_app

app = create_app()
