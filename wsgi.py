"""
WSGI entry point.

Usage:
    flask --app wsgi run
    flask --app wsgi enrich-snapshot snapshot.json
    gunicorn wsgi:app
"""

from maintflow import create_app

app = create_app()
