"""
WSGI config for parkease project.

Run with: gunicorn --bind 0.0.0.0:8000 parkease.wsgi:application
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'parkease.settings')

application = get_wsgi_application()
