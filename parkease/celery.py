import os

from celery import Celery

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'parkease.settings')

app = Celery('parkease')
app.config_from_object('django.conf:settings', namespace='CELERY')
app.autodiscover_tasks()
