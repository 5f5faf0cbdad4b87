"""
Celery configuration for the Contest Tracker service.

Refresh cycles can be pushed to a worker instead of running inside a
request. No beat schedule is installed: the feed endpoint refreshes stale
data on read, and admins can trigger a refresh on demand.
"""

import os
from celery import Celery

# Set the default Django settings module for the 'celery' program.
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("contest_tracker")

# Using a string here means the worker doesn't have to serialize
# the configuration object to child processes.
# - namespace='CELERY' means all celery-related configuration keys
#   should have a `CELERY_` prefix.
app.config_from_object("django.conf:settings", namespace="CELERY")

# Load task modules from all registered Django apps.
app.autodiscover_tasks()

app.conf.task_queues = {
    "refresh": {
        "exchange": "refresh",
        "routing_key": "refresh",
    },
    "default": {
        "exchange": "default",
        "routing_key": "default",
    },
}

app.conf.task_default_queue = "default"
app.conf.task_default_exchange = "default"
app.conf.task_default_routing_key = "default"

app.conf.task_routes = {
    "contests.tasks.refresh_contests": {"queue": "refresh"},
}
