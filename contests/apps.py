"""
Contests application configuration.
"""

from django.apps import AppConfig


class ContestsConfig(AppConfig):
    """Configuration for the contests Django application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "contests"
    verbose_name = "Contest Tracker"
