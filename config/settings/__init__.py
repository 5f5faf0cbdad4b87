"""
Settings package for the Contest Tracker service.

DJANGO_ENV picks the environment module ("production", "test", or the
development default). Tests point DJANGO_SETTINGS_MODULE straight at
config.settings.test instead.
"""

import os

env = os.getenv("DJANGO_ENV", "development")

if env == "production":
    from .production import *
elif env == "test":
    from .test import *
else:
    from .development import *
