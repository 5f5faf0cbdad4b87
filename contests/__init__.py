"""
Contests Django application.

This app aggregates programming contest schedules from Codeforces, CodeChef,
LeetCode and a scraped aggregator page into one bookmarkable feed.
"""

default_app_config = "contests.apps.ContestsConfig"
