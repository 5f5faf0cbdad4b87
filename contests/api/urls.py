"""
API URL Configuration

URL patterns for the contest REST API.

Endpoints:
- GET    /api/v1/contests/               - Upcoming and past contests
- POST   /api/v1/contests/refresh/       - Queue a forced refresh (admin)
- GET    /api/v1/contests/sources/       - Configured contest sources
- GET    /api/v1/bookmarks/              - Current user's bookmarks
- POST   /api/v1/bookmarks/              - Bookmark a contest
- DELETE /api/v1/bookmarks/<id>/         - Remove a bookmark
- POST   /api/v1/solutions/              - Set a contest's solution link (admin)
"""

from django.urls import path

from contests.api.views import (
    contest_feed,
    trigger_refresh,
    list_sources,
    bookmarks,
    remove_bookmark,
    add_solution,
)

app_name = 'contests_api'

urlpatterns = [
    # Contest feed
    path('contests/', contest_feed, name='contest_feed'),
    path('contests/refresh/', trigger_refresh, name='trigger_refresh'),
    path('contests/sources/', list_sources, name='list_sources'),

    # Bookmarks
    path('bookmarks/', bookmarks, name='bookmarks'),
    path('bookmarks/<int:bookmark_id>/', remove_bookmark, name='remove_bookmark'),

    # Solutions
    path('solutions/', add_solution, name='add_solution'),
]
