"""
API Throttling Classes

Custom throttle classes for API rate limiting.
"""

from rest_framework.throttling import AnonRateThrottle, UserRateThrottle


class FeedThrottle(AnonRateThrottle):
    """
    Throttle for the public contest feed.

    Rate: 120 requests per minute per client IP.
    Applied to: /api/v1/contests/
    """

    rate = '120/min'
    scope = 'contest_feed'


class RefreshTriggerThrottle(UserRateThrottle):
    """
    Throttle for manual refresh triggers.

    Rate: 10 requests per hour per user.
    Applied to: /api/v1/contests/refresh/
    """

    rate = '10/hour'
    scope = 'refresh_trigger'
