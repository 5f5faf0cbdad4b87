"""
Contest Tracker REST API.

Function-based DRF views for the contest feed, refresh triggering,
bookmarks and admin-set solution links.
"""
