"""
Django models for the Contest Tracker.

Models: Contest, Bookmark

Contest is the single canonical schema every source adapter normalizes into.
Identity is the (name, platform) pair, enforced by a unique constraint that
also serves as the safety net for concurrent upserts.
"""

from django.conf import settings
from django.db import models
from django.utils import timezone


class Platform(models.TextChoices):
    """Contest platforms known to the tracker."""

    CODEFORCES = "Codeforces", "Codeforces"
    CODECHEF = "CodeChef", "CodeChef"
    LEETCODE = "LeetCode", "LeetCode"
    OTHER = "Other", "Other"


class ContestStatus(models.TextChoices):
    """Lifecycle status of a contest at fetch time."""

    UPCOMING = "upcoming", "Upcoming"
    ONGOING = "ongoing", "Ongoing"
    FINISHED = "finished", "Finished"


class Contest(models.Model):
    """
    A programming contest on one platform.

    Created or updated by the refresh cycle via upsert keyed on
    (name, platform). Never deleted except by an admin.
    """

    name = models.CharField(max_length=255)
    platform = models.CharField(max_length=20, choices=Platform.choices)

    # Timing
    date = models.DateTimeField(help_text="Contest start instant")
    end_time = models.DateTimeField(null=True, blank=True)

    # Links
    link = models.URLField(max_length=500)
    solution_link = models.URLField(
        max_length=500,
        null=True,
        blank=True,
        help_text="Solution video, set by an admin or matched on read",
    )

    status = models.CharField(
        max_length=20, choices=ContestStatus.choices, blank=True, default=""
    )

    # Metadata
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "contests"
        ordering = ["date"]
        constraints = [
            models.UniqueConstraint(
                fields=["name", "platform"], name="unique_contest_per_platform"
            ),
        ]
        indexes = [
            models.Index(fields=["date"], name="contests_date_idx"),
            models.Index(fields=["updated_at"], name="contests_updated_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.platform})"

    def is_upcoming(self, now=None) -> bool:
        """Whether the contest starts at or after ``now``."""
        return self.date >= (now or timezone.now())


class Bookmark(models.Model):
    """A user's saved contest. One bookmark per (user, contest)."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="bookmarks"
    )
    contest = models.ForeignKey(
        Contest, on_delete=models.CASCADE, related_name="bookmarks"
    )
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "bookmarks"
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["user", "contest"], name="unique_bookmark_per_user"
            ),
        ]

    def __str__(self):
        return f"{self.user} -> {self.contest}"
