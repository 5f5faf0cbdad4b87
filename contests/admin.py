"""
Django admin configuration for the Contest Tracker.

Admins use it to:
- Browse stored contests and edit solution links by hand
- Queue a forced refresh of every contest source
- Inspect and remove user bookmarks
"""

from django.contrib import admin
from django.utils.html import format_html

from contests.models import Bookmark, Contest, ContestStatus

# Import task for the refresh action
from contests.tasks import refresh_contests

STATUS_COLORS = {
    ContestStatus.UPCOMING: "#007bff",
    ContestStatus.ONGOING: "#28a745",
    ContestStatus.FINISHED: "#6c757d",
}


@admin.register(Contest)
class ContestAdmin(admin.ModelAdmin):
    """Admin interface for contests."""

    list_display = [
        "name",
        "platform",
        "date",
        "end_time",
        "status_badge",
        "has_solution",
        "updated_at",
    ]
    list_filter = ["platform", "status"]
    search_fields = ["name", "link"]
    date_hierarchy = "date"
    ordering = ["-date"]
    readonly_fields = ["created_at", "updated_at"]

    fieldsets = (
        ("Contest", {
            "fields": ("name", "platform", "status"),
        }),
        ("Timing", {
            "fields": ("date", "end_time"),
        }),
        ("Links", {
            "fields": ("link", "solution_link"),
            "description": "A solution link set here is kept across refreshes.",
        }),
        ("Metadata", {
            "fields": ("created_at", "updated_at"),
            "classes": ("collapse",),
        }),
    )

    actions = ["refresh_all_sources", "clear_solution_links"]

    def status_badge(self, obj):
        """Display status as colored badge."""
        if not obj.status:
            return "-"
        color = STATUS_COLORS.get(obj.status, "#6c757d")
        return format_html(
            '<span style="background-color: {}; color: white; '
            'padding: 2px 8px; border-radius: 4px;">{}</span>',
            color,
            obj.get_status_display(),
        )

    status_badge.short_description = "Status"

    @admin.display(boolean=True, description="Solution")
    def has_solution(self, obj):
        return bool(obj.solution_link)

    @admin.action(description="Refresh all contest sources now")
    def refresh_all_sources(self, request, queryset):
        """Queue a forced refresh. The selection is ignored; every source is fetched."""
        task = refresh_contests.delay(force=True)
        self.message_user(
            request,
            f"Queued contest refresh (task {task.id}). Contests will update shortly."
        )

    @admin.action(description="Clear solution links")
    def clear_solution_links(self, request, queryset):
        """Remove stored solution links from the selected contests."""
        count = queryset.update(solution_link=None)
        self.message_user(request, f"Cleared solution links on {count} contest(s).")


@admin.register(Bookmark)
class BookmarkAdmin(admin.ModelAdmin):
    """Admin interface for bookmarks."""

    list_display = ["user", "contest", "created_at"]
    list_filter = ["contest__platform"]
    search_fields = ["user__username", "contest__name"]
    raw_id_fields = ["user", "contest"]
    ordering = ["-created_at"]
