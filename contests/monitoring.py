"""
Sentry integration for the contest refresh pipeline.

Sentry itself is configured in settings/base.py (only when SENTRY_DSN is set;
all calls below are no-ops otherwise). This module:
- Adds breadcrumbs for each source fetch so a failing refresh shows which
  sources ran before it
- Reports fail-soft source errors, which would otherwise only be logged
- Filters API keys out of any extra context

Usage:
    from contests.monitoring import add_source_breadcrumb, capture_source_failure

    add_source_breadcrumb("codeforces", url)
    capture_source_failure("codeforces", error, url=url)
"""

import logging
from typing import Any, Dict, Optional

import sentry_sdk

logger = logging.getLogger(__name__)

# Keys whose values are never sent to Sentry
SENSITIVE_FIELDS = {
    "api_key",
    "apikey",
    "key",
    "authorization",
    "password",
    "secret",
    "token",
}


def _filter_sensitive_data(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Replace values of sensitive keys, recursing into nested dicts.

    Args:
        data: Context dictionary

    Returns:
        Copy of ``data`` with sensitive values replaced by "[Filtered]"
    """
    filtered = {}
    for key, value in data.items():
        if key.lower() in SENSITIVE_FIELDS:
            filtered[key] = "[Filtered]"
        elif isinstance(value, dict):
            filtered[key] = _filter_sensitive_data(value)
        else:
            filtered[key] = value
    return filtered


def add_source_breadcrumb(
    source_name: str,
    url: str,
    message: str = "Source fetch",
    level: str = "info",
    extra_data: Optional[Dict[str, Any]] = None,
) -> None:
    """Record a breadcrumb for an outbound source request."""
    data = {"source": source_name, "url": url}
    if extra_data:
        data.update(_filter_sensitive_data(extra_data))

    sentry_sdk.add_breadcrumb(
        category="contests.source",
        message=message,
        level=level,
        data=data,
    )


def capture_source_failure(
    source_name: str,
    error: BaseException,
    url: Optional[str] = None,
    extra_data: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Report a recovered source failure to Sentry.

    The pipeline keeps going after a source fails, so these are sent at
    warning level with the source name as a tag for grouping.
    """
    with sentry_sdk.new_scope() as scope:
        scope.set_tag("contest_source", source_name)
        scope.set_level("warning")
        if url:
            scope.set_extra("url", url)
        if extra_data:
            for key, value in _filter_sensitive_data(extra_data).items():
                scope.set_extra(key, value)
        sentry_sdk.capture_exception(error)

    logger.debug(f"Reported {source_name} failure to Sentry: {error}")
