"""Plain-text helpers shared by the store and the renderer."""

from __future__ import annotations

import time
from urllib.parse import urlparse


def relative_time(timestamp: int, now: float | None = None) -> str:
    """Format a unix timestamp as a coarse "N units ago" string."""
    if now is None:
        now = time.time()
    diff = max(0, int(now - timestamp))
    if diff < 60:
        return f"{diff} seconds ago"
    diff //= 60
    if diff < 60:
        return f"{diff} minutes ago"
    diff //= 60
    if diff < 24:
        return f"{diff} hours ago"
    diff //= 24
    if diff == 1:
        return "a day ago"
    if diff < 7:
        return f"{diff} days ago"
    if diff < 30:
        return f"{diff // 7} weeks ago"
    months = diff // 30
    if months == 1:
        return "a month ago"
    if months < 12:
        return f"{months} months ago"
    years = diff // 365
    if years <= 1:
        return "a year ago"
    return f"{years} years ago"


def domain_from_url(url: str) -> str:
    """Return the registrable-looking tail (last two labels) of a URL's host.

    Empty string when the URL has no host.
    """
    if not url:
        return ""
    try:
        host = urlparse(url).hostname or ""
    except ValueError:
        return ""
    labels = [label for label in host.split(".") if label]
    if not labels:
        return ""
    return ".".join(labels[-2:])
