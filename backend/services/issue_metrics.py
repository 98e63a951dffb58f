"""Issue response and resolution time metrics.

Enriches raw Jira issues with first-response and resolution timings and rolls
them up into averages for the dashboard.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

RECENT_WINDOW = timedelta(days=7)

# Jira formats: "2024-10-31T12:11:56.289-0400", "2024-10-31T12:11:56.289+0000"
# or "2024-10-31T12:11:56.289Z". %z accepts all three.
DATE_FORMATS = [
    "%Y-%m-%dT%H:%M:%S.%f%z",  # With milliseconds and timezone
    "%Y-%m-%dT%H:%M:%S%z",      # Without milliseconds, with timezone
    "%Y-%m-%dT%H:%M:%S.%f",     # With milliseconds, no timezone
    "%Y-%m-%dT%H:%M:%S",        # Basic ISO format
    "%Y-%m-%d"                   # Date only
]


def parse_jira_date(date_str) -> Optional[datetime]:
    """Parse a Jira timestamp into an aware datetime.

    Naive values are taken to be UTC. Returns None for empty or
    unparseable input, and for values that fall outside the representable
    range once shifted to UTC.
    """
    if not date_str or not isinstance(date_str, str):
        return None

    for fmt in DATE_FORMATS:
        try:
            parsed = datetime.strptime(date_str, fmt)
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            return parsed.astimezone(timezone.utc)
        except (ValueError, OverflowError):
            continue

    return None


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """Render a datetime as UTC ISO-8601 with milliseconds, e.g. 2024-01-01T01:00:00.000Z."""
    if value is None:
        return None
    utc = value.astimezone(timezone.utc)
    return f"{utc.strftime('%Y-%m-%dT%H:%M:%S')}.{utc.microsecond // 1000:03d}Z"


def _elapsed_ms(start: Optional[datetime], end: Optional[datetime]) -> Optional[int]:
    """Milliseconds from start to end, clamped at zero."""
    if start is None or end is None:
        return None
    delta = end - start
    ms = (delta.days * 86400 + delta.seconds) * 1000 + delta.microseconds // 1000
    return max(0, ms)


def _issue_fields(issue: dict) -> dict:
    fields = issue.get("fields")
    return fields if isinstance(fields, dict) else {}


def _first_comment_at(fields: dict) -> Optional[datetime]:
    """Find the earliest comment timestamp on an issue."""
    comment = fields.get("comment")
    comments = comment.get("comments") if isinstance(comment, dict) else None
    if not isinstance(comments, list):
        return None

    earliest = None
    for c in comments:
        created = parse_jira_date(c.get("created")) if isinstance(c, dict) else None
        if created is None:
            continue
        if earliest is None or created < earliest:
            earliest = created

    return earliest


def _resolved_at(fields: dict) -> Optional[datetime]:
    """Get the resolution time of an issue.

    Issues moved to a Done status without a resolution being set have no
    resolutiondate, so the status category change stands in for it.
    """
    resolved = parse_jira_date(fields.get("resolutiondate"))
    if resolved is None:
        resolved = parse_jira_date(fields.get("statuscategorychangedate"))
    return resolved


def enrich_issue(issue: dict) -> dict:
    """Add response and resolution timings to a raw Jira issue.

    Args:
        issue: Issue JSON as returned by the Jira search API

    Returns:
        A copy of the issue with four extra keys:
            - firstCommentAt: earliest comment timestamp, or None
            - timeToFirstMs: ms from creation to first comment, or None
            - resolvedAt: resolution timestamp, or None
            - timeToResolutionMs: ms from creation to resolution, or None
    """
    fields = _issue_fields(issue)
    created = parse_jira_date(fields.get("created"))
    first_comment = _first_comment_at(fields)
    resolved = _resolved_at(fields)

    enriched = dict(issue)
    enriched.update({
        "firstCommentAt": format_timestamp(first_comment),
        "timeToFirstMs": _elapsed_ms(created, first_comment),
        "resolvedAt": format_timestamp(resolved),
        "timeToResolutionMs": _elapsed_ms(created, resolved)
    })
    return enriched


def enrich_issues(issues: list) -> list:
    """Enrich every issue in a search result, skipping malformed entries."""
    return [enrich_issue(issue) for issue in issues if isinstance(issue, dict)]


def average_ms(values) -> Optional[int]:
    """Mean of the non-None values rounded to whole ms, or None when there are none."""
    present = [v for v in values if v is not None]
    if not present:
        return None
    return round(sum(present) / len(present))


def _within_window(timestamp: Optional[datetime], now: datetime,
                   window: timedelta = RECENT_WINDOW) -> bool:
    """Check that a timestamp falls in [now - window, now]."""
    if timestamp is None:
        return False
    age = now - timestamp
    return timedelta(0) <= age <= window


def calculate_summary(open_issues: list, resolved_issues: list,
                      now: datetime) -> dict:
    """Calculate average response and resolution times.

    Open and resolved populations come from separate Jira queries; status is
    not re-checked here.

    Args:
        open_issues: Enriched issues not in the Done status category
        resolved_issues: Enriched issues in the Done status category
        now: Evaluation time for the trailing 7 day windows

    Returns:
        Dict with avgTTRMs, avgTTR7dMs, avgTimeToResolutionMs and
        avgTimeToResolution7dMs. Each is an int in ms, or None when no issue
        contributed a value.
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    recent_ttrs = [
        issue.get("timeToFirstMs") for issue in open_issues
        if _within_window(parse_jira_date(_issue_fields(issue).get("created")), now)
    ]

    recent_resolutions = [
        issue.get("timeToResolutionMs") for issue in resolved_issues
        if _within_window(parse_jira_date(issue.get("resolvedAt")), now)
    ]

    return {
        "avgTTRMs": average_ms(issue.get("timeToFirstMs") for issue in open_issues),
        "avgTTR7dMs": average_ms(recent_ttrs),
        # Unbounded by date: the resolved query is capped by result count only
        "avgTimeToResolutionMs": average_ms(
            issue.get("timeToResolutionMs") for issue in resolved_issues
        ),
        "avgTimeToResolution7dMs": average_ms(recent_resolutions)
    }
