"""Issue response metrics API endpoints."""

from datetime import datetime, timezone
from flask import Blueprint, current_app, jsonify
from services.issue_metrics import calculate_summary, enrich_issues
from services.jira_issues import IssueFetchError, JiraIssuesService

bp = Blueprint("issues", __name__, url_prefix="/api/issues")


def get_issues_service():
    """Build the Jira client from app configuration."""
    config = current_app.config
    return JiraIssuesService(
        config.get("JIRA_BASE_URL") or "",
        config.get("JIRA_EMAIL"),
        config.get("JIRA_API_TOKEN"),
        config.get("JIRA_PROJECT")
    )


@bp.route("", methods=["GET"])
def get_issues():
    """Get open issues with response time metrics.

    Returns:
        - browseBase: Jira base URL for building issue links
        - issues: Open issues enriched with timing fields
        - avgTTRMs / avgTTR7dMs: Average time to first response (ms)
        - avgTimeToResolutionMs / avgTimeToResolution7dMs: Average time to
          resolution (ms)
    """
    try:
        service = get_issues_service()
        open_issues, resolved_issues = service.get_issue_sets()
    except IssueFetchError as e:
        current_app.logger.error(f"Failed to fetch issues: {e.details}")
        return jsonify({
            "error": "Failed to fetch issues",
            "details": e.details
        }), e.status_code or 500

    issues = enrich_issues(open_issues)
    summary = calculate_summary(
        issues, enrich_issues(resolved_issues), datetime.now(timezone.utc)
    )

    return jsonify({
        "browseBase": service.server,
        "issues": issues,
        **summary
    })
