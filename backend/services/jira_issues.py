"""Jira issue search client for the response metrics dashboard."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional
import requests

logger = logging.getLogger(__name__)

MAX_RESULTS = 100

OPEN_ISSUE_FIELDS = [
    "summary", "status", "assignee", "issuetype", "priority",
    "description", "created", "updated", "comment", "resolutiondate"
]

RESOLVED_ISSUE_FIELDS = [
    "created", "resolutiondate", "statuscategorychangedate", "comment"
]


class IssueFetchError(Exception):
    """Raised when issues could not be retrieved from Jira.

    Carries Jira's HTTP status and response body when there was one, so the
    API layer can pass them on to the client.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, details=None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details if details is not None else message


class JiraIssuesService:
    """Fetches open and resolved issues for a Jira project."""

    def __init__(self, server: str, email: str, token: str, project: str):
        if not all([server, email, token]):
            raise IssueFetchError("Missing Jira configuration")
        self.server = server.rstrip("/")
        self.email = email
        self.token = token
        self.project = project

    def _request(self, endpoint: str, payload: dict) -> dict:
        """Make authenticated POST request to Jira API."""
        try:
            response = requests.post(
                f"{self.server}{endpoint}",
                auth=(self.email, self.token),
                headers={
                    "Accept": "application/json",
                    "Content-Type": "application/json"
                },
                json=payload,
                timeout=30
            )
            response.raise_for_status()
            return response.json()
        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            raise IssueFetchError(
                f"Jira API error: {status_code}",
                status_code=status_code,
                details=_error_details(e.response)
            ) from e
        except ValueError as e:
            raise IssueFetchError(f"Invalid JSON response from Jira: {e}") from e
        except requests.exceptions.RequestException as e:
            raise IssueFetchError(f"Failed to connect to Jira: {e}") from e

    def search_issues(self, jql: str, fields: list) -> list:
        """Run a JQL search, returning at most MAX_RESULTS issues."""
        data = self._request(
            "/rest/api/3/search/jql",
            {"jql": jql, "fields": fields, "maxResults": MAX_RESULTS}
        )
        if not isinstance(data, dict):
            raise IssueFetchError("Unexpected response from Jira", details=data)
        issues = data.get("issues") or []
        if not isinstance(issues, list):
            raise IssueFetchError("Unexpected response from Jira", details=data)
        return issues

    def open_issues_jql(self) -> str:
        return f"project = {self.project} AND statusCategory != Done ORDER BY updated DESC"

    def resolved_issues_jql(self) -> str:
        return f"project = {self.project} AND statusCategory = Done ORDER BY updated DESC"

    def get_open_issues(self) -> list:
        """Get issues not yet in the Done status category."""
        return self.search_issues(self.open_issues_jql(), OPEN_ISSUE_FIELDS)

    def get_resolved_issues(self) -> list:
        """Get issues in the Done status category."""
        return self.search_issues(self.resolved_issues_jql(), RESOLVED_ISSUE_FIELDS)

    def get_issue_sets(self) -> tuple:
        """Fetch open and resolved issues in parallel.

        Returns:
            Tuple of (open_issues, resolved_issues)

        Raises:
            IssueFetchError: If either search fails
        """
        with ThreadPoolExecutor(max_workers=2) as executor:
            open_future = executor.submit(self.get_open_issues)
            resolved_future = executor.submit(self.get_resolved_issues)
            open_issues = open_future.result()
            resolved_issues = resolved_future.result()

        logger.info(
            f"Fetched {len(open_issues)} open and {len(resolved_issues)} "
            f"resolved issues for project {self.project}"
        )
        return open_issues, resolved_issues


def _error_details(response):
    """Extract Jira's error body, falling back to raw text."""
    if response is None:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
