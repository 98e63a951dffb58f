"""Shared fixtures for Issue Response Metrics tests."""

import pytest
from datetime import datetime, timezone


@pytest.fixture
def mock_jira_credentials():
    """Mock Jira credentials for testing."""
    return {
        "server": "https://test.atlassian.net",
        "email": "test@example.com",
        "token": "test-token-123",
        "project": "HELP"
    }


@pytest.fixture
def now():
    """Fixed evaluation time for window calculations."""
    return datetime(2024, 3, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def sample_open_issue():
    """Open issue with two comments, answered one hour after creation."""
    return {
        "key": "HELP-101",
        "fields": {
            "summary": "VPN drops every few minutes",
            "status": {"name": "In Progress", "statusCategory": {"key": "indeterminate"}},
            "issuetype": {"name": "Support"},
            "priority": {"name": "High"},
            "created": "2024-01-01T00:00:00.000+0000",
            "updated": "2024-01-02T09:00:00.000+0000",
            "resolutiondate": None,
            "comment": {
                "comments": [
                    {"id": "1", "created": "2024-01-01T02:00:00.000+0000"},
                    {"id": "2", "created": "2024-01-01T01:00:00.000+0000"}
                ]
            }
        }
    }


@pytest.fixture
def sample_open_issue_no_comments():
    """Open issue nobody has responded to yet."""
    return {
        "key": "HELP-102",
        "fields": {
            "summary": "Request for new laptop",
            "status": {"name": "To Do", "statusCategory": {"key": "new"}},
            "created": "2024-03-14T08:00:00.000+0000",
            "resolutiondate": None,
            "comment": {"comments": []}
        }
    }


@pytest.fixture
def sample_resolved_issue():
    """Resolved issue with an explicit resolution date."""
    return {
        "key": "HELP-90",
        "fields": {
            "created": "2024-03-10T00:00:00.000+0000",
            "resolutiondate": "2024-03-12T00:00:00.000+0000",
            "statuscategorychangedate": "2024-03-13T00:00:00.000+0000",
            "comment": {"comments": [{"created": "2024-03-10T00:30:00.000+0000"}]}
        }
    }


@pytest.fixture
def sample_resolved_issue_no_resolution():
    """Issue moved to Done without a resolution being set."""
    return {
        "key": "HELP-91",
        "fields": {
            "created": "2024-03-11T00:00:00.000+0000",
            "resolutiondate": None,
            "statuscategorychangedate": "2024-03-11T06:00:00.000+0000",
            "comment": {"comments": []}
        }
    }


@pytest.fixture
def search_response():
    """Build a mock Jira search response body."""
    def _build(issues):
        return {"issues": issues, "isLast": True}
    return _build


@pytest.fixture
def app(mock_jira_credentials):
    """Create Flask test app."""
    import sys
    import os
    sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

    from app import create_app
    app = create_app({
        "TESTING": True,
        "JIRA_BASE_URL": mock_jira_credentials["server"] + "/",
        "JIRA_EMAIL": mock_jira_credentials["email"],
        "JIRA_API_TOKEN": mock_jira_credentials["token"],
        "JIRA_PROJECT": mock_jira_credentials["project"]
    })
    return app


@pytest.fixture
def client(app):
    """Create Flask test client."""
    return app.test_client()
