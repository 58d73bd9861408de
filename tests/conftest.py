"""Shared test fixtures."""

from datetime import datetime, timezone

import pytest

from glp.models import UpdatedIssueState, UpdateIssueRequest


@pytest.fixture
def bare_request() -> UpdateIssueRequest:
    return UpdateIssueRequest("group/app", 7)


@pytest.fixture
def full_request() -> UpdateIssueRequest:
    return UpdateIssueRequest(
        "group/app",
        42,
        title="Fix null check in auth middleware",
        description="The middleware throws when session is None.",
        confidential=True,
        assignees=[1, 2, 3],
        milestone_id=5,
        labels=["bug", "urgent"],
        state=UpdatedIssueState.CLOSE,
        updated_at=datetime(2016, 3, 11, 3, 45, 40, tzinfo=timezone.utc),
        due_date="2016-03-11",
    )
