from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from ehub.errors import AssignmentClosedError
from ehub.schemas.api import ApiResponse
from ehub.schemas.users import User
from ehub.schemas.projects import (
    LIFECYCLE_STATUSES,
    PROJECT_STATUSES,
    WORKFLOW_STATUSES,
    ProjectAssignment,
)


def _pending():
    return ProjectAssignment(
        id="as-1",
        project_id="p-1",
        fabricator_id="fab-1",
        assigned_by="sup-1",
        assigned_at="2026-03-14T09:00:00Z",
    )


def test_assignment_starts_pending():
    assignment = _pending()
    assert assignment.status == "pending"
    assert not assignment.is_terminal


def test_assignment_accept_is_terminal():
    at = datetime(2026, 3, 15, 8, 30, tzinfo=timezone.utc)
    accepted = _pending().respond("accepted", response="On it", at=at)
    assert accepted.status == "accepted"
    assert accepted.response == "On it"
    assert accepted.responded_at == "2026-03-15T08:30:00+00:00"
    assert accepted.is_terminal


def test_terminal_assignment_is_immutable():
    declined = _pending().respond("declined")
    with pytest.raises(AssignmentClosedError):
        declined.respond("accepted")


def test_assignment_rejects_unknown_response():
    with pytest.raises(ValueError):
        _pending().respond("maybe")


def test_status_vocabularies_stay_separate():
    assert "0_Created" in WORKFLOW_STATUSES
    assert "planning" in LIFECYCLE_STATUSES
    assert not set(WORKFLOW_STATUSES) & set(LIFECYCLE_STATUSES)
    assert len(PROJECT_STATUSES) == 11


def test_api_response_is_data_or_error():
    assert ApiResponse(data=[1]).ok
    assert not ApiResponse(error="boom").ok
    with pytest.raises(ValidationError):
        ApiResponse(data=[1], error="boom")


def test_assignment_cannot_be_edited_in_place():
    declined = _pending().respond("declined")
    with pytest.raises(ValidationError):
        declined.status = "pending"
    assert declined.status == "declined"


def test_user_secure_id_cannot_be_reassigned():
    user = User(id="u-1", name="Ana", email="ana@ehub.test", role="fabricator", secure_id="FABID-AB12CD34")
    user.phone = "0917"
    with pytest.raises(ValidationError):
        user.secure_id = "FABID-ZZZZZZZZ"
    assert user.secure_id == "FABID-AB12CD34"
    assert user.model_dump(by_alias=True)["secureId"] == "FABID-AB12CD34"
