"""Test error handling functionality.

Verifies that custom exceptions carry the right status codes and that the
registered handlers turn them into the standard error body.
"""
import json

import pytest

from core.error_handlers import create_error_response
from core.exceptions import (
    AuthorizationError,
    ConflictError,
    DatabaseError,
    InvalidCredentialsError,
    InvalidTransitionError,
    NotFoundError,
    SubscriptionLimitError,
    ValidationError,
)
from services import catalog_service


def test_exception_classes_have_proper_attributes():
    exc = NotFoundError("Subscription", 123)
    assert exc.status_code == 404
    assert "Subscription" in exc.message
    assert "123" in exc.message

    exc = ValidationError("Invalid input", field="phoneNumber")
    assert exc.status_code == 400
    assert exc.errors == [{"field": "phoneNumber", "message": "Invalid input"}]
    assert exc.details == {"errors": exc.errors}

    exc = DatabaseError("Lost connection", operation="health_check")
    assert exc.status_code == 500
    assert exc.details == {"operation": "health_check"}


@pytest.mark.parametrize("exc, status_code, error", [
    (InvalidCredentialsError(), 400, "invalid_credentials"),
    (AuthorizationError(), 403, "authorization_error"),
    (ConflictError("Email already registered"), 409, "conflict"),
    (SubscriptionLimitError(3), 409, "subscription_limit_reached"),
    (InvalidTransitionError("cancelled", "active"), 409, "invalid_transition"),
])
def test_status_codes(exc, status_code, error):
    assert exc.status_code == status_code
    assert exc.error == error


def test_conflict_subclasses_share_base():
    assert isinstance(SubscriptionLimitError(3), ConflictError)
    assert isinstance(InvalidTransitionError("cancelled", "paused"), ConflictError)


def test_create_error_response_omits_empty_parts():
    body = json.loads(create_error_response("Boom", status_code=418).body)
    assert body == {"message": "Boom"}

    res = create_error_response("Bad", 400, error="validation_error", details={"errors": []})
    assert res.status_code == 400
    assert json.loads(res.body) == {"message": "Bad", "error": "validation_error", "details": {"errors": []}}


def test_service_not_found_raises_404(db):
    with pytest.raises(NotFoundError) as exc_info:
        catalog_service.get_plan(db, 99999)
    assert "MealPlan" in exc_info.value.message
    assert exc_info.value.status_code == 404


def test_handler_renders_not_found(client):
    res = client.get("/meal-plans/99999")
    assert res.status_code == 404
    body = res.json()
    assert body["error"] == "not_found"
    assert body["details"] == {"resource": "MealPlan", "id": 99999}


def test_request_validation_uses_payload_field_names(client):
    res = client.post("/auth/login", json={"email": "nobody@example.com"})
    assert res.status_code == 400
    body = res.json()
    assert body["message"] == "Validation failed"
    assert [e["field"] for e in body["details"]["errors"]] == ["password"]


def test_invalid_path_parameter_is_400(client):
    res = client.get("/meal-plans/not-a-number")
    assert res.status_code == 400
    assert res.json()["details"]["errors"][0]["field"] == "plan_id"
