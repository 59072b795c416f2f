"""Unit tests for response envelope helpers and error schemas."""

import json
from datetime import UTC, datetime

import pytest

from golfdesk.api.responses import (
    api_response,
    error_response,
    method_not_allowed_response,
    not_found_response,
    unauthorized_response,
    validation_error_response,
)
from golfdesk.api.schemas.errors import MethodNotAllowedResponse, ValidationErrorResponse
from golfdesk.api.schemas.resources import StaffMemberOut


def _body(response) -> dict | list | None:
    return json.loads(response.body)


class TestApiResponse:
    def test_payload_is_not_wrapped(self):
        response = api_response([{"id": "1"}])

        assert response.status_code == 200
        assert _body(response) == [{"id": "1"}]

    def test_models_and_datetimes_are_encoded(self):
        staff = StaffMemberOut(id="s1", tenant_id="t1", name="Sato", is_active=True)
        response = api_response({"staff": staff, "at": datetime(2026, 1, 1, tzinfo=UTC)}, 201)

        assert response.status_code == 201
        assert _body(response) == {
            "staff": {"id": "s1", "tenant_id": "t1", "name": "Sato", "is_active": True},
            "at": "2026-01-01T00:00:00+00:00",
        }

    def test_none_payload(self):
        assert _body(api_response(None)) is None


class TestErrorResponses:
    def test_default_is_generic_500(self):
        response = error_response()

        assert response.status_code == 500
        assert _body(response) == {"error": "Internal server error"}

    def test_custom_message_and_status(self):
        response = error_response("Development only", 403)

        assert response.status_code == 403
        assert _body(response) == {"error": "Development only"}

    def test_validation_error_lists_every_field(self):
        response = validation_error_response(
            {"tenant_id": "Tenant ID is required", "name": "Name is required"}
        )

        assert response.status_code == 400
        assert _body(response) == {
            "error": "Validation failed",
            "details": {"tenant_id": "Tenant ID is required", "name": "Name is required"},
        }

    def test_validation_error_requires_a_field(self):
        with pytest.raises(ValueError):
            validation_error_response({})

    def test_not_found_names_resource(self):
        response = not_found_response("Reservation")

        assert response.status_code == 404
        assert _body(response) == {"error": "Reservation not found"}

    def test_not_found_default(self):
        assert _body(not_found_response()) == {"error": "Resource not found"}

    def test_unauthorized(self):
        response = unauthorized_response()

        assert response.status_code == 401
        assert _body(response) == {"error": "Unauthorized"}

    def test_method_not_allowed(self):
        response = method_not_allowed_response(["GET", "POST"])

        assert response.status_code == 405
        assert response.headers["allow"] == "GET, POST"
        assert _body(response) == {"error": "Method not allowed", "allowedMethods": ["GET", "POST"]}


class TestErrorSchemas:
    def test_validation_schema_default_error(self):
        body = ValidationErrorResponse(details={"tenant": "Invalid or inactive tenant"})
        assert body.error == "Validation failed"

    def test_method_not_allowed_accepts_field_name_or_alias(self):
        by_name = MethodNotAllowedResponse(allowed_methods=["GET"])
        by_alias = MethodNotAllowedResponse(allowedMethods=["GET"])

        assert by_name == by_alias
        assert by_name.model_dump(by_alias=True)["allowedMethods"] == ["GET"]
