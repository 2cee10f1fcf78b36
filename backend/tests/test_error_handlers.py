"""
Tests for app/core/error_handlers.py - error body and Error-Info header mapping.
"""
import json

import pytest
from fastapi.exceptions import RequestValidationError

from app.core.error_handlers import (
    duplicate_email_handler,
    employee_not_found_handler,
    error_response,
    request_validation_handler,
)
from app.core.exceptions import DuplicateEmailError, EmployeeNotFoundError


class TestErrorResponse:
    def test_body_uses_camel_case_keys(self):
        response = error_response(400, "Bad things", "validation failed", errors={"name": "Name is mandatory"})

        body = json.loads(response.body)
        assert set(body) == {"statusCode", "message", "dateTime", "errors"}
        assert response.headers["error-info"] == "validation failed"

    def test_errors_and_header_are_optional(self):
        response = error_response(500, "Boom")

        body = json.loads(response.body)
        assert "errors" not in body
        assert "error-info" not in response.headers


class TestHandlers:
    @pytest.mark.asyncio
    async def test_not_found(self, mock_request):
        response = await employee_not_found_handler(mock_request, EmployeeNotFoundError(3))

        assert response.status_code == 404
        assert json.loads(response.body)["message"] == "Employee not found with id: 3"

    @pytest.mark.asyncio
    async def test_duplicate_email(self, mock_request):
        response = await duplicate_email_handler(mock_request, DuplicateEmailError("a@example.com"))

        assert response.status_code == 409
        assert response.headers["error-info"] == "duplicate email"

    @pytest.mark.asyncio
    async def test_request_validation_field_names(self, mock_request):
        exc = RequestValidationError([
            {"loc": ("body", 2, "salary"), "msg": "Input should be a valid number", "type": "float_parsing"},
            {"loc": ("query", "minSalary"), "msg": "Field required", "type": "missing"},
            {"loc": ("body",), "msg": "Field required", "type": "missing"},
        ])

        response = await request_validation_handler(mock_request, exc)

        assert response.status_code == 400
        assert json.loads(response.body)["errors"] == {
            "[2].salary": "Input should be a valid number",
            "minSalary": "Field required",
            "request": "Field required",
        }
