"""
Translation of employee service errors into HTTP responses.

Every mapped client error shares the APIErrorResponse body and carries a
short category in the Error-Info header.
"""

import logging
from typing import Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.exceptions import (
    DuplicateEmailError,
    EmployeeNotFoundError,
    EmployeeValidationError,
    InvalidDepartmentError,
)
from app.schemas.employee import APIErrorResponse

logger = logging.getLogger("payroll.errors")

ERROR_INFO_HEADER = "Error-Info"


def error_response(
    status_code: int,
    message: str,
    error_info: Optional[str] = None,
    errors: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    headers = {ERROR_INFO_HEADER: error_info} if error_info else None
    body = APIErrorResponse(status_code=status_code, message=message, errors=errors)
    return JSONResponse(status_code=status_code, content=body.to_content(), headers=headers)


def _request_context(request: Request) -> str:
    return f"{request.method} {request.url.path}"


async def employee_not_found_handler(request: Request, exc: EmployeeNotFoundError) -> JSONResponse:
    logger.warning(f"{_request_context(request)}: {exc.message}")
    return error_response(status.HTTP_404_NOT_FOUND, exc.message, "employee not found")


async def invalid_department_handler(request: Request, exc: InvalidDepartmentError) -> JSONResponse:
    logger.warning(f"{_request_context(request)}: {exc.message}")
    return error_response(status.HTTP_400_BAD_REQUEST, exc.message, "invalid department")


async def employee_validation_handler(request: Request, exc: EmployeeValidationError) -> JSONResponse:
    logger.warning(f"{_request_context(request)}: {exc.message}")
    return error_response(
        status.HTTP_400_BAD_REQUEST, exc.message, "validation failed", errors=exc.errors
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies, wrong types and missing parameters share the validation mapping."""
    errors: Dict[str, str] = {}
    for error in exc.errors():
        field = ""
        for part in error.get("loc", ()):
            if part in ("body", "query", "path"):
                continue
            if isinstance(part, int):
                field += f"[{part}]"
            else:
                field += f".{part}" if field else str(part)
        errors.setdefault(field or "request", error.get("msg", "Invalid value"))

    validation_error = EmployeeValidationError(errors)
    logger.warning(f"{_request_context(request)}: {validation_error.message}")
    return error_response(
        status.HTTP_400_BAD_REQUEST, validation_error.message, "validation failed", errors=errors
    )


async def duplicate_email_handler(request: Request, exc: DuplicateEmailError) -> JSONResponse:
    logger.warning(f"{_request_context(request)}: {exc.message}")
    return error_response(status.HTTP_409_CONFLICT, exc.message, "duplicate email")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(EmployeeNotFoundError, employee_not_found_handler)
    app.add_exception_handler(InvalidDepartmentError, invalid_department_handler)
    app.add_exception_handler(EmployeeValidationError, employee_validation_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(DuplicateEmailError, duplicate_email_handler)
