"""
Explicit field validation for employee payloads.

Each check returns an ordered ``{field: message}`` map instead of raising on
the first problem, so callers can report every failure at once.
"""

import math
from numbers import Real
from typing import Any, Dict, Mapping

from email_validator import EmailNotValidError, validate_email

from app.core.exceptions import EmployeeValidationError, FieldNotUpdatableError

UPDATABLE_FIELDS = ("name", "salary", "department", "gender")

_MANDATORY_MESSAGES = {
    "name": "Name is mandatory",
    "email": "Email is mandatory",
    "department": "Department is mandatory",
    "gender": "Gender is mandatory",
}


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def is_valid_email(email: str) -> bool:
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def _salary_error(salary: Any) -> str | None:
    if salary is None:
        return "Salary must not be null"
    if isinstance(salary, bool) or not isinstance(salary, Real):
        return "Salary must be a number"
    try:
        if not math.isfinite(salary):
            return "Salary must be a number"
    except OverflowError:
        # ints beyond float range
        return "Salary must be a number"
    if salary < 0:
        return "Salary must be positive"
    return None


def validate_employee(payload: Mapping[str, Any]) -> Dict[str, str]:
    """Check a full employee payload; an empty result means it is valid."""
    errors: Dict[str, str] = {}

    if _is_blank(payload.get("name")):
        errors["name"] = _MANDATORY_MESSAGES["name"]

    email = payload.get("email")
    if _is_blank(email):
        errors["email"] = _MANDATORY_MESSAGES["email"]
    elif not is_valid_email(email):
        errors["email"] = "Email should be valid"

    salary_error = _salary_error(payload.get("salary"))
    if salary_error:
        errors["salary"] = salary_error

    for field in ("department", "gender"):
        if _is_blank(payload.get(field)):
            errors[field] = _MANDATORY_MESSAGES[field]

    return errors


def _coerce_salary(value: Any) -> Any:
    # Numeric strings are accepted the same way a JSON number would be
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return value
    return value


def validate_partial_update(updates: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Check a partial update before anything is applied.

    Raises FieldNotUpdatableError for the first key outside UPDATABLE_FIELDS,
    then EmployeeValidationError if any supplied value breaks its constraint.
    Returns the updates with salary coerced to a float.
    """
    for key in updates:
        if key not in UPDATABLE_FIELDS:
            raise FieldNotUpdatableError(key)

    cleaned = dict(updates)
    errors: Dict[str, str] = {}
    for key, value in updates.items():
        if key == "salary":
            value = _coerce_salary(value)
            salary_error = _salary_error(value)
            if salary_error:
                errors[key] = salary_error
            else:
                cleaned[key] = float(value)
        elif _is_blank(value):
            errors[key] = _MANDATORY_MESSAGES[key]

    if errors:
        raise EmployeeValidationError(errors)
    return cleaned
