"""
Employee service exceptions.

Raised by the service and repository layers and translated into HTTP
responses by app.core.error_handlers.
"""

from typing import Dict, Optional


class EmployeeServiceError(Exception):
    """Base exception for all employee service errors"""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class EmployeeNotFoundError(EmployeeServiceError):
    """Raised when no employee exists for the requested id"""

    def __init__(self, employee_id: int):
        self.employee_id = employee_id
        super().__init__(f"Employee not found with id: {employee_id}")


class EmployeeValidationError(EmployeeServiceError):
    """Raised when a payload violates one or more field constraints"""

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        rendered = ", ".join(f"{field}: {message}" for field, message in self.errors.items())
        super().__init__(f"Validation failed: {rendered}")


class InvalidDepartmentError(EmployeeServiceError):
    """Raised when a department filter is outside the allowed set"""

    def __init__(self, department: str):
        self.department = department
        super().__init__(f"Department {department} is not allowed.")


class FieldNotUpdatableError(EmployeeServiceError):
    """Raised when a partial update names a field that cannot be changed"""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Field '{field}' is not updatable.")


class DuplicateEmailError(EmployeeServiceError):
    """Raised when the store rejects a row because its email is already taken"""

    def __init__(self, email: Optional[str] = None):
        self.email = email
        if email:
            message = f"Employee with email {email} already exists."
        else:
            message = "One or more employees share an email that already exists."
        super().__init__(message)
