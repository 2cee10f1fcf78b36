"""
Employee business operations.

Validates payloads, keeps the derived pay fields in step with salary and
delegates storage to EmployeeRepository. Every record handed back to a
caller has had its deductions recomputed from its current salary.
"""

import logging
from typing import Any, Iterable, List, Mapping, Optional

from app.core.exceptions import EmployeeNotFoundError, EmployeeValidationError
from app.models.employee import Employee
from app.repositories.employee_repository import EmployeeRepository
from app.services.deductions import apply_deductions
from app.services.employee_validation import validate_employee, validate_partial_update

logger = logging.getLogger("payroll.service")

EMPLOYEE_FIELDS = ("name", "email", "salary", "department", "gender")


def _with_deductions(employees: Iterable[Employee]) -> List[Employee]:
    employees = list(employees)
    for employee in employees:
        apply_deductions(employee)
    return employees


def _build_employee(payload: Mapping[str, Any]) -> Employee:
    employee = Employee(**{field: payload[field] for field in EMPLOYEE_FIELDS})
    employee.salary = float(employee.salary)
    deductions = apply_deductions(employee)
    logger.debug(
        f"Deductions for {employee.name}: bonus={deductions.bonus:.2f} "
        f"pf={deductions.provident_fund:.2f} tax={deductions.tax:.2f} net={deductions.net_pay:.2f}"
    )
    return employee


class EmployeeService:
    def __init__(self, repository: EmployeeRepository):
        self.repository = repository

    async def _get_or_raise(self, employee_id: int) -> Employee:
        employee = await self.repository.get(employee_id)
        if employee is None:
            logger.warning(f"Employee {employee_id} not found")
            raise EmployeeNotFoundError(employee_id)
        return employee

    async def create_employee(self, payload: Mapping[str, Any]) -> Employee:
        errors = validate_employee(payload)
        if errors:
            raise EmployeeValidationError(errors)

        employee = await self.repository.save(_build_employee(payload))
        logger.info(
            f"Created employee {employee.id} ({employee.department}, salary={employee.salary:.2f}, "
            f"tax={employee.tax:.2f})"
        )
        return employee

    async def bulk_create(self, payloads: List[Mapping[str, Any]]) -> List[Employee]:
        """Create every employee or none of them."""
        errors = {}
        for index, payload in enumerate(payloads):
            for field, message in validate_employee(payload).items():
                errors[f"employees[{index}].{field}"] = message
        if errors:
            raise EmployeeValidationError(errors)

        employees = await self.repository.save_all([_build_employee(p) for p in payloads])
        logger.info(f"Bulk created {len(employees)} employees")
        return employees

    async def get_employee(self, employee_id: int) -> Employee:
        employee = await self._get_or_raise(employee_id)
        deductions = apply_deductions(employee)
        logger.debug(f"Fetched employee {employee_id}: net pay {deductions.net_pay:.2f}")
        return employee

    async def list_employees(self) -> List[Employee]:
        return _with_deductions(await self.repository.list_all())

    async def list_by_department(self, department: str) -> List[Employee]:
        return _with_deductions(await self.repository.find_by_department(department))

    async def list_by_gender(self, gender: str) -> List[Employee]:
        return _with_deductions(await self.repository.find_by_gender(gender))

    async def find_by_email(self, email: str) -> Optional[Employee]:
        employee = await self.repository.find_by_email(email)
        if employee is not None:
            apply_deductions(employee)
        return employee

    async def list_by_department_and_gender(self, department: str, gender: str) -> List[Employee]:
        return _with_deductions(
            await self.repository.find_by_department_and_gender(department, gender)
        )

    async def list_by_salary_greater_than(self, min_salary: float) -> List[Employee]:
        return _with_deductions(await self.repository.find_by_salary_greater_than(min_salary))

    async def list_by_salary_between(self, min_salary: float, max_salary: float) -> List[Employee]:
        return _with_deductions(
            await self.repository.find_by_salary_between(min_salary, max_salary)
        )

    async def update_employee(self, employee_id: int, payload: Mapping[str, Any]) -> Employee:
        """Replace name, salary, department and gender; id and email are kept."""
        errors = validate_employee(payload)
        if errors:
            raise EmployeeValidationError(errors)

        employee = await self._get_or_raise(employee_id)
        logger.debug(
            f"Updating employee {employee_id}: salary {employee.salary:.2f} -> {float(payload['salary']):.2f}"
        )
        employee.name = payload["name"]
        employee.salary = float(payload["salary"])
        employee.department = payload["department"]
        employee.gender = payload["gender"]
        apply_deductions(employee)

        employee = await self.repository.save(employee)
        logger.info(f"Updated employee {employee.id}")
        return employee

    async def partial_update_employee(self, employee_id: int, updates: Mapping[str, Any]) -> Employee:
        """Change only the named fields; deductions follow when salary is among them."""
        employee = await self._get_or_raise(employee_id)
        changes = validate_partial_update(updates)

        for field, value in changes.items():
            setattr(employee, field, value)
        if "salary" in changes:
            apply_deductions(employee)

        employee = await self.repository.save(employee)
        logger.info(f"Partially updated employee {employee.id}: {sorted(changes)}")
        return employee

    async def count_employees(self) -> int:
        return await self.repository.count()

    async def delete_employee(self, employee_id: int) -> None:
        employee = await self._get_or_raise(employee_id)
        await self.repository.delete(employee)
        logger.info(f"Deleted employee {employee_id} ({employee.department})")

    async def delete_all_employees(self) -> int:
        deleted = await self.repository.delete_all()
        logger.info(f"Deleted all employees ({deleted} rows)")
        return deleted
