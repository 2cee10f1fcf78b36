"""
Employee Data Repository
Durable CRUD and filtered queries over the employees table.
"""
import logging
from typing import List, Optional, Sequence

from sqlalchemy import select, delete, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import DuplicateEmailError
from app.models.employee import Employee

logger = logging.getLogger("payroll.repository")


class EmployeeRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _commit(self, email: Optional[str] = None) -> None:
        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            logger.warning(f"Unique constraint violated on commit: {exc.orig}")
            raise DuplicateEmailError(email) from exc

    async def _all(self, query) -> List[Employee]:
        result = await self.db.execute(query.order_by(Employee.id))
        return list(result.scalars().all())

    async def save(self, employee: Employee) -> Employee:
        self.db.add(employee)
        await self._commit(employee.email)
        await self.db.refresh(employee)
        return employee

    async def save_all(self, employees: Sequence[Employee]) -> List[Employee]:
        """Persist a batch in one transaction; nothing is stored if any row fails."""
        self.db.add_all(employees)
        await self._commit()
        for employee in employees:
            await self.db.refresh(employee)
        return list(employees)

    async def get(self, employee_id: int) -> Optional[Employee]:
        return await self.db.get(Employee, employee_id)

    async def list_all(self) -> List[Employee]:
        return await self._all(select(Employee))

    async def find_by_department(self, department: str) -> List[Employee]:
        return await self._all(select(Employee).where(Employee.department == department))

    async def find_by_gender(self, gender: str) -> List[Employee]:
        return await self._all(select(Employee).where(Employee.gender == gender))

    async def find_by_email(self, email: str) -> Optional[Employee]:
        return await self.db.scalar(select(Employee).where(Employee.email == email))

    async def find_by_department_and_gender(self, department: str, gender: str) -> List[Employee]:
        return await self._all(
            select(Employee).where(
                Employee.department == department,
                Employee.gender == gender,
            )
        )

    async def find_by_salary_greater_than(self, min_salary: float) -> List[Employee]:
        return await self._all(select(Employee).where(Employee.salary > min_salary))

    async def find_by_salary_between(self, min_salary: float, max_salary: float) -> List[Employee]:
        return await self._all(
            select(Employee).where(Employee.salary.between(min_salary, max_salary))
        )

    async def count(self) -> int:
        return await self.db.scalar(select(func.count()).select_from(Employee))

    async def delete(self, employee: Employee) -> None:
        await self.db.delete(employee)
        await self.db.commit()

    async def delete_all(self) -> int:
        result = await self.db.execute(delete(Employee))
        await self.db.commit()
        return result.rowcount
