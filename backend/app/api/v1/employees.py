import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response, status
from fastapi.responses import PlainTextResponse

from app.api.deps import get_employee_service
from app.core.config import settings
from app.core.exceptions import FieldNotUpdatableError, InvalidDepartmentError
from app.schemas.employee import EmployeeIn, EmployeeResponse
from app.services.employee_service import EmployeeService

logger = logging.getLogger("payroll.api")

router = APIRouter()

# Departments accepted as a list filter. Create/update accept any department.
FILTER_DEPARTMENTS = ("IT", "HR", "Finance")


def _location(employee_id: int) -> str:
    return f"{settings.API_PREFIX}/employees/{employee_id}"


@router.post("", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
async def create_employee(
    employee_in: EmployeeIn,
    response: Response,
    service: EmployeeService = Depends(get_employee_service),
) -> Any:
    """
    Create an employee. The Location header points at the new resource.
    """
    employee = await service.create_employee(employee_in.model_dump())
    response.headers["Location"] = _location(employee.id)
    return employee


@router.get("", response_model=List[EmployeeResponse])
async def read_employees(
    service: EmployeeService = Depends(get_employee_service),
) -> Any:
    """
    Retrieve all employees.
    """
    return await service.list_employees()


# Static paths are registered ahead of /{employee_id} so they are not shadowed.

@router.post("/bulk", response_model=List[EmployeeResponse])
async def bulk_create_employees(
    employees_in: List[EmployeeIn],
    service: EmployeeService = Depends(get_employee_service),
) -> Any:
    """
    Create a batch of employees in one transaction.
    """
    return await service.bulk_create([e.model_dump() for e in employees_in])


@router.get("/count", response_model=int)
async def count_employees(
    service: EmployeeService = Depends(get_employee_service),
) -> Any:
    return await service.count_employees()


@router.delete("/all", status_code=status.HTTP_204_NO_CONTENT)
async def delete_all_employees(
    service: EmployeeService = Depends(get_employee_service),
) -> Response:
    await service.delete_all_employees()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/search", response_model=EmployeeResponse)
async def search_employee_by_email(
    email: str = Query(...),
    service: EmployeeService = Depends(get_employee_service),
) -> Any:
    """
    Look up a single employee by email; 404 with an empty body when absent.
    """
    employee = await service.find_by_email(email)
    if employee is None:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return employee


@router.get("/department-gender", response_model=List[EmployeeResponse])
async def read_employees_by_department_and_gender(
    department: str = Query(...),
    gender: str = Query(...),
    service: EmployeeService = Depends(get_employee_service),
) -> Any:
    return await service.list_by_department_and_gender(department, gender)


@router.get("/salary-greater-than", response_model=List[EmployeeResponse])
async def read_employees_by_salary_greater_than(
    min_salary: float = Query(..., alias="minSalary"),
    service: EmployeeService = Depends(get_employee_service),
) -> Any:
    return await service.list_by_salary_greater_than(min_salary)


@router.get("/salary-between", response_model=List[EmployeeResponse])
async def read_employees_by_salary_between(
    min_salary: float = Query(..., alias="minSalary"),
    max_salary: float = Query(..., alias="maxSalary"),
    service: EmployeeService = Depends(get_employee_service),
) -> Any:
    """
    Employees whose salary lies in [minSalary, maxSalary], bounds included.
    """
    return await service.list_by_salary_between(min_salary, max_salary)


@router.get("/department/{department}", response_model=List[EmployeeResponse])
async def read_employees_by_department(
    department: str,
    service: EmployeeService = Depends(get_employee_service),
) -> Any:
    """
    Employees of one department. Only IT, HR and Finance may be used as a filter.
    """
    if department not in FILTER_DEPARTMENTS:
        raise InvalidDepartmentError(department)
    return await service.list_by_department(department)


@router.get("/gender/{gender}", response_model=List[EmployeeResponse])
async def read_employees_by_gender(
    gender: str,
    service: EmployeeService = Depends(get_employee_service),
) -> Any:
    return await service.list_by_gender(gender)


@router.get("/{employee_id}", response_model=EmployeeResponse)
async def read_employee(
    employee_id: int,
    service: EmployeeService = Depends(get_employee_service),
) -> Any:
    """
    Get employee by ID.
    """
    return await service.get_employee(employee_id)


@router.put("/{employee_id}", response_model=EmployeeResponse)
async def update_employee(
    employee_id: int,
    employee_in: EmployeeIn,
    service: EmployeeService = Depends(get_employee_service),
) -> Any:
    """
    Replace name, salary, department and gender. The email is never changed.
    """
    return await service.update_employee(employee_id, employee_in.model_dump())


@router.patch("/{employee_id}", response_model=EmployeeResponse)
async def partial_update_employee(
    employee_id: int,
    updates: Dict[str, Any] = Body(...),
    service: EmployeeService = Depends(get_employee_service),
) -> Any:
    """
    Change only the supplied fields (name, salary, department, gender).
    """
    try:
        return await service.partial_update_employee(employee_id, updates)
    except FieldNotUpdatableError as exc:
        logger.warning(f"Rejected partial update of employee {employee_id}: {exc.message}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message)


@router.delete("/{employee_id}", response_class=PlainTextResponse)
async def delete_employee(
    employee_id: int,
    service: EmployeeService = Depends(get_employee_service),
) -> Any:
    await service.delete_employee(employee_id)
    return f"Employee with id {employee_id} deleted successfully"
