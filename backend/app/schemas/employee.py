from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class EmployeeIn(BaseModel):
    """
    Employee payload for create, bulk create and full update.

    Fields are optional at the schema level so that missing or null values
    reach validate_employee and are reported with their field messages.
    Unknown keys (including id and the derived fields) are ignored.
    """
    name: Optional[str] = None
    email: Optional[str] = None
    salary: Optional[float] = None
    department: Optional[str] = None
    gender: Optional[str] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Asha Verma",
                "email": "asha.verma@example.com",
                "salary": 600000,
                "department": "IT",
                "gender": "Female",
            }
        }
    )


class EmployeeResponse(BaseModel):
    """Employee as returned to callers; bonus, provident fund and tax are never exposed."""
    id: int
    name: str
    email: str
    salary: float
    department: str
    gender: str

    model_config = ConfigDict(from_attributes=True)


class APIErrorResponse(BaseModel):
    """Error body shared by every mapped client error."""
    status_code: int = Field(..., serialization_alias="statusCode")
    message: str
    date_time: datetime = Field(default_factory=datetime.now, serialization_alias="dateTime")
    errors: Optional[Dict[str, str]] = None

    def to_content(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
