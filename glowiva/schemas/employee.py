from decimal import Decimal
from pydantic import BaseModel, EmailStr, Field
from datetime import date, datetime
from typing import Literal

from glowiva.models.employees import DEPARTMENTS, POSITIONS
from glowiva.schemas.order import Address

Position = Literal[POSITIONS]
Department = Literal[DEPARTMENTS]


class EmergencyContact(BaseModel):
    name: str | None = None
    phone: str | None = None
    relationship: str | None = None

    class Config:
        extra = "forbid"


class EmployeeCreate(BaseModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: EmailStr
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=6, max_length=72)
    phone: str = Field(..., min_length=1)
    position: Position
    department: Department
    hire_date: date
    base_salary: Decimal = Field(Decimal("0"), ge=0)
    commission_per_order: Decimal = Field(Decimal("0"), ge=0)
    salary_toggle: bool = True
    address: Address | None = None
    emergency_contact: EmergencyContact | None = None

    class Config:
        extra = "forbid"


class EmployeeUpdate(BaseModel):
    first_name: str | None = Field(None, min_length=1)
    last_name: str | None = Field(None, min_length=1)
    email: EmailStr | None = None
    username: str | None = Field(None, min_length=1)
    password: str | None = Field(None, min_length=6, max_length=72)
    phone: str | None = None
    position: Position | None = None
    department: Department | None = None
    hire_date: date | None = None
    base_salary: Decimal | None = Field(None, ge=0)
    commission_per_order: Decimal | None = Field(None, ge=0)
    salary_toggle: bool | None = None
    is_active: bool | None = None
    address: Address | None = None
    emergency_contact: EmergencyContact | None = None

    class Config:
        extra = "forbid"


class EmployeeTerminate(BaseModel):
    termination_date: datetime | None = None

    class Config:
        extra = "forbid"


class EmployeeResponse(BaseModel):
    id: int
    first_name: str
    last_name: str
    full_name: str
    email: str
    username: str
    phone: str
    position: str
    department: str
    base_salary: float
    commission_per_order: float
    salary_toggle: bool
    hire_date: date
    address: dict | None
    emergency_contact: dict | None
    is_active: bool
    termination_date: datetime | None
    commission_paid_date: datetime | None
    last_login: datetime | None
    created_at: datetime

    class Config:
        from_attributes = True
