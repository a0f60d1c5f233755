from pydantic import BaseModel, EmailStr, Field
from typing import Literal

from glowiva.schemas.employee import Department, Position


class UserLogin(BaseModel):
    email: EmailStr
    password: str

    class Config:
        extra = "forbid"


class EmployeeLogin(BaseModel):
    # Username or email
    username: str
    password: str

    class Config:
        extra = "forbid"


class EmployeeSignup(BaseModel):
    email: EmailStr = Field(..., description="Employee's email address")
    password: str = Field(..., min_length=6, max_length=72, description="Plain password (will be hashed). Minimum 6 characters.")
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    phone: str = ""
    position: Position = "sales_associate"
    department: Department = "sales"

    class Config:
        extra = "forbid"


class AdminSignup(BaseModel):
    username: str = Field(..., min_length=3)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    role: Literal["admin", "super_admin"] = "admin"

    class Config:
        extra = "forbid"


class ProfileUpdate(BaseModel):
    first_name: str | None = Field(None, min_length=1)
    last_name: str | None = Field(None, min_length=1)
    phone: str | None = None
    salary_toggle: bool | None = None

    class Config:
        extra = "forbid"


class UserSummary(BaseModel):
    id: int
    username: str
    email: str
    first_name: str
    last_name: str
    role: str
    position: str | None = None
    department: str | None = None


class TokenResponse(BaseModel):
    message: str
    access_token: str
    token_type: str = "bearer"
    user: UserSummary
