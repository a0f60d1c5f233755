import logging
import time

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from glowiva.database import get_db, utc_now
from glowiva.models.admins import Admin
from glowiva.models.employees import Employee
from glowiva.schemas.user import (
    AdminSignup,
    EmployeeLogin,
    EmployeeSignup,
    ProfileUpdate,
    TokenResponse,
    UserLogin,
    UserSummary,
)
from glowiva.core.auth import (
    EMPLOYEE_ROLE,
    Principal,
    get_current_user,
    get_employee_user,
    get_optional_user,
)
from glowiva.core.config import Settings, get_settings
from glowiva.core.errors import AuthenticationError, AuthorizationError, ValidationError
from glowiva.core.hashing import hash_password, verify_password
from glowiva.core.jwt import create_access_token
from glowiva.core.rate_limiter import limiter

logger = logging.getLogger("glowiva")

router = APIRouter(prefix="/auth", tags=["Authentication"])

SIGNUP_BASE_SALARY = 25000
SIGNUP_COMMISSION_PER_ORDER = 50


def _summary(user: Admin | Employee, role: str) -> UserSummary:
    return UserSummary(
        id=user.id,
        username=user.username,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        role=role,
        position=getattr(user, "position", None),
        department=getattr(user, "department", None),
    )


def _token_response(message: str, user: Admin | Employee, role: str, settings: Settings) -> TokenResponse:
    token = create_access_token(
        data={"sub": str(user.id), "role": role},
        settings=settings,
    )
    return TokenResponse(
        message=message,
        access_token=token,
        user=_summary(user, role),
    )


def _check_employee_can_login(employee: Employee, password: str) -> None:
    if not verify_password(password, employee.password_hash):
        raise AuthenticationError("Invalid credentials")
    if not employee.is_active:
        raise AuthenticationError("Account is deactivated")


# ---------------- LOGIN ----------------
@router.post("/login", response_model=TokenResponse)
@limiter.limit("5/minute")
def login(
    request: Request,
    credentials: UserLogin,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    email = credentials.email.lower()

    # Admins first, then employees
    admin = db.query(Admin).filter(func.lower(Admin.email) == email).first()
    if admin and verify_password(credentials.password, admin.password_hash):
        admin.last_login = utc_now()
        db.commit()
        logger.info(f"Admin login: {admin.username}")
        return _token_response("Login successful", admin, admin.role, settings)

    employee = db.query(Employee).filter(func.lower(Employee.email) == email).first()
    if not employee:
        raise AuthenticationError("Invalid credentials")

    _check_employee_can_login(employee, credentials.password)

    employee.last_login = utc_now()
    db.commit()
    logger.info(f"Employee login: {employee.username}")
    return _token_response("Login successful", employee, EMPLOYEE_ROLE, settings)


@router.post("/employee/login", response_model=TokenResponse)
@limiter.limit("5/minute")
def employee_login(
    request: Request,
    credentials: EmployeeLogin,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    identifier = credentials.username.strip()

    employee = (
        db.query(Employee)
        .filter(
            or_(
                Employee.username == identifier,
                func.lower(Employee.email) == identifier.lower(),
            )
        )
        .first()
    )
    if not employee:
        raise AuthenticationError("Invalid credentials")

    _check_employee_can_login(employee, credentials.password)

    employee.last_login = utc_now()
    db.commit()
    logger.info(f"Employee login: {employee.username}")
    return _token_response("Login successful", employee, EMPLOYEE_ROLE, settings)


# ---------------- SIGNUP ----------------
@router.post("/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("3/minute")
def signup(
    request: Request,
    user_data: EmployeeSignup,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    email = user_data.email.lower()

    if db.query(Employee).filter(func.lower(Employee.email) == email).first():
        raise ValidationError("Employee with this email already exists")

    local_part = email.split("@")[0]

    employee = Employee(
        first_name=user_data.first_name,
        last_name=user_data.last_name,
        email=email,
        username=f"{local_part}_{int(time.time() * 1000)}",
        password_hash=hash_password(user_data.password),
        phone=user_data.phone,
        position=user_data.position,
        department=user_data.department,
        base_salary=SIGNUP_BASE_SALARY,
        commission_per_order=SIGNUP_COMMISSION_PER_ORDER,
        salary_toggle=True,
        hire_date=utc_now().date(),
        is_active=True,
    )

    try:
        db.add(employee)
        db.commit()
        db.refresh(employee)
    except SQLAlchemyError:
        db.rollback()
        raise HTTPException(status_code=500, detail="Unable to create account")

    logger.info(f"Employee signed up: {employee.username}")
    return _token_response("Account created successfully", employee, EMPLOYEE_ROLE, settings)


@router.post("/admin/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def admin_signup(
    admin_data: AdminSignup,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    current_user: Principal | None = Depends(get_optional_user),
):
    has_admins = db.query(Admin.id).first() is not None

    if has_admins:
        if current_user is None:
            raise AuthenticationError("No token provided, authorization denied")
        if current_user.role != "super_admin":
            raise AuthorizationError("Super admin access required")
        role = admin_data.role
    else:
        # The first account bootstraps the system
        role = "super_admin"

    email = admin_data.email.lower()
    duplicate = (
        db.query(Admin)
        .filter(or_(func.lower(Admin.email) == email, Admin.username == admin_data.username))
        .first()
    )
    if duplicate:
        raise ValidationError("Admin with this email or username already exists")

    admin = Admin(
        username=admin_data.username,
        email=email,
        password_hash=hash_password(admin_data.password),
        first_name=admin_data.first_name,
        last_name=admin_data.last_name,
        role=role,
    )

    try:
        db.add(admin)
        db.commit()
        db.refresh(admin)
    except SQLAlchemyError:
        db.rollback()
        raise HTTPException(status_code=500, detail="Unable to create account")

    logger.info(f"Admin account created: {admin.username} ({role})")
    return _token_response("Admin account created successfully", admin, role, settings)


# ---------------- PROFILE ----------------
@router.get("/profile")
def get_profile(current_user: Principal = Depends(get_current_user)):
    user = current_user.user
    profile = _summary(user, current_user.role).model_dump()

    if current_user.is_employee:
        profile.update({
            "phone": user.phone,
            "salary_toggle": user.salary_toggle,
            "base_salary": float(user.base_salary),
            "commission_per_order": float(user.commission_per_order),
            "hire_date": user.hire_date,
            "last_login": user.last_login,
        })
    else:
        profile["last_login"] = user.last_login

    return {"user": profile}


@router.put("/employee/profile")
def update_employee_profile(
    profile_data: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(get_employee_user),
):
    employee = current_user.user

    for field, value in profile_data.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(employee, field, value)

    db.commit()
    db.refresh(employee)

    return {
        "message": "Profile updated successfully",
        "user": {
            **_summary(employee, EMPLOYEE_ROLE).model_dump(),
            "phone": employee.phone,
            "salary_toggle": employee.salary_toggle,
        },
    }


# ---------------- LOGOUT ----------------
@router.post("/logout")
def logout():
    # Tokens are stateless; the client discards its copy
    return {"message": "Logged out successfully"}
