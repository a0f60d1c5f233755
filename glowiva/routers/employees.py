import logging

from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from glowiva.database import get_db, utc_now
from glowiva.core.auth import Principal, ensure_self_or_admin, get_admin_user, get_current_user
from glowiva.core.errors import ValidationError
from glowiva.core.hashing import hash_password
from glowiva.models.employees import DEPARTMENTS, POSITIONS, Employee
from glowiva.models.orders import Order
from glowiva.schemas.employee import (
    EmployeeCreate,
    EmployeeResponse,
    EmployeeTerminate,
    EmployeeUpdate,
)
from glowiva.schemas.order import OrderResponse
from glowiva.services.commission import (
    attributed_orders,
    commission_payload,
    commission_status,
    get_employee_or_404,
    monthly_salary,
    reset_commission,
    salary_summary,
)

logger = logging.getLogger("glowiva")

router = APIRouter(prefix="/employees", tags=["Employees"])


def _ensure_unique(db: Session, email: str | None, username: str | None, exclude_id: int | None = None):
    criteria = []
    if email:
        criteria.append(func.lower(Employee.email) == email.lower())
    if username:
        criteria.append(Employee.username == username)
    if not criteria:
        return

    query = db.query(Employee.id).filter(or_(*criteria))
    if exclude_id is not None:
        query = query.filter(Employee.id != exclude_id)

    if query.first():
        raise ValidationError("Employee with this email or username already exists")


# =========================================================
# METADATA
# =========================================================
@router.get("/meta/positions")
def list_positions():
    return {"positions": list(POSITIONS)}


@router.get("/meta/departments")
def list_departments():
    return {"departments": list(DEPARTMENTS)}


# =========================================================
# SALARY
# =========================================================
@router.get("/salary-summary/{year}/{month}")
def get_salary_summary(
    year: int = Path(..., ge=2000, le=9999),
    month: int = Path(..., ge=1, le=12),
    db: Session = Depends(get_db),
    current_user: Principal = Depends(get_admin_user),
):
    return salary_summary(db, year, month)


@router.get("/{employee_id}/salary/{year}/{month}")
def get_monthly_salary(
    employee_id: int,
    year: int = Path(..., ge=2000, le=9999),
    month: int = Path(..., ge=1, le=12),
    db: Session = Depends(get_db),
    current_user: Principal = Depends(get_current_user),
):
    ensure_self_or_admin(current_user, employee_id)
    employee = get_employee_or_404(db, employee_id)

    salary = monthly_salary(db, employee, year, month)

    return {
        "employee": {
            "id": employee.id,
            "name": employee.full_name,
            "position": employee.position,
            "department": employee.department,
        },
        "period": {"year": salary.year, "month": salary.month},
        "salary": {
            "base_salary": salary.base_salary,
            "commission_per_order": salary.commission_per_order,
            "order_count": salary.order_count,
            "commission_amount": salary.commission_amount,
            "total_salary": salary.total_salary,
        },
        "orders": [OrderResponse.model_validate(o) for o in salary.orders],
    }


@router.get("/{employee_id}/orders")
def get_employee_orders(
    employee_id: int,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(get_current_user),
):
    ensure_self_or_admin(current_user, employee_id)
    employee = get_employee_or_404(db, employee_id)

    orders = (
        attributed_orders(db, employee)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )

    return {
        "orders": [OrderResponse.model_validate(o) for o in orders],
        "commission": commission_payload(commission_status(db, employee)),
    }


@router.post("/{employee_id}/reset-commission")
def reset_employee_commission(
    employee_id: int,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(get_admin_user),
):
    employee = get_employee_or_404(db, employee_id)

    reset_date = reset_commission(db, employee)
    db.commit()
    db.refresh(employee)

    return {
        "message": "Commission reset successfully",
        "reset_date": reset_date,
        "commission": commission_payload(commission_status(db, employee)),
    }


# =========================================================
# CRUD
# =========================================================
@router.get("", response_model=list[EmployeeResponse])
def list_employees(
    department: str | None = None,
    position: str | None = None,
    is_active: bool | None = None,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(get_admin_user),
):
    query = db.query(Employee)

    if department:
        query = query.filter(Employee.department == department)

    if position:
        query = query.filter(Employee.position == position)

    if is_active is not None:
        query = query.filter(Employee.is_active.is_(is_active))

    return query.order_by(Employee.created_at.desc(), Employee.id.desc()).all()


@router.get("/{employee_id}", response_model=EmployeeResponse)
def get_employee(
    employee_id: int,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(get_current_user),
):
    ensure_self_or_admin(current_user, employee_id)
    return get_employee_or_404(db, employee_id)


@router.post("", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
def create_employee(
    employee_data: EmployeeCreate,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(get_admin_user),
):
    _ensure_unique(db, employee_data.email, employee_data.username)

    data = employee_data.model_dump(exclude={"password", "email", "address", "emergency_contact"})

    employee = Employee(
        **data,
        email=employee_data.email.lower(),
        password_hash=hash_password(employee_data.password),
        address=employee_data.address.model_dump() if employee_data.address else None,
        emergency_contact=(
            employee_data.emergency_contact.model_dump() if employee_data.emergency_contact else None
        ),
        is_active=True,
    )

    try:
        db.add(employee)
        db.commit()
        db.refresh(employee)
    except SQLAlchemyError:
        db.rollback()
        raise HTTPException(status_code=500, detail="Unable to create employee")

    logger.info(f"Employee created: {employee.username}")
    return employee


@router.put("/{employee_id}", response_model=EmployeeResponse)
def update_employee(
    employee_id: int,
    employee_data: EmployeeUpdate,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(get_admin_user),
):
    employee = get_employee_or_404(db, employee_id)
    _ensure_unique(db, employee_data.email, employee_data.username, exclude_id=employee.id)

    updates = employee_data.model_dump(exclude_unset=True)

    password = updates.pop("password", None)
    if password:
        employee.password_hash = hash_password(password)

    if updates.get("email"):
        updates["email"] = updates["email"].lower()

    for field, value in updates.items():
        if value is None and field not in ("address", "emergency_contact"):
            continue
        setattr(employee, field, value)

    db.commit()
    db.refresh(employee)

    return employee


@router.patch("/{employee_id}/terminate", response_model=EmployeeResponse)
def terminate_employee(
    employee_id: int,
    terminate_data: EmployeeTerminate | None = None,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(get_admin_user),
):
    employee = get_employee_or_404(db, employee_id)

    termination_date = None
    if terminate_data is not None:
        termination_date = terminate_data.termination_date

    employee.is_active = False
    employee.termination_date = termination_date or utc_now()

    db.commit()
    db.refresh(employee)

    logger.info(f"Employee terminated: {employee.username}")
    return employee
