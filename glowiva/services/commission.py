"""
Commission accrual, commission reset and monthly salary.

Two views of an employee's commission are exposed and are not expected to
agree:

* unpaid commission: orders attributed to the employee and created strictly
  after ``commission_paid_date`` (all history while it is unset);
* monthly commission: orders attributed to the employee inside a calendar
  month, regardless of the cutoff.

A reset only moves the cutoff forward. Orders are never deleted or
un-attributed, so the total order count is unchanged by it.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import func
from sqlalchemy.orm import Session

from glowiva.core.errors import NotFoundError, ValidationError
from glowiva.core.money import ZERO, money, to_decimal
from glowiva.database import utc_now
from glowiva.models.employees import Employee
from glowiva.models.orders import Order

logger = logging.getLogger("glowiva")

MONTHS_PER_YEAR = 12


@dataclass
class CommissionStatus:
    total_order_count: int
    eligible_order_count: int
    commission_per_order: Decimal
    unpaid_commission: Decimal
    commission_paid_date: datetime | None
    salary_toggle: bool


@dataclass
class MonthlySalary:
    year: int
    month: int
    base_salary: Decimal
    commission_per_order: Decimal
    order_count: int
    commission_amount: Decimal
    total_salary: Decimal
    orders: list[Order]


def get_employee_or_404(db: Session, employee_id: int) -> Employee:
    employee = db.get(Employee, employee_id)
    if employee is None:
        raise NotFoundError("Employee not found")
    return employee


def attributed_orders(db: Session, employee: Employee):
    return db.query(Order).filter(Order.employee_id == employee.id)


def eligible_orders(db: Session, employee: Employee):
    query = attributed_orders(db, employee)
    if employee.commission_paid_date is not None:
        # strictly after the cutoff
        query = query.filter(Order.created_at > employee.commission_paid_date)
    return query


def commission_for(employee: Employee, order_count: int) -> Decimal:
    if not employee.salary_toggle:
        return ZERO
    return money(to_decimal(employee.commission_per_order) * order_count)


def commission_status(db: Session, employee: Employee) -> CommissionStatus:
    total = attributed_orders(db, employee).with_entities(func.count(Order.id)).scalar() or 0
    eligible = eligible_orders(db, employee).with_entities(func.count(Order.id)).scalar() or 0

    return CommissionStatus(
        total_order_count=total,
        eligible_order_count=eligible,
        commission_per_order=money(employee.commission_per_order),
        unpaid_commission=commission_for(employee, eligible),
        commission_paid_date=employee.commission_paid_date,
        salary_toggle=employee.salary_toggle,
    )


def commission_payload(status: CommissionStatus) -> dict:
    return {
        "total_orders": status.total_order_count,
        "eligible_orders": status.eligible_order_count,
        "commission_per_order": float(status.commission_per_order),
        "unpaid_commission": float(status.unpaid_commission),
        "commission_paid_date": status.commission_paid_date,
        "salary_toggle": status.salary_toggle,
    }


def reset_commission(db: Session, employee: Employee, now: datetime | None = None) -> datetime:
    """Move the employee's commission cutoff to ``now``. The caller commits."""
    reset_date = now or utc_now()
    employee.commission_paid_date = reset_date
    logger.info(f"Commission reset for {employee.full_name} (id={employee.id}) at {reset_date.isoformat()}")
    return reset_date


def month_window(year: int, month: int) -> tuple[datetime, datetime]:
    """Half-open [start, end) UTC window covering the calendar month."""
    if not 1 <= month <= 12:
        raise ValidationError("Month must be between 1 and 12")

    start = datetime(year, month, 1, tzinfo=timezone.utc)
    if month == 12:
        end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    else:
        end = datetime(year, month + 1, 1, tzinfo=timezone.utc)
    return start, end


def monthly_base_salary(employee: Employee) -> Decimal:
    return money(to_decimal(employee.base_salary) / MONTHS_PER_YEAR)


def monthly_salary(db: Session, employee: Employee, year: int, month: int) -> MonthlySalary:
    start, end = month_window(year, month)

    orders = (
        attributed_orders(db, employee)
        .filter(Order.created_at >= start, Order.created_at < end)
        .order_by(Order.created_at.asc())
        .all()
    )

    base_salary = monthly_base_salary(employee)
    commission_amount = commission_for(employee, len(orders))

    return MonthlySalary(
        year=year,
        month=month,
        base_salary=base_salary,
        commission_per_order=money(employee.commission_per_order),
        order_count=len(orders),
        commission_amount=commission_amount,
        total_salary=base_salary + commission_amount,
        orders=orders,
    )


def salary_summary(db: Session, year: int, month: int) -> dict:
    start, end = month_window(year, month)

    employees = (
        db.query(Employee)
        .filter(Employee.is_active.is_(True))
        .order_by(Employee.id.asc())
        .all()
    )

    monthly_sales = money(
        db.query(func.coalesce(func.sum(Order.total), 0))
        .filter(
            Order.created_at >= start,
            Order.created_at < end,
            Order.status == "delivered",
        )
        .scalar()
    )

    details = []
    total_expense = ZERO

    for employee in employees:
        salary = monthly_salary(db, employee, year, month)
        total_expense += salary.total_salary

        details.append({
            "employee": {
                "id": employee.id,
                "name": employee.full_name,
                "position": employee.position,
                "department": employee.department,
            },
            "base_salary": salary.base_salary,
            "order_count": salary.order_count,
            "commission_amount": salary.commission_amount,
            "total_salary": salary.total_salary,
        })

    return {
        "period": {"year": year, "month": month},
        "monthly_sales": monthly_sales,
        "total_employees": len(employees),
        "total_salary_expense": money(total_expense),
        "salary_details": details,
    }
