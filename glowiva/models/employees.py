# glowiva/models/employees.py

from sqlalchemy import Boolean, CheckConstraint, Column, Date, DateTime, Integer, JSON, Numeric, String

from glowiva.database import Base, enum_check, utc_now


POSITIONS = ("manager", "sales_associate", "inventory_clerk", "customer_service", "admin", "other")

DEPARTMENTS = ("sales", "inventory", "customer_service", "administration", "marketing", "other")


class Employee(Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    username = Column(String(150), unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    phone = Column(String(40), nullable=False, default="")

    position = Column(String(40), nullable=False)
    department = Column(String(40), nullable=False)

    # Annual base salary
    base_salary = Column(Numeric(12, 2), nullable=False, default=0)
    # Flat amount earned per attributed order
    commission_per_order = Column(Numeric(12, 2), nullable=False, default=0)
    salary_toggle = Column(Boolean, nullable=False, default=True)

    hire_date = Column(Date, nullable=False)
    address = Column(JSON, nullable=True)
    emergency_contact = Column(JSON, nullable=True)

    is_active = Column(Boolean, nullable=False, default=True)
    termination_date = Column(DateTime(timezone=True), nullable=True)

    # Orders created at or before this instant are no longer unpaid
    commission_paid_date = Column(DateTime(timezone=True), nullable=True)

    last_login = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    __table_args__ = (
        enum_check("position", POSITIONS, "ck_employee_position_valid"),
        enum_check("department", DEPARTMENTS, "ck_employee_department_valid"),
        CheckConstraint("base_salary >= 0", name="ck_base_salary_non_negative"),
        CheckConstraint("commission_per_order >= 0", name="ck_commission_non_negative"),
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self):
        return f"<Employee(id={self.id}, username='{self.username}')>"
