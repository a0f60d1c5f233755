# glowiva/models/orders.py

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, JSON, Numeric, String, Text
from sqlalchemy.orm import relationship

from glowiva.database import Base, enum_check, utc_now
from glowiva.models.employees import Employee  # noqa: F401
from glowiva.models.order_items import OrderItem  # noqa: F401


ORDER_STATUSES = ("pending", "processing", "shipped", "delivered", "cancelled")

PAYMENT_STATUSES = ("pending", "paid", "failed", "refunded")

PAYMENT_METHODS = ("cash", "card", "online", "bank_transfer")


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    order_number = Column(String(40), unique=True, index=True, nullable=False)

    customer_name = Column(String(200), nullable=False)
    customer_email = Column(String(255), nullable=False, default="")
    customer_phone = Column(String(40), nullable=False)
    customer_address = Column(JSON, nullable=True)

    # Commission attribution
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=True, index=True)
    # Authorship, used for edit/delete permissions
    created_by_id = Column(Integer, ForeignKey("employees.id"), nullable=True, index=True)

    subtotal = Column(Numeric(12, 2), nullable=False)
    tax = Column(Numeric(12, 2), nullable=False, default=0)
    shipping = Column(Numeric(12, 2), nullable=False, default=0)
    discount = Column(Numeric(12, 2), nullable=False, default=0)
    total = Column(Numeric(12, 2), nullable=False)
    total_cost = Column(Numeric(12, 2), nullable=False)

    status = Column(String(20), nullable=False, default="pending")
    payment_status = Column(String(20), nullable=False, default="pending")
    payment_method = Column(String(20), nullable=False, default="cash")
    notes = Column(Text, nullable=False, default="")

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
    )

    employee = relationship("Employee", foreign_keys=[employee_id])
    created_by = relationship("Employee", foreign_keys=[created_by_id])

    __table_args__ = (
        Index("ix_orders_employee_created", "employee_id", "created_at"),
        enum_check("status", ORDER_STATUSES, "ck_order_status_valid"),
        enum_check("payment_status", PAYMENT_STATUSES, "ck_order_payment_status_valid"),
        enum_check("payment_method", PAYMENT_METHODS, "ck_order_payment_method_valid"),
        CheckConstraint("subtotal >= 0", name="ck_order_subtotal_non_negative"),
        CheckConstraint("total_cost >= 0", name="ck_order_total_cost_non_negative"),
    )

    @property
    def profit(self):
        return self.total - self.total_cost

    def __repr__(self):
        return f"<Order(id={self.id}, order_number='{self.order_number}', total={self.total})>"
