"""initial_schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from glowiva.models.admins import ADMIN_ROLES
from glowiva.models.employees import DEPARTMENTS, POSITIONS
from glowiva.models.orders import ORDER_STATUSES, PAYMENT_METHODS, PAYMENT_STATUSES
from glowiva.models.products import PRODUCT_CATEGORIES


# revision identifiers, used by Alembic.
revision: str = '0001_initial_schema'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _one_of(column: str, values, name: str) -> sa.CheckConstraint:
    quoted = ", ".join(f"'{v}'" for v in values)
    return sa.CheckConstraint(f"{column} IN ({quoted})", name=name)


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Upgrade schema."""

    # ADMINS
    op.create_table(
        "admins",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        _one_of("role", ADMIN_ROLES, "ck_admin_role_valid"),
    )
    op.create_index("ix_admins_id", "admins", ["id"], unique=False)
    op.create_index("ix_admins_username", "admins", ["username"], unique=True)
    op.create_index("ix_admins_email", "admins", ["email"], unique=True)

    # EMPLOYEES
    op.create_table(
        "employees",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("username", sa.String(150), nullable=False),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("phone", sa.String(40), nullable=False),
        sa.Column("position", sa.String(40), nullable=False),
        sa.Column("department", sa.String(40), nullable=False),
        sa.Column("base_salary", sa.Numeric(12, 2), nullable=False),
        sa.Column("commission_per_order", sa.Numeric(12, 2), nullable=False),
        sa.Column("salary_toggle", sa.Boolean(), nullable=False),
        sa.Column("hire_date", sa.Date(), nullable=False),
        sa.Column("address", sa.JSON(), nullable=True),
        sa.Column("emergency_contact", sa.JSON(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("termination_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("commission_paid_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        _one_of("position", POSITIONS, "ck_employee_position_valid"),
        _one_of("department", DEPARTMENTS, "ck_employee_department_valid"),
        sa.CheckConstraint("base_salary >= 0", name="ck_base_salary_non_negative"),
        sa.CheckConstraint("commission_per_order >= 0", name="ck_commission_non_negative"),
    )
    op.create_index("ix_employees_id", "employees", ["id"], unique=False)
    op.create_index("ix_employees_email", "employees", ["email"], unique=True)
    op.create_index("ix_employees_username", "employees", ["username"], unique=True)

    # PRODUCTS
    op.create_table(
        "products",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category", sa.String(40), nullable=False),
        sa.Column("cost_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("selling_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("stock", sa.Integer(), nullable=False),
        sa.Column("min_stock", sa.Integer(), nullable=False),
        sa.Column("sku", sa.String(40), nullable=False),
        sa.Column("image_url", sa.String(500), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("sku", name="uq_products_sku"),
        sa.CheckConstraint("cost_price >= 0", name="ck_cost_price_non_negative"),
        sa.CheckConstraint("selling_price >= 0", name="ck_selling_price_non_negative"),
        sa.CheckConstraint("stock >= 0", name="ck_stock_non_negative"),
        _one_of("category", PRODUCT_CATEGORIES, "ck_product_category_valid"),
    )
    op.create_index("ix_products_id", "products", ["id"], unique=False)
    op.create_index("ix_products_sku", "products", ["sku"], unique=False)

    # ORDERS
    op.create_table(
        "orders",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("order_number", sa.String(40), nullable=False),
        sa.Column("customer_name", sa.String(200), nullable=False),
        sa.Column("customer_email", sa.String(255), nullable=False),
        sa.Column("customer_phone", sa.String(40), nullable=False),
        sa.Column("customer_address", sa.JSON(), nullable=True),
        sa.Column("employee_id", sa.Integer(), sa.ForeignKey("employees.id"), nullable=True),
        sa.Column("created_by_id", sa.Integer(), sa.ForeignKey("employees.id"), nullable=True),
        sa.Column("subtotal", sa.Numeric(12, 2), nullable=False),
        sa.Column("tax", sa.Numeric(12, 2), nullable=False),
        sa.Column("shipping", sa.Numeric(12, 2), nullable=False),
        sa.Column("discount", sa.Numeric(12, 2), nullable=False),
        sa.Column("total", sa.Numeric(12, 2), nullable=False),
        sa.Column("total_cost", sa.Numeric(12, 2), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("payment_status", sa.String(20), nullable=False),
        sa.Column("payment_method", sa.String(20), nullable=False),
        sa.Column("notes", sa.Text(), nullable=False),
        *_timestamps(),
        _one_of("status", ORDER_STATUSES, "ck_order_status_valid"),
        _one_of("payment_status", PAYMENT_STATUSES, "ck_order_payment_status_valid"),
        _one_of("payment_method", PAYMENT_METHODS, "ck_order_payment_method_valid"),
        sa.CheckConstraint("subtotal >= 0", name="ck_order_subtotal_non_negative"),
        sa.CheckConstraint("total_cost >= 0", name="ck_order_total_cost_non_negative"),
    )
    op.create_index("ix_orders_id", "orders", ["id"], unique=False)
    op.create_index("ix_orders_order_number", "orders", ["order_number"], unique=True)
    op.create_index("ix_orders_employee_id", "orders", ["employee_id"], unique=False)
    op.create_index("ix_orders_created_by_id", "orders", ["created_by_id"], unique=False)
    op.create_index("ix_orders_created_at", "orders", ["created_at"], unique=False)
    op.create_index(
        "ix_orders_employee_created",
        "orders",
        ["employee_id", "created_at"],
        unique=False,
    )

    # ORDER ITEMS
    op.create_table(
        "order_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "order_id",
            sa.Integer(),
            sa.ForeignKey("orders.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("product_id", sa.Integer(), sa.ForeignKey("products.id"), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("price_at_time", sa.Numeric(12, 2), nullable=False),
        sa.Column("cost_at_time", sa.Numeric(12, 2), nullable=False),
        sa.CheckConstraint("quantity >= 1", name="ck_order_item_quantity_positive"),
    )
    op.create_index("ix_order_items_id", "order_items", ["id"], unique=False)
    op.create_index("ix_order_items_order_id", "order_items", ["order_id"], unique=False)
    op.create_index("ix_order_items_product_id", "order_items", ["product_id"], unique=False)


def downgrade() -> None:
    """Downgrade schema."""

    op.drop_index("ix_order_items_product_id", table_name="order_items")
    op.drop_index("ix_order_items_order_id", table_name="order_items")
    op.drop_index("ix_order_items_id", table_name="order_items")
    op.drop_table("order_items")

    op.drop_index("ix_orders_employee_created", table_name="orders")
    op.drop_index("ix_orders_created_at", table_name="orders")
    op.drop_index("ix_orders_created_by_id", table_name="orders")
    op.drop_index("ix_orders_employee_id", table_name="orders")
    op.drop_index("ix_orders_order_number", table_name="orders")
    op.drop_index("ix_orders_id", table_name="orders")
    op.drop_table("orders")

    op.drop_index("ix_products_sku", table_name="products")
    op.drop_index("ix_products_id", table_name="products")
    op.drop_table("products")

    op.drop_index("ix_employees_username", table_name="employees")
    op.drop_index("ix_employees_email", table_name="employees")
    op.drop_index("ix_employees_id", table_name="employees")
    op.drop_table("employees")

    op.drop_index("ix_admins_email", table_name="admins")
    op.drop_index("ix_admins_username", table_name="admins")
    op.drop_index("ix_admins_id", table_name="admins")
    op.drop_table("admins")
