"""
Order pricing and lifecycle.

Each line is priced from the stored product: cost always comes from the
product, the sale price from the caller's custom price when it is a positive
number and from the product's selling price otherwise. Both are snapshotted
on the line, so later product edits never change a stored order.
"""
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Iterable

from sqlalchemy import func
from sqlalchemy.orm import Session

from glowiva.core.errors import NotFoundError, ValidationError
from glowiva.core.money import MAX_AMOUNT, ZERO, money, parse_positive, percentage, to_decimal
from glowiva.models.employees import Employee
from glowiva.models.order_items import OrderItem
from glowiva.models.orders import Order
from glowiva.models.products import Product
from glowiva.schemas.order import OrderCreate, OrderItemCreate, OrderUpdate

logger = logging.getLogger("glowiva")

ORDER_NUMBER_PREFIX = "GLW"


@dataclass
class PricedOrder:
    lines: list[OrderItem] = field(default_factory=list)
    subtotal: Decimal = ZERO
    total_cost: Decimal = ZERO


def resolve_sale_price(custom_price, product: Product) -> Decimal:
    parsed = parse_positive(custom_price)
    if parsed is None:
        return to_decimal(product.selling_price)
    if parsed >= MAX_AMOUNT:
        raise ValidationError("Custom price is too large")
    return parsed


def price_order_lines(db: Session, items: Iterable[OrderItemCreate]) -> PricedOrder:
    priced = PricedOrder()

    for item in items:
        product = db.get(Product, item.product_id)
        if product is None:
            raise NotFoundError(f"Product not found: {item.product_id}")

        price = money(resolve_sale_price(item.custom_price, product))
        cost = money(product.cost_price)

        priced.subtotal += price * item.quantity
        priced.total_cost += cost * item.quantity

        priced.lines.append(
            OrderItem(
                product_id=product.id,
                quantity=item.quantity,
                price_at_time=price,
                cost_at_time=cost,
            )
        )

        # Stock is not decremented on order entry

    priced.subtotal = money(priced.subtotal)
    priced.total_cost = money(priced.total_cost)
    return priced


def order_total(subtotal, tax=ZERO, shipping=ZERO, discount=ZERO) -> Decimal:
    return money(to_decimal(subtotal) - to_decimal(discount) + to_decimal(tax) + to_decimal(shipping))


def generate_order_number(db: Session) -> str:
    count = db.query(func.count(Order.id)).scalar() or 0
    return f"{ORDER_NUMBER_PREFIX}{int(time.time() * 1000)}{count + 1:04d}"


def resolve_attributed_employee(db: Session, employee_id: int | None) -> int | None:
    if employee_id is None:
        return None
    if db.get(Employee, employee_id) is None:
        raise NotFoundError(f"Employee not found: {employee_id}")
    return employee_id


def new_order(db: Session, data: OrderCreate, created_by_id: int | None) -> Order:
    priced = price_order_lines(db, data.items)

    # Order-entry flow: no tax, shipping or discount
    order = Order(
        order_number=generate_order_number(db),
        customer_name=data.customer_name,
        customer_email=data.customer_email,
        customer_phone=data.customer_phone,
        customer_address=data.customer_address.model_dump() if data.customer_address else None,
        employee_id=resolve_attributed_employee(db, data.employee_id),
        created_by_id=created_by_id,
        items=priced.lines,
        subtotal=priced.subtotal,
        tax=ZERO,
        shipping=ZERO,
        discount=ZERO,
        total=order_total(priced.subtotal),
        total_cost=priced.total_cost,
        payment_method=data.payment_method,
        notes=data.notes,
    )
    return order


def reprice_order(db: Session, order: Order, data: OrderUpdate) -> Order:
    priced = price_order_lines(db, data.items)

    order.customer_name = data.customer_name
    order.customer_phone = data.customer_phone
    order.employee_id = resolve_attributed_employee(db, data.employee_id)
    order.items = priced.lines
    order.subtotal = priced.subtotal
    order.total = order_total(priced.subtotal, order.tax, order.shipping, order.discount)
    order.total_cost = priced.total_cost
    return order


def get_order_or_404(db: Session, order_id: int) -> Order:
    order = db.get(Order, order_id)
    if order is None:
        raise NotFoundError("Order not found")
    return order


def cancel_order(db: Session, order: Order) -> Order:
    if order.status == "cancelled":
        raise ValidationError("Order is already cancelled")

    # Restored stock and the status change go out in the caller's single commit
    for item in order.items:
        product = db.get(Product, item.product_id)
        if product is not None:
            product.stock += item.quantity

    order.status = "cancelled"
    logger.info(f"Order {order.order_number} cancelled, stock restored for {len(order.items)} lines")
    return order


def apply_date_range(query, column, start: datetime | None, end: datetime | None):
    if start is not None:
        query = query.filter(column >= start)
    if end is not None:
        query = query.filter(column <= end)
    return query


def order_stats(db: Session, start: datetime | None = None, end: datetime | None = None) -> dict:
    def _count(*criteria):
        query = apply_date_range(db.query(func.count(Order.id)), Order.created_at, start, end)
        return query.filter(*criteria).scalar() or 0

    revenue, cost = apply_date_range(
        db.query(
            func.coalesce(func.sum(Order.total), 0),
            func.coalesce(func.sum(Order.total_cost), 0),
        ),
        Order.created_at,
        start,
        end,
    ).one()

    total_revenue = money(revenue)
    total_cost = money(cost)
    total_profit = total_revenue - total_cost

    return {
        "total_orders": _count(),
        "completed_orders": _count(Order.status == "delivered"),
        "pending_orders": _count(Order.status == "pending"),
        "total_revenue": total_revenue,
        "total_cost": total_cost,
        "total_profit": total_profit,
        "profit_margin": percentage(total_profit, total_revenue),
    }
