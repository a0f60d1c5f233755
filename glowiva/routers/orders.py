# =========================================================
# ORDERS ROUTER
#
# ADMINS:
# - See and manage every order
# - Change status, cancel (restores stock)
#
# EMPLOYEES:
# - Create orders
# - See, edit and delete only the orders they created
# =========================================================

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from glowiva.database import get_db
from glowiva.core.auth import (
    Principal,
    ensure_order_author,
    get_admin_user,
    get_current_user,
    get_employee_user,
)
from glowiva.core.errors import ValidationError
from glowiva.core.money import ZERO, money
from glowiva.models.order_items import OrderItem
from glowiva.models.orders import Order
from glowiva.schemas.order import (
    OrderCreate,
    OrderResponse,
    OrderStatsResponse,
    OrderStatusUpdate,
    OrderUpdate,
)
from glowiva.services.commission import commission_payload, commission_status
from glowiva.services.orders import (
    apply_date_range,
    cancel_order,
    get_order_or_404,
    new_order,
    order_stats,
    reprice_order,
)

logger = logging.getLogger("glowiva")

router = APIRouter(prefix="/orders", tags=["Orders"])


def _with_lines(query):
    return query.options(selectinload(Order.items).selectinload(OrderItem.product))


# =========================================================
# LIST ORDERS
# =========================================================
@router.get("", response_model=list[OrderResponse])
def list_orders(
    status_filter: str | None = Query(None, alias="status"),
    payment_status: str | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
    current_user: Principal = Depends(get_current_user),
):
    query = _with_lines(db.query(Order))

    if current_user.is_employee:
        query = query.filter(Order.created_by_id == current_user.id)

    if status_filter:
        query = query.filter(Order.status == status_filter)

    if payment_status:
        query = query.filter(Order.payment_status == payment_status)

    query = apply_date_range(query, Order.created_at, start_date, end_date)

    return (
        query.order_by(Order.created_at.desc(), Order.id.desc())
        .limit(limit)
        .all()
    )


# =========================================================
# STATS + EMPLOYEE VIEW
# =========================================================
@router.get("/stats/summary", response_model=OrderStatsResponse)
def get_order_stats(
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(get_current_user),
):
    return order_stats(db, start_date, end_date)


@router.get("/employee/my-orders")
def get_my_orders(
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(get_employee_user),
):
    query = _with_lines(db.query(Order)).filter(Order.created_by_id == current_user.id)
    query = apply_date_range(query, Order.created_at, start_date, end_date)

    orders = query.order_by(Order.created_at.desc(), Order.id.desc()).all()

    return {
        "orders": [OrderResponse.model_validate(o) for o in orders],
        "stats": {
            "order_count": len(orders),
            "total_revenue": float(money(sum((o.total for o in orders), ZERO))),
        },
        "commission": commission_payload(commission_status(db, current_user.user)),
    }


# =========================================================
# SINGLE ORDER
# =========================================================
@router.get("/{order_id}", response_model=OrderResponse)
def get_order(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(get_current_user),
):
    order = get_order_or_404(db, order_id)
    ensure_order_author(current_user, order, action="view")
    return order


# =========================================================
# CREATE ORDER
# =========================================================
@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def create_order(
    order_data: OrderCreate,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(get_current_user),
):
    created_by_id = current_user.id if current_user.is_employee else None

    order = new_order(db, order_data, created_by_id)

    try:
        db.add(order)
        db.commit()
        db.refresh(order)
    except SQLAlchemyError:
        db.rollback()
        raise HTTPException(status_code=500, detail="Unable to create order")

    logger.info(f"Order created: {order.order_number} total={order.total}")
    return order


@router.put("/{order_id}", response_model=OrderResponse)
def update_order(
    order_id: int,
    order_data: OrderUpdate,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(get_current_user),
):
    order = get_order_or_404(db, order_id)
    ensure_order_author(current_user, order, action="edit")

    reprice_order(db, order, order_data)

    try:
        db.commit()
        db.refresh(order)
    except SQLAlchemyError:
        db.rollback()
        raise HTTPException(status_code=500, detail="Unable to update order")

    return order


@router.patch("/{order_id}/status", response_model=OrderResponse)
def update_order_status(
    order_id: int,
    status_data: OrderStatusUpdate,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(get_admin_user),
):
    order = get_order_or_404(db, order_id)

    if status_data.status == "cancelled":
        raise ValidationError("Use the cancel endpoint to cancel an order")

    if status_data.status is not None:
        order.status = status_data.status

    if status_data.payment_status is not None:
        order.payment_status = status_data.payment_status

    db.commit()
    db.refresh(order)

    return order


@router.patch("/{order_id}/cancel", response_model=OrderResponse)
def cancel(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(get_admin_user),
):
    order = get_order_or_404(db, order_id)

    # Stock restoration and status change commit together
    try:
        cancel_order(db, order)
        db.commit()
        db.refresh(order)
    except SQLAlchemyError:
        db.rollback()
        raise HTTPException(status_code=500, detail="Unable to cancel order")

    return order


@router.delete("/{order_id}")
def delete_order(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(get_current_user),
):
    order = get_order_or_404(db, order_id)
    ensure_order_author(current_user, order, action="delete")

    db.delete(order)
    db.commit()

    logger.info(f"Order deleted: {order.order_number}")
    return {"message": "Order deleted successfully"}
