# schemas/order.py

from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Literal

from glowiva.models.orders import ORDER_STATUSES, PAYMENT_METHODS, PAYMENT_STATUSES

MAX_LINE_QUANTITY = 100_000


class Address(BaseModel):
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = None

    class Config:
        extra = "forbid"


class OrderItemCreate(BaseModel):
    product_id: int
    quantity: int = Field(..., ge=1, le=MAX_LINE_QUANTITY)
    # Free-form from the order form; only a positive number overrides the list price
    custom_price: float | str | None = None

    class Config:
        extra = "forbid"


class OrderCreate(BaseModel):
    customer_name: str = Field(..., min_length=1)
    customer_phone: str = Field(..., min_length=1)
    customer_email: str = ""
    customer_address: Address | None = None
    employee_id: int | None = None
    payment_method: Literal[PAYMENT_METHODS] = "cash"
    notes: str = ""
    items: List[OrderItemCreate] = Field(..., min_length=1)

    class Config:
        extra = "forbid"


class OrderUpdate(BaseModel):
    customer_name: str = Field(..., min_length=1)
    customer_phone: str = Field(..., min_length=1)
    employee_id: int | None = None
    items: List[OrderItemCreate] = Field(..., min_length=1)

    class Config:
        extra = "forbid"


class OrderStatusUpdate(BaseModel):
    status: Literal[ORDER_STATUSES] | None = None
    payment_status: Literal[PAYMENT_STATUSES] | None = None

    class Config:
        extra = "forbid"


class OrderItemResponse(BaseModel):
    product_id: int
    product_name: str | None
    quantity: int
    price_at_time: float
    cost_at_time: float
    line_total: float

    class Config:
        from_attributes = True


class OrderResponse(BaseModel):
    id: int
    order_number: str
    customer_name: str
    customer_email: str
    customer_phone: str
    customer_address: dict | None
    employee_id: int | None
    created_by_id: int | None
    items: List[OrderItemResponse]
    subtotal: float
    tax: float
    shipping: float
    discount: float
    total: float
    total_cost: float
    profit: float
    status: str
    payment_status: str
    payment_method: str
    notes: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class OrderStatsResponse(BaseModel):
    total_orders: int
    completed_orders: int
    pending_orders: int
    total_revenue: float
    total_cost: float
    total_profit: float
    profit_margin: float
