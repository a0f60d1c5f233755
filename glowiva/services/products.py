"""
Product factory and stock helpers.

Defaults that a document store would apply in a save hook (SKU, selling
price) are applied here, explicitly, before the row is persisted.
"""
import secrets
import string
import time
from decimal import Decimal

from sqlalchemy.orm import Session

from glowiva.core.errors import NotFoundError, ValidationError
from glowiva.core.money import money, to_decimal
from glowiva.models.order_items import OrderItem
from glowiva.models.products import Product
from glowiva.schemas.product import ProductCreate


DEFAULT_MARKUP = Decimal("1.5")
DEFAULT_DESCRIPTION = "No description provided"

_SKU_ALPHABET = string.ascii_uppercase + string.digits


def generate_sku() -> str:
    suffix = "".join(secrets.choice(_SKU_ALPHABET) for _ in range(5))
    return f"PRD{int(time.time() * 1000)}{suffix}"


def default_selling_price(cost_price, selling_price=None) -> Decimal:
    # Unset or zero selling price falls back to a 50% markup on cost
    if selling_price:
        return money(selling_price)
    return money(to_decimal(cost_price) * DEFAULT_MARKUP)


def new_product(data: ProductCreate) -> Product:
    return Product(
        name=data.name.strip(),
        description=data.description or DEFAULT_DESCRIPTION,
        category=data.category,
        cost_price=money(data.cost_price),
        selling_price=default_selling_price(data.cost_price, data.selling_price),
        stock=data.stock,
        min_stock=data.min_stock,
        sku=(data.sku or "").strip() or generate_sku(),
        image_url=data.image_url.strip(),
        is_active=True,
    )


def get_product_or_404(db: Session, product_id: int) -> Product:
    product = db.get(Product, product_id)
    if product is None:
        raise NotFoundError(f"Product not found: {product_id}")
    return product


def adjust_stock(product: Product, quantity: int, operation: str = "set") -> Product:
    if quantity < 0:
        raise ValidationError("Quantity cannot be negative")

    if operation == "add":
        product.stock += quantity
    elif operation == "subtract":
        product.stock = max(0, product.stock - quantity)
    elif operation == "set":
        product.stock = quantity
    else:
        raise ValidationError(f"Unknown stock operation: {operation}")

    return product


def is_referenced_by_orders(db: Session, product_id: int) -> bool:
    return (
        db.query(OrderItem.id)
        .filter(OrderItem.product_id == product_id)
        .first()
        is not None
    )
