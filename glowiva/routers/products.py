# glowiva/routers/products.py

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from glowiva.database import get_db
from glowiva.core.auth import Principal, get_admin_user, get_current_user
from glowiva.core.errors import ValidationError
from glowiva.models.products import PRODUCT_CATEGORIES, Product
from glowiva.schemas.product import (
    ProductCreate,
    ProductPublicResponse,
    ProductResponse,
    ProductUpdate,
    StockUpdate,
)
from glowiva.services.products import (
    adjust_stock,
    get_product_or_404,
    is_referenced_by_orders,
    new_product,
)

logger = logging.getLogger("glowiva")

router = APIRouter(
    prefix="/products",
    tags=["Products"],
)


def _present(product: Product, current_user: Principal):
    # Employees never see cost figures
    if current_user.is_admin:
        return ProductResponse.model_validate(product)
    return ProductPublicResponse.model_validate(product)


@router.get("")
def list_products(
    category: str | None = None,
    is_active: bool | None = None,
    low_stock: bool = False,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(get_current_user),
):
    query = db.query(Product)

    if category:
        query = query.filter(Product.category == category)

    if is_active is not None:
        query = query.filter(Product.is_active.is_(is_active))

    if low_stock:
        query = query.filter(Product.stock <= Product.min_stock)

    products = query.order_by(Product.created_at.desc(), Product.id.desc()).all()

    return [_present(p, current_user) for p in products]


@router.get("/meta/categories")
def list_categories():
    return {"categories": list(PRODUCT_CATEGORIES)}


@router.get("/{product_id}")
def get_product(
    product_id: int,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(get_current_user),
):
    return _present(get_product_or_404(db, product_id), current_user)


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_product(
    product_data: ProductCreate,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(get_admin_user),
):
    product = new_product(product_data)

    if db.query(Product.id).filter(Product.sku == product.sku).first():
        raise ValidationError("Product with this SKU already exists")

    db.add(product)
    db.commit()
    db.refresh(product)

    logger.info(f"Product created: {product.name} ({product.sku})")
    return product


@router.put("/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: int,
    product_data: ProductUpdate,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(get_admin_user),
):
    product = get_product_or_404(db, product_id)

    for field, value in product_data.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(product, field, value)

    db.commit()
    db.refresh(product)

    return product


@router.patch("/{product_id}/stock", response_model=ProductResponse)
def update_stock(
    product_id: int,
    stock_data: StockUpdate,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(get_admin_user),
):
    product = get_product_or_404(db, product_id)
    adjust_stock(product, stock_data.quantity, stock_data.operation)

    db.commit()
    db.refresh(product)

    logger.info(f"Stock {stock_data.operation} {stock_data.quantity} on {product.sku}: now {product.stock}")
    return product


@router.delete("/{product_id}")
def delete_product(
    product_id: int,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(get_admin_user),
):
    product = get_product_or_404(db, product_id)

    # Order lines keep a foreign key to the product
    if is_referenced_by_orders(db, product_id):
        product.is_active = False
        db.commit()
        return {"message": "Product is referenced by orders and has been deactivated"}

    db.delete(product)
    db.commit()

    logger.info(f"Product deleted: {product_id}")
    return {"message": "Product deleted successfully"}
