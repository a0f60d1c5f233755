# glowiva/models/products.py

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Integer, Numeric, String, Text, UniqueConstraint

from glowiva.database import Base, enum_check, utc_now


PRODUCT_CATEGORIES = (
    "serum",
    "facewash",
    "sunscreen",
    "moisturizer",
    "cleanser",
    "toner",
    "mask",
    "cream",
    "eye_cream",
    "vaseline",
    "lip_balm",
    "micellar_water",
    "night_cream",
    "oil",
    "shampoo",
    "lotion",
    "peeling_gel",
    "shower_gel",
    "foundation",
    "lipstick",
    "eyeshadow",
    "mascara",
    "blush",
    "concealer",
    "primer",
    "setting_spray",
    "treatment",
    "other",
)


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="No description provided")
    category = Column(String(40), nullable=False, default="other")

    cost_price = Column(Numeric(12, 2), nullable=False)
    selling_price = Column(Numeric(12, 2), nullable=False)

    stock = Column(Integer, nullable=False, default=0)
    min_stock = Column(Integer, nullable=False, default=10)

    sku = Column(String(40), nullable=False, index=True)
    image_url = Column(String(500), nullable=False, default="")
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    __table_args__ = (
        UniqueConstraint("sku", name="uq_products_sku"),
        CheckConstraint("cost_price >= 0", name="ck_cost_price_non_negative"),
        CheckConstraint("selling_price >= 0", name="ck_selling_price_non_negative"),
        CheckConstraint("stock >= 0", name="ck_stock_non_negative"),
        enum_check("category", PRODUCT_CATEGORIES, "ck_product_category_valid"),
    )

    @property
    def is_low_stock(self) -> bool:
        return self.stock <= self.min_stock

    @property
    def profit(self):
        return self.selling_price - self.cost_price

    def __repr__(self):
        return f"<Product(id={self.id}, sku='{self.sku}', stock={self.stock})>"
