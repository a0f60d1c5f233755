# glowiva/models/order_items.py

from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, Numeric
from sqlalchemy.orm import relationship

from glowiva.database import Base
from glowiva.models.products import Product  # noqa: F401


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)

    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)

    quantity = Column(Integer, nullable=False)
    # Snapshots taken when the order is priced
    price_at_time = Column(Numeric(12, 2), nullable=False)
    cost_at_time = Column(Numeric(12, 2), nullable=False)

    order = relationship("Order", back_populates="items")
    product = relationship("Product")

    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_order_item_quantity_positive"),
    )

    @property
    def product_name(self):
        return self.product.name if self.product is not None else None

    @property
    def line_total(self):
        return self.price_at_time * self.quantity

    @property
    def line_cost(self):
        return self.cost_at_time * self.quantity
