from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import relationship

from storefront.db import Base
from storefront.schemas.cart_schema import SelectedOption


class Cart(Base):
    __tablename__ = "carts"
    id = Column(Integer, primary_key=True, index=True)
    cart_uuid = Column(String(64), unique=True, index=True, nullable=False)
    customer_id = Column(Integer, nullable=True, index=True)
    delivery_fee_cents = Column(Integer, nullable=False, default=0)
    subtotal_cents = Column(Integer, nullable=False, default=0)
    total_cents = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    items = relationship(
        "CartItem",
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItem.position, CartItem.id",
    )


class CartItem(Base):
    __tablename__ = "cart_items"
    id = Column(Integer, primary_key=True, index=True)
    cart_id = Column(
        Integer, ForeignKey("carts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position = Column(Integer, nullable=False, default=0)

    # snapshot of the product at add time
    product_id = Column(Integer, nullable=False, index=True)
    product_name = Column(String(256), nullable=False)
    product_image = Column(String(512), nullable=True)
    base_price_cents = Column(Integer, nullable=False, default=0)
    selected_options = Column(JSON, nullable=False, default=list)

    quantity = Column(Integer, nullable=False, default=1)
    notes = Column(Text, nullable=True)

    # derived, always recomputed from the snapshot fields
    unit_total_cents = Column(Integer, nullable=False, default=0)
    line_total_cents = Column(Integer, nullable=False, default=0)

    cart = relationship("Cart", back_populates="items")

    @property
    def options(self):
        return [SelectedOption.model_validate(o) for o in (self.selected_options or [])]
