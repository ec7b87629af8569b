from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from storefront.db import Base
from storefront.schemas.cart_schema import SelectedOption


def _uuid() -> str:
    return uuid4().hex


class Order(Base):
    __tablename__ = "orders"
    id = Column(String(32), primary_key=True, default=_uuid)
    display_code = Column(String(32), unique=True, nullable=False, index=True)

    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    customer_name = Column(String(256), nullable=False)
    customer_phone = Column(String(32), nullable=False)

    address_snapshot = Column(JSON, nullable=False)
    payment_snapshot = Column(JSON, nullable=False)

    subtotal_cents = Column(Integer, nullable=False, default=0)
    delivery_fee_cents = Column(Integer, nullable=False, default=0)
    total_cents = Column(Integer, nullable=False, default=0)

    status = Column(String(32), nullable=False, default="PENDING", index=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), nullable=False)
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), nullable=False)
    version = Column(Integer, nullable=False)

    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.position",
    )
    timeline = relationship(
        "OrderStatusEvent",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderStatusEvent.id",
    )

    __mapper_args__ = {"version_id_col": version}


class OrderItem(Base):
    __tablename__ = "order_items"
    id = Column(String(32), primary_key=True, default=_uuid)
    order_id = Column(
        String(32), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position = Column(Integer, nullable=False, default=0)
    product_id = Column(Integer, nullable=False)
    product_name = Column(String(256), nullable=False)
    product_image = Column(String(512), nullable=True)
    quantity = Column(Integer, nullable=False)
    unit_price_cents = Column(Integer, nullable=False)
    selected_options = Column(JSON, nullable=False, default=list)
    notes = Column(Text, nullable=True)
    line_total_cents = Column(Integer, nullable=False)

    order = relationship("Order", back_populates="items")

    @property
    def options(self):
        return [SelectedOption.model_validate(o) for o in (self.selected_options or [])]


class OrderStatusEvent(Base):
    __tablename__ = "order_status_events"
    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(
        String(32), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    status = Column(String(32), nullable=False)
    at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    note = Column(Text, nullable=True)

    order = relationship("Order", back_populates="timeline")
