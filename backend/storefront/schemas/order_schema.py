import enum
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from storefront.schemas.cart_schema import SelectedOption
from storefront.services.order_lifecycle import OrderStatus, allowed_next_statuses


class PaymentType(str, enum.Enum):
    PIX = "PIX"
    CASH = "CASH"
    CREDIT = "CREDIT"
    DEBIT = "DEBIT"


class PaymentMethodIn(BaseModel):
    type: PaymentType
    change_for_cents: Optional[int] = Field(None, ge=0)

    @model_validator(mode="after")
    def _change_only_for_cash(self):
        if self.change_for_cents is not None and self.type != PaymentType.CASH:
            raise ValueError("change_for_cents is only accepted for CASH payments")
        return self


class CheckoutIn(BaseModel):
    customer_id: int
    address_id: int
    payment: PaymentMethodIn
    notes: Optional[str] = None


class StatusChangeIn(BaseModel):
    status: OrderStatus
    note: Optional[str] = None
    expected_version: Optional[int] = None


class CancelIn(BaseModel):
    reason: Optional[str] = None
    expected_version: Optional[int] = None


class OrderItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    product_id: int
    product_name: str
    product_image: Optional[str] = None
    quantity: int
    unit_price_cents: int
    selected_options: List[SelectedOption] = []
    notes: Optional[str] = None
    line_total_cents: int


class StatusEventOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    status: OrderStatus
    at: datetime
    note: Optional[str] = None


class OrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    display_code: str
    customer_id: int
    customer_name: str
    customer_phone: str
    address_snapshot: Dict[str, Any]
    payment_snapshot: Dict[str, Any]
    items: List[OrderItemOut]
    subtotal_cents: int
    delivery_fee_cents: int
    total_cents: int
    status: OrderStatus
    timeline: List[StatusEventOut]
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    version: int

    @computed_field
    @property
    def allowed_next_statuses(self) -> List[OrderStatus]:
        return allowed_next_statuses(self.status)


class DashboardOut(BaseModel):
    orders_today: int
    revenue_today_cents: int
    pending_orders: int
    preparing_orders: int
    delivered_orders: int
    canceled_orders: int
