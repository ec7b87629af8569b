from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SelectedOption(BaseModel):
    """Snapshot of a chosen option, frozen at add-to-cart time."""

    group_id: int
    option_id: int
    name: str
    extra_price_cents: int = 0


class AddItemIn(BaseModel):
    product_id: int
    quantity: int = Field(1, gt=0)
    # option group id -> chosen option ids
    selection: Dict[int, List[int]] = Field(default_factory=dict)
    notes: Optional[str] = None


class UpdateQuantityIn(BaseModel):
    # zero or less removes the item
    quantity: int


class DeliveryFeeIn(BaseModel):
    delivery_fee_cents: int = Field(..., ge=0)


class CartItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    product_id: int
    product_name: str
    product_image: Optional[str] = None
    quantity: int
    base_price_cents: int
    selected_options: List[SelectedOption] = []
    notes: Optional[str] = None
    unit_total_cents: int
    line_total_cents: int


class CartOut(BaseModel):
    cart_uuid: str
    items: List[CartItemOut]
    item_count: int
    subtotal_cents: int
    delivery_fee_cents: int
    total_cents: int
