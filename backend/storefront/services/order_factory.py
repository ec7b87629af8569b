"""Builds immutable order snapshots from a cart at checkout time."""
import copy
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from storefront.models.order import Order, OrderItem, OrderStatusEvent
from storefront.services.order_lifecycle import INITIAL_STATUS


def format_display_code(counter: int, prefix: str = "ER", width: int = 3) -> str:
    return f"{prefix}-{counter:0{width}d}"


def build_order(
    cart,
    customer,
    address_snapshot: dict,
    payment_snapshot: dict,
    display_counter: int,
    notes: Optional[str] = None,
    now: Optional[datetime] = None,
    prefix: str = "ER",
    width: int = 3,
) -> Order:
    """
    Materialize an Order from the cart's current contents.

    Prices come from the cart items as they are and are never looked up
    again. The address and payment dicts are deep-copied. The cart itself
    is not modified.
    """
    now = now or datetime.now(timezone.utc)
    order = Order(
        id=uuid4().hex,
        display_code=format_display_code(display_counter, prefix, width),
        customer_id=customer.id,
        customer_name=customer.name,
        customer_phone=customer.phone,
        address_snapshot=copy.deepcopy(address_snapshot),
        payment_snapshot=copy.deepcopy(payment_snapshot),
        subtotal_cents=cart.subtotal_cents,
        delivery_fee_cents=cart.delivery_fee_cents,
        total_cents=cart.total_cents,
        status=INITIAL_STATUS.value,
        notes=notes,
        created_at=now,
        updated_at=now,
    )
    for pos, it in enumerate(cart.items):
        order.items.append(
            OrderItem(
                id=uuid4().hex,
                position=pos,
                product_id=it.product_id,
                product_name=it.product_name,
                product_image=it.product_image,
                quantity=it.quantity,
                unit_price_cents=it.unit_total_cents,
                selected_options=copy.deepcopy(list(it.selected_options or [])),
                notes=it.notes,
                line_total_cents=it.line_total_cents,
            )
        )
    order.timeline.append(OrderStatusEvent(status=INITIAL_STATUS.value, at=now))
    return order
