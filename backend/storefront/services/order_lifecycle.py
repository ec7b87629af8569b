import enum
import logging
from datetime import datetime, timezone
from typing import Dict, FrozenSet, List, Optional

from storefront.models.order import Order, OrderStatusEvent
from storefront.services.exceptions import InvalidTransition

log = logging.getLogger(__name__)


class OrderStatus(str, enum.Enum):
    PENDING = "PENDING"
    RECEIVED = "RECEIVED"
    PREPARING = "PREPARING"
    OUT_FOR_DELIVERY = "OUT_FOR_DELIVERY"
    DELIVERED = "DELIVERED"
    CANCELED = "CANCELED"


INITIAL_STATUS = OrderStatus.PENDING
TERMINAL_STATUSES: FrozenSet[OrderStatus] = frozenset(
    {OrderStatus.DELIVERED, OrderStatus.CANCELED}
)

ALLOWED_TRANSITIONS: Dict[OrderStatus, List[OrderStatus]] = {
    OrderStatus.PENDING: [OrderStatus.RECEIVED, OrderStatus.CANCELED],
    OrderStatus.RECEIVED: [OrderStatus.PREPARING, OrderStatus.CANCELED],
    OrderStatus.PREPARING: [OrderStatus.OUT_FOR_DELIVERY, OrderStatus.CANCELED],
    OrderStatus.OUT_FOR_DELIVERY: [OrderStatus.DELIVERED, OrderStatus.CANCELED],
    OrderStatus.DELIVERED: [],
    OrderStatus.CANCELED: [],
}


def allowed_next_statuses(status) -> List[OrderStatus]:
    return list(ALLOWED_TRANSITIONS[OrderStatus(status)])


def can_transition(current, new) -> bool:
    return OrderStatus(new) in ALLOWED_TRANSITIONS[OrderStatus(current)]


def advance_status(
    order: Order,
    new_status,
    note: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Order:
    """
    Move `order` to `new_status`, appending an event to its timeline.
    Raises InvalidTransition when the move is not in ALLOWED_TRANSITIONS.
    """
    new_status = OrderStatus(new_status)
    if not can_transition(order.status, new_status):
        log.warning(
            "rejected transition order=%s %s -> %s", order.id, order.status, new_status.value
        )
        raise InvalidTransition(OrderStatus(order.status).value, new_status.value)
    now = now or datetime.now(timezone.utc)
    order.timeline.append(OrderStatusEvent(status=new_status.value, at=now, note=note))
    order.status = new_status.value
    order.updated_at = now
    return order
