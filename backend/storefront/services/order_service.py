import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from storefront.config import settings
from storefront.ids import AddressId, CustomerId, OrderId
from storefront.models.cart import Cart
from storefront.models.order import Order
from storefront.repositories.counter_repo import CounterRepository
from storefront.repositories.order_repo import OrderRepository
from storefront.services.cart_service import CartService
from storefront.services.customer_service import CustomerService
from storefront.services.exceptions import (
    ArithmeticPrecondition,
    ConcurrentModification,
    NotFound,
)
from storefront.services.order_factory import build_order
from storefront.services.order_lifecycle import OrderStatus, advance_status

log = logging.getLogger(__name__)

ORDER_COUNTER = "order"


class OrderService:
    def __init__(self, db: Session):
        self.db = db
        self.order_repo = OrderRepository(db)
        self.counters = CounterRepository(db)
        self.customers = CustomerService(db)

    def checkout(
        self,
        cart: Cart,
        customer_id: CustomerId,
        address_id: AddressId,
        payment: Dict,
        notes: Optional[str] = None,
    ) -> Order:
        """
        Turn the cart into a PENDING order.

        The cart is cleared only after the order has been committed, so a
        failure while persisting leaves the cart untouched.
        """
        if not cart.items:
            raise ArithmeticPrecondition("Cannot check out an empty cart")
        customer = self.customers.get_customer(customer_id)
        address = self.customers.get_address(customer, address_id)

        with self.counters.locked(ORDER_COUNTER):
            try:
                counter = self.counters.next_value(ORDER_COUNTER)
                order = build_order(
                    cart,
                    customer,
                    address.snapshot(),
                    payment,
                    counter,
                    notes=notes,
                    prefix=settings.ORDER_CODE_PREFIX,
                    width=settings.ORDER_CODE_WIDTH,
                )
                self.order_repo.add(order)
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise

        log.info(
            "order %s (%s) created for customer %s total=%d",
            order.display_code,
            order.id,
            customer_id,
            order.total_cents,
        )
        CartService(self.db).clear(cart)
        return order

    def get_order(self, order_id: OrderId) -> Order:
        o = self.order_repo.get(order_id)
        if not o:
            raise NotFound("Order", order_id)
        return o

    def list_orders(self, status: Optional[OrderStatus] = None) -> List[Order]:
        return self.order_repo.list(OrderStatus(status).value if status else None)

    def orders_for_customer(self, customer_id: CustomerId) -> List[Order]:
        self.customers.get_customer(customer_id)
        return self.order_repo.list_for_customer(customer_id)

    def change_status(
        self,
        order_id: OrderId,
        new_status,
        note: Optional[str] = None,
        expected_version: Optional[int] = None,
    ) -> Order:
        order = self.get_order(order_id)
        if expected_version is not None and expected_version != order.version:
            raise ConcurrentModification(
                f"Order {order_id} is at version {order.version}, not {expected_version}"
            )
        previous = order.status
        advance_status(order, new_status, note)
        try:
            self.db.commit()
        except StaleDataError:
            self.db.rollback()
            raise ConcurrentModification(f"Order {order_id} was modified concurrently")
        log.info("order %s: %s -> %s", order.display_code, previous, order.status)
        return order

    def cancel_order(
        self, order_id: OrderId, reason: Optional[str] = None, expected_version: Optional[int] = None
    ) -> Order:
        return self.change_status(order_id, OrderStatus.CANCELED, reason, expected_version)

    def orders_today(self, now: Optional[datetime] = None) -> List[Order]:
        """Orders created since midnight UTC."""
        now = now or datetime.now(timezone.utc)
        start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
        return self.order_repo.list_created_since(start_of_day)

    def dashboard_stats(self, now: Optional[datetime] = None) -> Dict[str, int]:
        todays = self.orders_today(now)

        def count(*statuses):
            return sum(1 for o in todays if o.status in statuses)

        return {
            "orders_today": len(todays),
            "revenue_today_cents": sum(
                o.total_cents for o in todays if o.status != OrderStatus.CANCELED.value
            ),
            "pending_orders": count(OrderStatus.PENDING.value, OrderStatus.RECEIVED.value),
            "preparing_orders": count(OrderStatus.PREPARING.value),
            "delivered_orders": count(OrderStatus.DELIVERED.value),
            "canceled_orders": count(OrderStatus.CANCELED.value),
        }

    def receive_stale_pending(
        self, older_than_seconds: int, now: Optional[datetime] = None
    ) -> List[OrderId]:
        """Accept PENDING orders that have waited longer than the given age."""
        now = now or datetime.now(timezone.utc)
        cutoff = now - timedelta(seconds=older_than_seconds)
        received = []
        for order in self.order_repo.list_pending_before(cutoff):
            advance_status(order, OrderStatus.RECEIVED, note="auto-received", now=now)
            try:
                self.db.commit()
            except StaleDataError:
                # an operator moved it first
                self.db.rollback()
                log.warning("order %s changed while auto-receiving, skipped", order.id)
                continue
            received.append(order.id)
        if received:
            log.info("auto-received %d pending orders", len(received))
        return received
