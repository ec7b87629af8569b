from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from storefront.ids import CustomerId, OrderId
from storefront.models.order import Order


class OrderRepository:
    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(Order).options(
            selectinload(Order.items), selectinload(Order.timeline)
        )

    def get(self, order_id: OrderId) -> Optional[Order]:
        return self._query().filter(Order.id == order_id).first()

    def add(self, order: Order) -> Order:
        self.db.add(order)
        self.db.flush()
        return order

    def list(self, status: Optional[str] = None) -> List[Order]:
        query = self._query()
        if status:
            query = query.filter(Order.status == status)
        return query.order_by(Order.created_at.desc()).all()

    def list_for_customer(self, customer_id: CustomerId) -> List[Order]:
        return (
            self._query()
            .filter(Order.customer_id == customer_id)
            .order_by(Order.created_at.desc())
            .all()
        )

    def list_created_since(self, since: datetime) -> List[Order]:
        return self._query().filter(Order.created_at >= since).all()

    def list_pending_before(self, cutoff: datetime) -> List[Order]:
        return (
            self._query()
            .filter(Order.status == "PENDING", Order.created_at <= cutoff)
            .order_by(Order.created_at)
            .all()
        )
