from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from storefront.ids import AddressId, CustomerId
from storefront.models.customer import Address, Customer


class CustomerRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, customer_id: CustomerId) -> Optional[Customer]:
        return (
            self.db.query(Customer)
            .options(selectinload(Customer.addresses))
            .filter(Customer.id == customer_id)
            .first()
        )

    def list(self) -> List[Customer]:
        return (
            self.db.query(Customer)
            .options(selectinload(Customer.addresses))
            .order_by(Customer.created_at.desc(), Customer.id.desc())
            .all()
        )

    def add(self, customer: Customer) -> Customer:
        self.db.add(customer)
        self.db.flush()
        return customer

    def find_address(self, customer: Customer, address_id: AddressId) -> Optional[Address]:
        return next((a for a in customer.addresses if a.id == address_id), None)
