import logging
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from storefront.ids import AddressId, CustomerId
from storefront.models.customer import Address, Customer
from storefront.repositories.customer_repo import CustomerRepository
from storefront.services.exceptions import NotFound

log = logging.getLogger(__name__)


class CustomerService:
    """
    Customers and their saved addresses.

    Whenever a customer has at least one address, exactly one of them is
    the default; every mutation below restores that before committing.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = CustomerRepository(db)

    def create_customer(self, name: str, phone: str, email: Optional[str] = None) -> Customer:
        c = self.repo.add(Customer(name=name, phone=phone, email=email))
        self.db.commit()
        log.info("created customer %s", c.id)
        return c

    def get_customer(self, customer_id: CustomerId) -> Customer:
        c = self.repo.get(customer_id)
        if not c:
            raise NotFound("Customer", customer_id)
        return c

    def list_customers(self) -> List[Customer]:
        return self.repo.list()

    def update_customer(self, customer_id: CustomerId, changes: Dict) -> Customer:
        c = self.get_customer(customer_id)
        for key, value in changes.items():
            setattr(c, key, value)
        self.db.commit()
        return c

    def get_address(self, customer: Customer, address_id: AddressId) -> Address:
        a = self.repo.find_address(customer, address_id)
        if not a:
            raise NotFound("Address", address_id)
        return a

    @staticmethod
    def _make_default(customer: Customer, address: Address):
        for a in customer.addresses:
            a.is_default = a is address

    def add_address(self, customer_id: CustomerId, data: Dict) -> Address:
        customer = self.get_customer(customer_id)
        address = Address(**data)
        first = not customer.addresses
        customer.addresses.append(address)
        if first or address.is_default:
            self._make_default(customer, address)
        self.db.commit()
        log.info("customer %s: added address %s", customer_id, address.id)
        return address

    def update_address(self, customer_id: CustomerId, address_id: AddressId, changes: Dict) -> Address:
        customer = self.get_customer(customer_id)
        address = self.get_address(customer, address_id)
        for key, value in changes.items():
            setattr(address, key, value)
        self.db.commit()
        return address

    def remove_address(self, customer_id: CustomerId, address_id: AddressId) -> Customer:
        customer = self.get_customer(customer_id)
        address = self.get_address(customer, address_id)
        was_default = address is customer.default_address
        customer.addresses.remove(address)
        if was_default and customer.addresses:
            self._make_default(customer, customer.addresses[0])
        self.db.commit()
        log.info("customer %s: removed address %s", customer_id, address_id)
        return customer

    def set_default_address(self, customer_id: CustomerId, address_id: AddressId) -> Customer:
        customer = self.get_customer(customer_id)
        address = self.get_address(customer, address_id)
        self._make_default(customer, address)
        self.db.commit()
        return customer
