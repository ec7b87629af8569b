from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.errors import to_http
from storefront.db import get_db
from storefront.schemas.customer_schema import (
    AddressIn,
    AddressOut,
    AddressUpdate,
    CustomerIn,
    CustomerOut,
    CustomerUpdate,
)
from storefront.schemas.order_schema import OrderOut
from storefront.services.customer_service import CustomerService
from storefront.services.exceptions import StorefrontException
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/api/customers", tags=["customers"])


def _out(customer) -> dict:
    return CustomerOut.model_validate(customer).model_dump()


@router.post("", summary="Register customer")
def create_customer(payload: CustomerIn, db: Session = Depends(get_db)):
    svc = CustomerService(db)
    return _out(svc.create_customer(payload.name, payload.phone, payload.email))


@router.get("/{customer_id}", summary="Get customer with addresses")
def get_customer(customer_id: int, db: Session = Depends(get_db)):
    try:
        return _out(CustomerService(db).get_customer(customer_id))
    except StorefrontException as e:
        raise to_http(e)


@router.patch("/{customer_id}", summary="Update customer")
def update_customer(customer_id: int, payload: CustomerUpdate, db: Session = Depends(get_db)):
    try:
        c = CustomerService(db).update_customer(
            customer_id, payload.model_dump(exclude_unset=True)
        )
    except StorefrontException as e:
        raise to_http(e)
    return _out(c)


@router.post("/{customer_id}/addresses", summary="Add address")
def add_address(customer_id: int, payload: AddressIn, db: Session = Depends(get_db)):
    try:
        a = CustomerService(db).add_address(customer_id, payload.model_dump())
    except StorefrontException as e:
        raise to_http(e)
    return AddressOut.model_validate(a).model_dump()


@router.patch("/{customer_id}/addresses/{address_id}", summary="Edit address")
def update_address(
    customer_id: int, address_id: int, payload: AddressUpdate, db: Session = Depends(get_db)
):
    try:
        a = CustomerService(db).update_address(
            customer_id, address_id, payload.model_dump(exclude_unset=True)
        )
    except StorefrontException as e:
        raise to_http(e)
    return AddressOut.model_validate(a).model_dump()


@router.delete("/{customer_id}/addresses/{address_id}", summary="Remove address")
def remove_address(customer_id: int, address_id: int, db: Session = Depends(get_db)):
    try:
        return _out(CustomerService(db).remove_address(customer_id, address_id))
    except StorefrontException as e:
        raise to_http(e)


@router.post("/{customer_id}/addresses/{address_id}/default", summary="Set default address")
def set_default_address(customer_id: int, address_id: int, db: Session = Depends(get_db)):
    try:
        return _out(CustomerService(db).set_default_address(customer_id, address_id))
    except StorefrontException as e:
        raise to_http(e)


@router.get("/{customer_id}/orders", summary="Order history of a customer")
def customer_orders(customer_id: int, db: Session = Depends(get_db)):
    try:
        orders = OrderService(db).orders_for_customer(customer_id)
    except StorefrontException as e:
        raise to_http(e)
    return [OrderOut.model_validate(o).model_dump(mode="json") for o in orders]
