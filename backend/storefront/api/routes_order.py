from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from storefront.api.errors import to_http
from storefront.api.routes_cart import CART_COOKIE
from storefront.db import get_db
from storefront.schemas.order_schema import CheckoutIn, OrderOut
from storefront.services.cart_service import CartService
from storefront.services.exceptions import StorefrontException
from storefront.services.order_service import OrderService

router = APIRouter(tags=["orders"])


@router.post("", status_code=201, summary="Create order (checkout)")
def create_order(payload: CheckoutIn, request: Request, db: Session = Depends(get_db)):
    cart_uuid: Optional[str] = request.cookies.get(CART_COOKIE)
    if not cart_uuid:
        raise HTTPException(status_code=400, detail="No cart for this session")
    try:
        cart = CartService(db).get_cart(cart_uuid)
        order = OrderService(db).checkout(
            cart,
            payload.customer_id,
            payload.address_id,
            payload.payment.model_dump(mode="json"),
            payload.notes,
        )
    except StorefrontException as e:
        raise to_http(e)
    return OrderOut.model_validate(order).model_dump(mode="json")


@router.get("/{order_id}", summary="Get order")
def get_order(order_id: str, db: Session = Depends(get_db)):
    try:
        return OrderOut.model_validate(OrderService(db).get_order(order_id)).model_dump(mode="json")
    except StorefrontException as e:
        raise to_http(e)
