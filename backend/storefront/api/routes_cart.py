from typing import Optional

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from storefront.api.errors import to_http
from storefront.db import get_db
from storefront.models.cart import Cart
from storefront.schemas.cart_schema import (
    AddItemIn,
    CartItemOut,
    CartOut,
    DeliveryFeeIn,
    UpdateQuantityIn,
)
from storefront.services.cart_service import CartService
from storefront.services.exceptions import StorefrontException

router = APIRouter(prefix="/api/cart", tags=["cart"])

CART_COOKIE = "cart_uuid"


def _get_cart_uuid_cookie(request: Request) -> Optional[str]:
    return request.cookies.get(CART_COOKIE)


def cart_out(cart: Cart) -> dict:
    return CartOut(
        cart_uuid=cart.cart_uuid,
        items=[CartItemOut.model_validate(it) for it in cart.items],
        item_count=CartService.item_count(cart),
        subtotal_cents=cart.subtotal_cents,
        delivery_fee_cents=cart.delivery_fee_cents,
        total_cents=cart.total_cents,
    ).model_dump()


def _current_cart(request: Request, response: Response, svc: CartService) -> Cart:
    cart = svc.get_or_create_cart(_get_cart_uuid_cookie(request))
    response.set_cookie(CART_COOKIE, cart.cart_uuid, httponly=False, samesite="Lax")
    return cart


@router.get("", summary="Get cart")
def get_cart(request: Request, response: Response, db: Session = Depends(get_db)):
    svc = CartService(db)
    return cart_out(_current_cart(request, response, svc))


@router.post("/items", summary="Add item to cart")
def add_item(
    payload: AddItemIn,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
):
    svc = CartService(db)
    cart = _current_cart(request, response, svc)
    try:
        item = svc.add_item(
            cart, payload.product_id, payload.quantity, payload.selection, payload.notes
        )
    except StorefrontException as e:
        raise to_http(e)
    return {"item_id": item.id, "cart": cart_out(cart)}


@router.patch("/items/{item_id}", summary="Change item quantity (0 removes it)")
def update_quantity(
    item_id: int,
    payload: UpdateQuantityIn,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
):
    svc = CartService(db)
    cart = _current_cart(request, response, svc)
    try:
        svc.update_quantity(cart, item_id, payload.quantity)
    except StorefrontException as e:
        raise to_http(e)
    return cart_out(cart)


@router.delete("/items/{item_id}", summary="Remove item")
def remove_item(
    item_id: int, request: Request, response: Response, db: Session = Depends(get_db)
):
    svc = CartService(db)
    cart = _current_cart(request, response, svc)
    try:
        svc.remove_item(cart, item_id)
    except StorefrontException as e:
        raise to_http(e)
    return cart_out(cart)


@router.delete("", summary="Empty the cart")
def clear_cart(request: Request, response: Response, db: Session = Depends(get_db)):
    svc = CartService(db)
    cart = _current_cart(request, response, svc)
    return cart_out(svc.clear(cart))


@router.put("/delivery-fee", summary="Override the cart's delivery fee")
def set_delivery_fee(
    payload: DeliveryFeeIn,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
):
    svc = CartService(db)
    cart = _current_cart(request, response, svc)
    try:
        svc.set_delivery_fee(cart, payload.delivery_fee_cents)
    except StorefrontException as e:
        raise to_http(e)
    return cart_out(cart)
