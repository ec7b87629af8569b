from typing import Optional

from sqlalchemy.orm import Session

from storefront.ids import CartItemId
from storefront.models.cart import Cart, CartItem


class CartRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_uuid(self, cart_uuid: str) -> Optional[Cart]:
        return self.db.query(Cart).filter(Cart.cart_uuid == cart_uuid).first()

    def create(self, cart_uuid: str, delivery_fee_cents: int) -> Cart:
        c = Cart(
            cart_uuid=cart_uuid,
            delivery_fee_cents=delivery_fee_cents,
            subtotal_cents=0,
            total_cents=delivery_fee_cents,
        )
        self.db.add(c)
        self.db.flush()
        return c

    def find_item(self, cart: Cart, item_id: CartItemId) -> Optional[CartItem]:
        return next((it for it in cart.items if it.id == item_id), None)

    def append_item(self, cart: Cart, item: CartItem) -> CartItem:
        item.position = max((it.position for it in cart.items), default=-1) + 1
        cart.items.append(item)
        self.db.flush()
        return item

    def remove_item(self, cart: Cart, item: CartItem):
        # delete-orphan cascade issues the DELETE
        cart.items.remove(item)
        self.db.flush()

    def clear(self, cart: Cart):
        cart.items.clear()
        self.db.flush()
