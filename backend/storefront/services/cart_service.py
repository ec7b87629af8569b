import logging
import uuid
from typing import Optional

from sqlalchemy.orm import Session

from storefront.config import settings
from storefront.ids import CartItemId, ProductId
from storefront.models.cart import Cart, CartItem
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.services import pricing
from storefront.services.exceptions import ArithmeticPrecondition, NotFound, SelectionInvalid
from storefront.services.selection import Selection, selected_options_snapshot, validate_selection

log = logging.getLogger(__name__)


class CartService:
    def __init__(self, db: Session):
        self.db = db
        self.cart_repo = CartRepository(db)
        self.product_repo = ProductRepository(db)

    def get_or_create_cart(self, cart_uuid: Optional[str] = None) -> Cart:
        if cart_uuid:
            c = self.cart_repo.get_by_uuid(cart_uuid)
            if c:
                return c
        new_uuid = cart_uuid or uuid.uuid4().hex
        c = self.cart_repo.create(new_uuid, settings.DELIVERY_FEE_CENTS)
        self.db.commit()
        log.info("created cart %s", new_uuid)
        return c

    def get_cart(self, cart_uuid: str) -> Cart:
        c = self.cart_repo.get_by_uuid(cart_uuid)
        if not c:
            raise NotFound("Cart", cart_uuid)
        return c

    @staticmethod
    def item_count(cart: Cart) -> int:
        return sum(it.quantity for it in cart.items)

    def _check_selection_references(self, product, selection: Selection):
        groups = {g.id: g for g in product.option_groups}
        for group_id, option_ids in selection.items():
            group = groups.get(group_id)
            if group is None:
                raise ArithmeticPrecondition(
                    f"Option group {group_id} does not belong to product {product.id}"
                )
            if len(set(option_ids)) != len(option_ids):
                raise ArithmeticPrecondition(
                    f"Option group {group_id} lists the same option more than once"
                )
            known = {o.id for o in group.options}
            stray = [oid for oid in option_ids if oid not in known]
            if stray:
                raise ArithmeticPrecondition(
                    f"Options {stray} do not belong to option group {group_id}"
                )

    def add_item(
        self,
        cart: Cart,
        product_id: ProductId,
        quantity: int,
        selection: Optional[Selection] = None,
        notes: Optional[str] = None,
    ) -> CartItem:
        if quantity <= 0:
            raise ArithmeticPrecondition("Quantity must be positive")
        product = self.product_repo.get(product_id, active_only=True)
        if not product:
            raise NotFound("Product", product_id)
        selection = selection or {}
        self._check_selection_references(product, selection)

        result = validate_selection(product.option_groups, selection)
        if not result.is_valid:
            log.warning(
                "cart %s: rejected selection for product %s (%d violations)",
                cart.cart_uuid,
                product_id,
                len(result.violations),
            )
            raise SelectionInvalid(result.violations)

        options = selected_options_snapshot(product.option_groups, selection)
        item = CartItem(
            product_id=product.id,
            product_name=product.name,
            product_image=product.image,
            base_price_cents=product.price_cents,
            selected_options=[o.model_dump() for o in options],
            quantity=quantity,
            notes=notes,
        )
        pricing.recalculate_item(item)
        self.cart_repo.append_item(cart, item)
        pricing.apply_cart_totals(cart)
        self.db.commit()
        log.info(
            "cart %s: added product=%s qty=%d line=%d",
            cart.cart_uuid,
            product.id,
            quantity,
            item.line_total_cents,
        )
        return item

    def update_quantity(self, cart: Cart, item_id: CartItemId, quantity: int) -> Cart:
        item = self.cart_repo.find_item(cart, item_id)
        if not item:
            raise NotFound("Cart item", item_id)
        if quantity <= 0:
            return self.remove_item(cart, item_id)
        item.quantity = quantity
        pricing.recalculate_item(item)
        pricing.apply_cart_totals(cart)
        self.db.commit()
        log.info("cart %s: item %s qty=%d", cart.cart_uuid, item_id, quantity)
        return cart

    def remove_item(self, cart: Cart, item_id: CartItemId) -> Cart:
        item = self.cart_repo.find_item(cart, item_id)
        if not item:
            raise NotFound("Cart item", item_id)
        self.cart_repo.remove_item(cart, item)
        pricing.apply_cart_totals(cart)
        self.db.commit()
        log.info("cart %s: removed item %s", cart.cart_uuid, item_id)
        return cart

    def clear(self, cart: Cart) -> Cart:
        self.cart_repo.clear(cart)
        pricing.apply_cart_totals(cart)
        self.db.commit()
        log.info("cart %s: cleared", cart.cart_uuid)
        return cart

    def set_delivery_fee(self, cart: Cart, delivery_fee_cents: int) -> Cart:
        if delivery_fee_cents < 0:
            raise ArithmeticPrecondition("Delivery fee must not be negative")
        cart.delivery_fee_cents = delivery_fee_cents
        pricing.apply_cart_totals(cart)
        self.db.commit()
        return cart
