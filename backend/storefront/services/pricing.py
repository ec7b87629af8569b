"""
Money arithmetic for cart items and orders.

Every amount is an int count of cents. Nothing here touches floats,
the database or the clock, and nothing raises: inputs are validated by
the callers (selection validation, quantity bounds).
"""
from typing import Iterable, NamedTuple, Tuple

DEFAULT_DELIVERY_FEE_CENTS = 599


class CartTotals(NamedTuple):
    subtotal_cents: int
    total_cents: int


def unit_total_cents(base_price_cents: int, selected_options: Iterable) -> int:
    """Base price plus the extra price of every selected option (duplicates count twice)."""
    return base_price_cents + sum(opt.extra_price_cents for opt in selected_options)


def line_total_cents(unit_total: int, quantity: int) -> int:
    return unit_total * quantity


def item_totals(base_price_cents: int, selected_options: Iterable, quantity: int) -> Tuple[int, int]:
    unit = unit_total_cents(base_price_cents, selected_options)
    return unit, line_total_cents(unit, quantity)


def cart_totals(items: Iterable, delivery_fee_cents: int) -> CartTotals:
    subtotal = sum(it.line_total_cents for it in items)
    return CartTotals(subtotal, subtotal + delivery_fee_cents)


def recalculate_item(item):
    """
    Recompute unit_total_cents and line_total_cents of a cart item from its
    snapshot fields (base_price_cents, options, quantity). Other fields are
    left untouched. Calling it repeatedly gives the same result.
    """
    item.unit_total_cents, item.line_total_cents = item_totals(
        item.base_price_cents, item.options, item.quantity
    )
    return item


def apply_cart_totals(cart):
    cart.subtotal_cents, cart.total_cents = cart_totals(cart.items, cart.delivery_fee_cents)
    return cart


def format_cents(cents: int, symbol: str = "R$") -> str:
    """Render cents as e.g. 'R$ 1.234,56' without going through floats."""
    sign = "-" if cents < 0 else ""
    whole, frac = divmod(abs(cents), 100)
    grouped = f"{whole:,}".replace(",", ".")
    return f"{sign}{symbol} {grouped},{frac:02d}"
