import pytest

from storefront.models.cart import Cart
from storefront.services.cart_service import CartService
from storefront.repositories.counter_repo import CounterRepository
from storefront.services.exceptions import ArithmeticPrecondition, CounterUnavailable, NotFound
from storefront.services.order_service import OrderService


def _fill_cart(client, ids):
    selection = {
        str(ids["doneness"]): [ids["medium"]],
        str(ids["extras"]): [ids["bacon"], ids["cheese"]],
    }
    res = client.post(
        "/api/cart/items",
        json={"product_id": ids["product"], "quantity": 2, "selection": selection},
    )
    assert res.status_code == 200
    return res.json()["cart"]


def _checkout(client, customer, payment=None, notes=None):
    return client.post(
        "/api/orders",
        json={
            "customer_id": customer.id,
            "address_id": customer.addresses[0].id,
            "payment": payment or {"type": "PIX"},
            "notes": notes,
        },
    )


def test_checkout_creates_order_and_clears_cart(client, burger_ids, customer):
    cart = _fill_cart(client, burger_ids)
    res = _checkout(client, customer, notes="interfone 12")
    assert res.status_code == 201
    order = res.json()

    assert order["status"] == "PENDING"
    assert order["allowed_next_statuses"] == ["RECEIVED", "CANCELED"]
    assert [e["status"] for e in order["timeline"]] == ["PENDING"]
    assert order["display_code"].startswith("ER-")
    assert order["subtotal_cents"] == cart["subtotal_cents"] == 8380
    assert order["delivery_fee_cents"] == 599
    assert order["total_cents"] == 8979
    assert order["customer_name"] == "Maria Silva"
    assert order["address_snapshot"]["street"] == "Rua das Flores"
    assert order["payment_snapshot"]["type"] == "PIX"
    assert order["notes"] == "interfone 12"
    [item] = order["items"]
    assert item["unit_price_cents"] == 4190
    assert item["line_total_cents"] == 8380

    after = client.get("/api/cart").json()
    assert after["items"] == []
    assert after["total_cents"] == after["delivery_fee_cents"]


def test_order_reads_back_unchanged_after_edits(client, db, burger, burger_ids, customer):
    _fill_cart(client, burger_ids)
    created = _checkout(client, customer).json()

    burger.price_cents = 1
    customer.addresses[0].street = "Outra Rua"
    db.commit()

    fetched = client.get(f"/api/orders/{created['id']}").json()
    assert fetched["items"] == created["items"]
    assert fetched["total_cents"] == 8979
    assert fetched["address_snapshot"]["street"] == "Rua das Flores"


def test_display_codes_increase(client, burger_ids, customer):
    codes = []
    for _ in range(3):
        _fill_cart(client, burger_ids)
        codes.append(_checkout(client, customer).json()["display_code"])
    numbers = [int(c.split("-")[1]) for c in codes]
    assert numbers == [numbers[0], numbers[0] + 1, numbers[0] + 2]
    assert all(len(c.split("-")[1]) >= 3 for c in codes)


def test_empty_cart_checkout_is_rejected(client, customer):
    client.get("/api/cart")
    res = _checkout(client, customer)
    assert res.status_code == 400


def test_checkout_without_cart_cookie(client, customer):
    assert _checkout(client, customer).status_code == 400


def test_change_for_only_with_cash(client, burger_ids, customer):
    _fill_cart(client, burger_ids)
    bad = _checkout(client, customer, payment={"type": "PIX", "change_for_cents": 5000})
    assert bad.status_code == 422
    ok = _checkout(client, customer, payment={"type": "CASH", "change_for_cents": 10000})
    assert ok.status_code == 201
    assert ok.json()["payment_snapshot"] == {"type": "CASH", "change_for_cents": 10000}


def test_address_of_another_customer_is_404(client, db, burger_ids, customer):
    from storefront.services.customer_service import CustomerService

    other = CustomerService(db).create_customer("João", "11988887777")
    _fill_cart(client, burger_ids)
    res = client.post(
        "/api/orders",
        json={"customer_id": other.id, "address_id": customer.addresses[0].id, "payment": {"type": "PIX"}},
    )
    assert res.status_code == 404
    assert len(client.get("/api/cart").json()["items"]) == 1


def test_unknown_order_is_404(client):
    assert client.get("/api/orders/doesnotexist").status_code == 404


def test_service_checkout_keeps_cart_when_customer_missing(db, burger_ids):
    svc = CartService(db)
    cart = svc.get_or_create_cart()
    svc.add_item(cart, burger_ids["product"], 1, {burger_ids["doneness"]: [burger_ids["rare"]]})
    with pytest.raises(NotFound):
        OrderService(db).checkout(cart, 987654, 1, {"type": "PIX"})
    assert len(db.query(Cart).filter(Cart.id == cart.id).one().items) == 1


def test_service_checkout_rejects_empty_cart(db, customer):
    cart = CartService(db).get_or_create_cart()
    with pytest.raises(ArithmeticPrecondition):
        OrderService(db).checkout(cart, customer.id, customer.addresses[0].id, {"type": "PIX"})


def test_customer_order_history(client, burger_ids, customer):
    _fill_cart(client, burger_ids)
    order_id = _checkout(client, customer).json()["id"]
    res = client.get(f"/api/customers/{customer.id}/orders")
    assert res.status_code == 200
    assert order_id in [o["id"] for o in res.json()]


def test_counter_lock_timeout_is_503_and_keeps_cart(client, burger_ids, customer, monkeypatch):
    _fill_cart(client, burger_ids)

    def busy(self, name):
        raise CounterUnavailable(f"Could not acquire counter lock for {name!r}")

    monkeypatch.setattr(CounterRepository, "next_value", busy)
    res = _checkout(client, customer)
    assert res.status_code == 503
    assert len(client.get("/api/cart").json()["items"]) == 1
