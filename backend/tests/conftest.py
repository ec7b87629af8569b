import os
import tempfile

# must be set before storefront.config is imported
_tmp = tempfile.mkdtemp(prefix="storefront-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_tmp, 'test.db')}"
os.environ["LOCKS_DIR"] = os.path.join(_tmp, "locks")

import pytest
from fastapi.testclient import TestClient

from storefront.db import SessionLocal, init_db
from storefront.main import app
from storefront.models.customer import Address, Customer
from storefront.models.menu import Category
from storefront.models.product import OptionGroup, Product, ProductOption


@pytest.fixture(autouse=True, scope="session")
def setup_db():
    init_db(reset=True)
    yield


@pytest.fixture
def db():
    s = SessionLocal()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def client():
    # fresh cookie jar per test, so every test gets its own cart
    with TestClient(app) as c:
        yield c


@pytest.fixture
def category(db):
    c = Category(name="Hambúrgueres", slug=f"burgers-{os.urandom(4).hex()}", sort_order=1)
    db.add(c)
    db.commit()
    return c


@pytest.fixture
def burger(db, category):
    """X-Bacon: 3290 cents, one required doneness group, up to 5 extras."""
    p = Product(
        category_id=category.id,
        name="X-Bacon Artesanal",
        description="Hambúrguer 180g com bacon",
        price_cents=3290,
        is_popular=True,
        preparation_time=20,
    )
    doneness = OptionGroup(
        name="Ponto da Carne", is_required=True, min_selections=1, max_selections=1, sort_order=1
    )
    doneness.options = [
        ProductOption(name="Mal Passado", extra_price_cents=0, sort_order=1),
        ProductOption(name="Ao Ponto", extra_price_cents=0, sort_order=2),
        ProductOption(name="Descontinuado", extra_price_cents=0, is_active=False, sort_order=3),
    ]
    extras = OptionGroup(
        name="Adicionais", is_required=False, min_selections=0, max_selections=5, sort_order=2
    )
    extras.options = [
        ProductOption(name="Bacon Extra", extra_price_cents=500, sort_order=1),
        ProductOption(name="Queijo Extra", extra_price_cents=400, sort_order=2),
    ]
    p.option_groups = [doneness, extras]
    db.add(p)
    db.commit()
    db.refresh(p)
    return p


@pytest.fixture
def burger_ids(burger):
    doneness, extras = burger.option_groups
    return {
        "product": burger.id,
        "doneness": doneness.id,
        "rare": doneness.options[0].id,
        "medium": doneness.options[1].id,
        "inactive": doneness.options[2].id,
        "extras": extras.id,
        "bacon": extras.options[0].id,
        "cheese": extras.options[1].id,
    }


@pytest.fixture
def customer(db):
    c = Customer(name="Maria Silva", phone="11999990000", email="maria@example.com")
    c.addresses = [
        Address(
            label="Casa",
            street="Rua das Flores",
            number="123",
            neighborhood="Centro",
            city="São Paulo",
            state="SP",
            zip_code="01000-000",
            is_default=True,
        )
    ]
    db.add(c)
    db.commit()
    db.refresh(c)
    return c
