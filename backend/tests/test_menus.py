from datetime import datetime

import pytest

from storefront.models.menu import Category, Menu, MenuSchedule
from storefront.services.menu_service import MenuService, js_weekday, schedule_is_open

# 2026-10-19 is a Monday
MONDAY_NOON = datetime(2026, 10, 19, 12, 0)
MONDAY_NIGHT = datetime(2026, 10, 19, 23, 30)
SUNDAY_NOON = datetime(2026, 10, 18, 12, 0)


def test_js_weekday():
    assert js_weekday(SUNDAY_NOON) == 0
    assert js_weekday(MONDAY_NOON) == 1


@pytest.mark.parametrize(
    "now, expected",
    [(MONDAY_NOON, True), (MONDAY_NIGHT, False), (SUNDAY_NOON, False)],
)
def test_schedule_is_open(now, expected):
    lunch = MenuSchedule(days_of_week=[1, 2, 3, 4, 5], start_time="11:00", end_time="15:00")
    assert schedule_is_open(lunch, now) is expected


def test_schedule_bounds_are_inclusive():
    s = MenuSchedule(days_of_week=[1], start_time="11:00", end_time="15:00")
    assert schedule_is_open(s, datetime(2026, 10, 19, 11, 0))
    assert schedule_is_open(s, datetime(2026, 10, 19, 15, 0))


@pytest.fixture
def menus(db):
    lunch = Menu(name="Almoço")
    lunch.schedules = [MenuSchedule(days_of_week=[1, 2, 3, 4, 5], start_time="11:00", end_time="15:00")]
    dinner = Menu(name="Jantar")
    dinner.schedules = [MenuSchedule(days_of_week=[0, 1, 2, 3, 4, 5, 6], start_time="18:00", end_time="23:59")]
    closed = Menu(name="Sazonal", is_active=False)
    closed.schedules = [MenuSchedule(days_of_week=[1], start_time="00:00", end_time="23:59")]
    db.add_all([lunch, dinner, closed])
    db.commit()
    return lunch, dinner, closed


def test_active_menus(db, menus):
    lunch, dinner, closed = menus
    svc = MenuService(db)
    noon = [m.id for m in svc.active_menus(MONDAY_NOON)]
    assert lunch.id in noon
    assert dinner.id not in noon
    assert closed.id not in noon
    night = [m.id for m in svc.active_menus(MONDAY_NIGHT)]
    assert dinner.id in night
    assert lunch.id not in night


def test_menu_categories_endpoint(client, db, menus):
    lunch = menus[0]
    db.add(Category(name="Pratos do Dia", slug=f"pratos-{lunch.id}", menu_id=lunch.id))
    db.commit()
    res = client.get(f"/api/menus/{lunch.id}/categories")
    assert res.status_code == 200
    assert [c["name"] for c in res.json()] == ["Pratos do Dia"]
    assert client.get("/api/menus/999999/categories").status_code == 404
    names = [m["name"] for m in client.get("/api/menus").json()]
    assert "Almoço" in names


LUNCH = {
    "name": "Almoço Executivo",
    "schedules": [{"days_of_week": [5, 1, 1], "start_time": "11:00", "end_time": "15:00"}],
}


def test_admin_menu_lifecycle(client):
    res = client.post("/api/admin/menus", json=LUNCH)
    assert res.status_code == 201
    menu = res.json()
    assert menu["is_active"] is True
    assert menu["schedules"][0]["days_of_week"] == [1, 5]

    res = client.patch(f"/api/admin/menus/{menu['id']}", json={"description": "Seg a Sex"})
    assert res.json()["description"] == "Seg a Sex"
    assert res.json()["name"] == "Almoço Executivo"
    assert client.patch(f"/api/admin/menus/{menu['id']}", json={"name": None}).status_code == 422

    res = client.post(
        f"/api/admin/menus/{menu['id']}/schedules",
        json={"days_of_week": [6], "start_time": "12:00", "end_time": "16:00"},
    )
    assert res.status_code == 201
    schedule_id = res.json()["id"]
    listed = {m["id"]: m for m in client.get("/api/menus").json()}
    assert len(listed[menu["id"]]["schedules"]) == 2

    assert client.delete(f"/api/admin/menu-schedules/{schedule_id}").status_code == 204
    assert client.delete(f"/api/admin/menu-schedules/{schedule_id}").status_code == 404

    assert client.delete(f"/api/admin/menus/{menu['id']}").status_code == 204
    assert menu["id"] not in [m["id"] for m in client.get("/api/menus").json()]
    assert client.patch(f"/api/admin/menus/{menu['id']}", json={"name": "x"}).status_code == 404


@pytest.mark.parametrize(
    "schedule",
    [
        {"days_of_week": [7], "start_time": "11:00", "end_time": "15:00"},
        {"days_of_week": [], "start_time": "11:00", "end_time": "15:00"},
        {"days_of_week": [1], "start_time": "25:00", "end_time": "26:00"},
        {"days_of_week": [1], "start_time": "15:00", "end_time": "11:00"},
    ],
)
def test_invalid_schedule_is_422(client, schedule):
    res = client.post("/api/admin/menus", json={"name": "Errado", "schedules": [schedule]})
    assert res.status_code == 422


def test_menu_created_through_api_drives_active_menus(client, db):
    every_day = {
        "name": "Sempre Aberto",
        "schedules": [{"days_of_week": list(range(7)), "start_time": "00:00", "end_time": "23:59"}],
    }
    menu_id = client.post("/api/admin/menus", json=every_day).json()["id"]
    assert menu_id in [m.id for m in MenuService(db).active_menus(MONDAY_NOON)]
    client.patch(f"/api/admin/menus/{menu_id}", json={"is_active": False})
    db.expire_all()
    assert menu_id not in [m.id for m in MenuService(db).active_menus(MONDAY_NOON)]


def test_menu_categories_created_and_detached_on_delete(client):
    menu_id = client.post("/api/admin/menus", json={"name": "Café"}).json()["id"]
    res = client.post(
        f"/api/admin/menus/{menu_id}/categories",
        json={"name": "Pães", "slug": f"paes-{menu_id}", "sort_order": 1},
    )
    assert res.status_code == 201
    category = res.json()
    assert category["menu_id"] == menu_id
    assert [c["id"] for c in client.get(f"/api/menus/{menu_id}/categories").json()] == [category["id"]]

    res = client.patch(f"/api/admin/categories/{category['id']}", json={"menu_id": None})
    assert res.json()["menu_id"] is None
    client.patch(f"/api/admin/categories/{category['id']}", json={"menu_id": menu_id})

    client.delete(f"/api/admin/menus/{menu_id}")
    cats = {c["id"]: c for c in client.get("/api/categories").json()}
    assert cats[category["id"]]["menu_id"] is None
    res = client.post(f"/api/admin/menus/{menu_id}/categories", json={"name": "X", "slug": "x-gone"})
    assert res.status_code == 404
