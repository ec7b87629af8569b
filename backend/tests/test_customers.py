ADDRESS = {
    "street": "Rua A",
    "number": "10",
    "neighborhood": "Centro",
    "city": "Campinas",
    "state": "SP",
}


def _new_customer(client):
    res = client.post("/api/customers", json={"name": "Ana", "phone": "1190000000"})
    assert res.status_code == 200
    return res.json()["id"]


def _defaults(client, cid):
    addrs = client.get(f"/api/customers/{cid}").json()["addresses"]
    return [a["id"] for a in addrs if a["is_default"]], addrs


def test_first_address_becomes_default(client):
    cid = _new_customer(client)
    res = client.post(f"/api/customers/{cid}/addresses", json=ADDRESS)
    assert res.status_code == 200
    assert res.json()["is_default"] is True


def test_new_default_replaces_old(client):
    cid = _new_customer(client)
    first = client.post(f"/api/customers/{cid}/addresses", json=ADDRESS).json()["id"]
    second = client.post(
        f"/api/customers/{cid}/addresses", json={**ADDRESS, "label": "Trabalho", "is_default": True}
    ).json()["id"]
    defaults, _ = _defaults(client, cid)
    assert defaults == [second]
    third = client.post(f"/api/customers/{cid}/addresses", json={**ADDRESS, "label": "Mãe"}).json()["id"]
    defaults, _ = _defaults(client, cid)
    assert defaults == [second]
    assert first != third


def test_set_default(client):
    cid = _new_customer(client)
    first = client.post(f"/api/customers/{cid}/addresses", json=ADDRESS).json()["id"]
    second = client.post(f"/api/customers/{cid}/addresses", json=ADDRESS).json()["id"]
    res = client.post(f"/api/customers/{cid}/addresses/{second}/default")
    assert res.status_code == 200
    assert [a["id"] for a in res.json()["addresses"] if a["is_default"]] == [second]
    assert first != second


def test_removing_default_promotes_another(client):
    cid = _new_customer(client)
    first = client.post(f"/api/customers/{cid}/addresses", json=ADDRESS).json()["id"]
    second = client.post(f"/api/customers/{cid}/addresses", json=ADDRESS).json()["id"]
    res = client.delete(f"/api/customers/{cid}/addresses/{first}")
    assert res.status_code == 200
    addrs = res.json()["addresses"]
    assert [a["id"] for a in addrs] == [second]
    assert addrs[0]["is_default"] is True


def test_removing_last_address_leaves_none(client):
    cid = _new_customer(client)
    only = client.post(f"/api/customers/{cid}/addresses", json=ADDRESS).json()["id"]
    assert client.delete(f"/api/customers/{cid}/addresses/{only}").json()["addresses"] == []


def test_update_address_keeps_default_flag(client):
    cid = _new_customer(client)
    aid = client.post(f"/api/customers/{cid}/addresses", json=ADDRESS).json()["id"]
    res = client.patch(f"/api/customers/{cid}/addresses/{aid}", json={"street": "Rua B", "is_default": False})
    assert res.status_code == 200
    assert res.json()["street"] == "Rua B"
    assert res.json()["is_default"] is True


def test_missing_customer_and_address(client):
    assert client.get("/api/customers/999999").status_code == 404
    cid = _new_customer(client)
    assert client.delete(f"/api/customers/{cid}/addresses/999999").status_code == 404
    assert client.post(f"/api/customers/{cid}/addresses/999999/default").status_code == 404


def test_update_customer_and_admin_list(client):
    cid = _new_customer(client)
    res = client.patch(f"/api/customers/{cid}", json={"email": "ana@example.com"})
    assert res.json()["email"] == "ana@example.com"
    listed = client.get("/api/admin/customers").json()
    assert cid in [c["id"] for c in listed]


def test_null_on_required_customer_fields_is_422(client):
    cid = _new_customer(client)
    assert client.patch(f"/api/customers/{cid}", json={"name": None}).status_code == 422
    # nullable field may be cleared
    res = client.patch(f"/api/customers/{cid}", json={"email": None})
    assert res.status_code == 200
    assert res.json()["email"] is None
    assert res.json()["name"] == "Ana"


def test_null_on_required_address_fields_is_422(client):
    cid = _new_customer(client)
    aid = client.post(f"/api/customers/{cid}/addresses", json={**ADDRESS, "complement": "ap 4"}).json()["id"]
    res = client.patch(f"/api/customers/{cid}/addresses/{aid}", json={"street": None})
    assert res.status_code == 422
    res = client.patch(f"/api/customers/{cid}/addresses/{aid}", json={"complement": None})
    assert res.status_code == 200
    assert res.json()["complement"] is None
    assert res.json()["street"] == "Rua A"
