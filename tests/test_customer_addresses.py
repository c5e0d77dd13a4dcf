from datetime import datetime, timedelta

import pytest

from app.models import DeliveryAddress
from app.services import geocoding_service

BASE = "/api/v1/customer/addresses"

NEW_ADDRESS = {
    "full_name": "Asha Rao",
    "phone_number": "9876500001",
    "address_line1": "221 Lake View Road",
    "address_line2": "Flat 4B",
    "city": "Hyderabad",
    "state": "Telangana",
    "postal_code": "500001",
    "label": "home",
}


@pytest.fixture()
def geocoded(monkeypatch):
    calls = []

    def fake_geocode(address):
        calls.append(address)
        return {"latitude": 17.4, "longitude": 78.5, "formatted_address": address}

    monkeypatch.setattr(geocoding_service, "geocode_address", fake_geocode)
    return calls


def _defaults(db, user):
    db.expire_all()
    return [a.id for a in db.query(DeliveryAddress).filter(
        DeliveryAddress.user_id == user.id,
        DeliveryAddress.is_default == True  # noqa: E712
    )]


def test_requires_authentication(client):
    response = client.get(BASE)
    assert response.status_code == 401


def test_create_address_geocodes_full_address(client, customer, headers, geocoded):
    response = client.post(BASE, json=NEW_ADDRESS, headers=headers(customer))

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["latitude"] == 17.4
    assert data["longitude"] == 78.5
    assert data["is_default"] is False
    assert geocoded == ["221 Lake View Road, Flat 4B, Hyderabad, Telangana, 500001"]


def test_create_address_without_line2_formats_address(client, customer, headers, geocoded):
    payload = dict(NEW_ADDRESS, address_line2=None)
    client.post(BASE, json=payload, headers=headers(customer))

    assert geocoded == ["221 Lake View Road, Hyderabad, Telangana, 500001"]


def test_create_address_missing_fields_is_400(client, customer, headers):
    payload = dict(NEW_ADDRESS)
    del payload["city"]
    response = client.post(BASE, json=payload, headers=headers(customer))

    assert response.status_code == 400
    assert response.json()["detail"] == "Missing required address fields."


def test_create_address_survives_geocoding_failure(client, customer, headers, monkeypatch):
    monkeypatch.setattr(geocoding_service, "geocode_address", lambda address: None)

    response = client.post(BASE, json=NEW_ADDRESS, headers=headers(customer))

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["latitude"] is None
    assert data["longitude"] is None


def test_create_default_clears_previous_default(client, db, customer, headers, make_address):
    old_default = make_address(customer, is_default=True)

    response = client.post(BASE, json=dict(NEW_ADDRESS, is_default=True), headers=headers(customer))

    new_id = response.json()["data"]["id"]
    assert _defaults(db, customer) == [new_id]
    db.refresh(old_default)
    assert old_default.is_default is False


def test_list_orders_default_first_then_newest(client, customer, headers, make_address):
    now = datetime.utcnow()
    oldest = make_address(customer, created_at=now - timedelta(days=3))
    default = make_address(customer, is_default=True, created_at=now - timedelta(days=2))
    newest = make_address(customer, created_at=now - timedelta(days=1))

    response = client.get(BASE, headers=headers(customer))

    assert response.status_code == 200
    assert [a["id"] for a in response.json()["data"]] == [default.id, newest.id, oldest.id]


def test_list_only_returns_own_addresses(client, customer, other_customer, headers, make_address):
    mine = make_address(customer)
    make_address(other_customer)

    response = client.get(BASE, headers=headers(customer))

    assert [a["id"] for a in response.json()["data"]] == [mine.id]


def test_set_default_moves_the_flag(client, db, customer, headers, make_address):
    first = make_address(customer, is_default=True)
    second = make_address(customer)

    response = client.patch(f"{BASE}/{second.id}/set-default", headers=headers(customer))

    assert response.status_code == 200
    assert response.json()["data"]["is_default"] is True
    assert _defaults(db, customer) == [second.id]
    db.refresh(first)
    assert first.is_default is False


def test_set_default_does_not_touch_other_users(client, db, customer, other_customer, headers, make_address):
    theirs = make_address(other_customer, is_default=True)
    mine = make_address(customer)

    client.patch(f"{BASE}/{mine.id}/set-default", headers=headers(customer))

    assert _defaults(db, other_customer) == [theirs.id]


def test_update_with_default_flag_keeps_single_default(client, db, customer, headers, make_address):
    make_address(customer, is_default=True)
    target = make_address(customer)

    response = client.put(f"{BASE}/{target.id}", json={"is_default": True}, headers=headers(customer))

    assert response.status_code == 200
    assert _defaults(db, customer) == [target.id]


def test_update_omitting_default_flag_keeps_it(client, customer, headers, make_address):
    target = make_address(customer, is_default=True)

    response = client.put(f"{BASE}/{target.id}", json={"label": "work"}, headers=headers(customer))

    data = response.json()["data"]
    assert data["label"] == "work"
    assert data["is_default"] is True


def test_update_non_address_fields_skips_geocoding(client, customer, headers, make_address, geocoded):
    target = make_address(customer)

    response = client.put(f"{BASE}/{target.id}", json={"full_name": "Asha R."}, headers=headers(customer))

    assert response.status_code == 200
    assert geocoded == []
    assert response.json()["data"]["latitude"] == 17.385


def test_update_with_unchanged_address_line_skips_geocoding(client, customer, headers, make_address, geocoded):
    target = make_address(customer)

    client.put(f"{BASE}/{target.id}", json={"city": "Hyderabad"}, headers=headers(customer))

    assert geocoded == []


def test_update_address_line_regeocodes_merged_address(client, customer, headers, make_address, geocoded):
    target = make_address(customer)

    response = client.put(f"{BASE}/{target.id}", json={"postal_code": "500032"}, headers=headers(customer))

    assert geocoded == ["221 Lake View Road, Hyderabad, Telangana, 500032"]
    data = response.json()["data"]
    assert data["postal_code"] == "500032"
    assert (data["latitude"], data["longitude"]) == (17.4, 78.5)


def test_update_survives_geocoding_failure(client, customer, headers, make_address, monkeypatch):
    monkeypatch.setattr(geocoding_service, "geocode_address", lambda address: None)
    target = make_address(customer)

    response = client.put(f"{BASE}/{target.id}", json={"address_line1": "9 Hill Street"}, headers=headers(customer))

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["address_line1"] == "9 Hill Street"
    assert data["latitude"] is None


def test_update_with_empty_body_is_400(client, customer, headers, make_address):
    target = make_address(customer)

    response = client.put(f"{BASE}/{target.id}", json={}, headers=headers(customer))

    assert response.status_code == 400
    assert response.json()["detail"] == "No update data provided."


def test_update_blanking_required_field_is_400(client, customer, headers, make_address):
    target = make_address(customer)

    response = client.put(f"{BASE}/{target.id}", json={"city": "  "}, headers=headers(customer))

    assert response.status_code == 400


def test_delete_default_does_not_promote_another(client, db, customer, headers, make_address):
    default = make_address(customer, is_default=True)
    make_address(customer)
    make_address(customer)

    response = client.delete(f"{BASE}/{default.id}", headers=headers(customer))

    assert response.status_code == 200
    assert response.json()["data"]["id"] == default.id
    assert _defaults(db, customer) == []
    assert db.query(DeliveryAddress).filter(DeliveryAddress.user_id == customer.id).count() == 2


def test_delete_last_address_is_allowed(client, db, customer, headers, make_address):
    only = make_address(customer, is_default=True)

    response = client.delete(f"{BASE}/{only.id}", headers=headers(customer))

    assert response.status_code == 200
    db.expire_all()
    assert db.query(DeliveryAddress).count() == 0


@pytest.mark.parametrize("method,suffix,body", [
    ("put", "", {"label": "work"}),
    ("patch", "/set-default", None),
    ("delete", "", None),
])
def test_other_users_address_is_404(client, db, customer, other_customer, headers, make_address, method, suffix, body):
    theirs = make_address(other_customer, is_default=False)

    kwargs = {"headers": headers(customer)}
    if body is not None:
        kwargs["json"] = body
    response = getattr(client, method)(f"{BASE}/{theirs.id}{suffix}", **kwargs)

    assert response.status_code == 404
    db.refresh(theirs)
    assert theirs.label is None
    assert theirs.is_default is False


def test_unknown_address_is_404(client, customer, headers):
    response = client.patch(f"{BASE}/does-not-exist/set-default", headers=headers(customer))
    assert response.status_code == 404
