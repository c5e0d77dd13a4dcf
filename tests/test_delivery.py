import pytest

from app.models import ApprovalStatus, DeliveryPerson, Order, UserRole


@pytest.fixture()
def assigned_order(client, customer, admin, headers, make_address, seller, make_product, delivery_person):
    product = make_product(seller, "Tomatoes", "40.00", stock=10)
    address = make_address(customer)
    order = client.post("/api/v1/orders", json={
        "items": [{"product_id": product.id, "quantity": 2}],
        "delivery_address_id": address.id,
    }, headers=headers(customer)).json()["data"]
    client.patch(f"/admin/orders/{order['id']}/assign-delivery",
                 json={"delivery_person_id": delivery_person.id}, headers=headers(admin))
    return order


def _advance(client, headers, person, order_id, status, otp=None):
    body = {"status": status}
    if otp is not None:
        body["otp"] = otp
    return client.patch(f"/api/v1/delivery/orders/{order_id}/status", json=body, headers=headers(person.user))


def test_register_as_delivery_partner(client, customer, headers):
    body = {"name": "Asha Rao", "phone": "9000000005", "vehicle_type": "bike"}

    response = client.post("/api/v1/delivery/register", json=body, headers=headers(customer))

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["approval_status"] == "pending"
    assert data["is_available"] is False

    again = client.post("/api/v1/delivery/register", json=body, headers=headers(customer))
    assert again.status_code == 409


def test_seller_cannot_register_for_delivery(client, seller, headers):
    response = client.post("/api/v1/delivery/register", json={"name": "Shop Owner", "phone": "9000000006"},
                           headers=headers(seller.user))
    assert response.status_code == 400


def test_unapproved_partner_is_forbidden(client, customer, headers):
    client.post("/api/v1/delivery/register", json={"name": "Asha Rao", "phone": "9000000005"},
                headers=headers(customer))

    response = client.get("/api/v1/delivery/orders", headers=headers(customer))

    assert response.status_code == 403


def test_toggle_availability(client, headers, delivery_person):
    response = client.post("/api/v1/delivery/availability", json={"is_available": False},
                           headers=headers(delivery_person.user))

    assert response.json()["data"]["is_available"] is False
    assert response.json()["message"] == "You are now offline"


def test_assigned_orders_listed(client, headers, delivery_person, assigned_order):
    response = client.get("/api/v1/delivery/orders", headers=headers(delivery_person.user))

    assert [o["id"] for o in response.json()["data"]] == [assigned_order["id"]]


def test_full_delivery_flow_with_otp(client, db, customer, headers, delivery_person, assigned_order):
    order_id = assigned_order["id"]

    assert _advance(client, headers, delivery_person, order_id, "picked_up").status_code == 200
    out = _advance(client, headers, delivery_person, order_id, "out_for_delivery")
    assert out.json()["data"]["status"] == "out_for_delivery"

    tracking = client.get(f"/api/v1/orders/{order_id}/tracking", headers=headers(customer)).json()["data"]
    otp = tracking["delivery_otp"]
    assert len(otp) == 4 and otp.isdigit()

    wrong = _advance(client, headers, delivery_person, order_id, "delivered", otp="0000" if otp != "0000" else "1111")
    assert wrong.status_code == 400
    assert wrong.json()["detail"] == "Invalid delivery OTP"

    done = _advance(client, headers, delivery_person, order_id, "delivered", otp=otp)
    assert done.status_code == 200
    data = done.json()["data"]
    assert data["status"] == "delivered"
    assert data["payment_status"] == "paid"
    assert data["delivered_at"] is not None

    db.expire_all()
    statuses = [e.status for e in db.get(Order, order_id).tracking_events]
    assert statuses == ["pending", "assigned", "picked_up", "out_for_delivery", "delivered"]


def test_otp_hidden_from_partner_view(client, headers, delivery_person, assigned_order):
    order_id = assigned_order["id"]
    _advance(client, headers, delivery_person, order_id, "picked_up")
    _advance(client, headers, delivery_person, order_id, "out_for_delivery")

    tracking = client.get(f"/api/v1/orders/{order_id}/tracking", headers=headers(delivery_person.user))

    assert tracking.status_code == 200
    assert "delivery_otp" not in tracking.json()["data"]


@pytest.mark.parametrize("status", ["out_for_delivery", "delivered", "assigned", "lost"])
def test_delivery_steps_cannot_be_skipped(client, headers, delivery_person, assigned_order, status):
    response = _advance(client, headers, delivery_person, assigned_order["id"], status)
    assert response.status_code == 400


def test_other_partner_cannot_update_order(client, db, headers, make_user, assigned_order):
    user = make_user(UserRole.DELIVERY_BOY, first_name="Other")
    other = DeliveryPerson(user_id=user.id, name="Other", phone="9000000009",
                           approval_status=ApprovalStatus.APPROVED.value, is_available=True)
    db.add(other)
    db.commit()

    response = _advance(client, headers, other, assigned_order["id"], "picked_up")

    assert response.status_code == 404


def test_location_update_reports_active_orders(client, db, customer, headers, delivery_person, assigned_order):
    response = client.patch("/api/v1/delivery/location", json={"latitude": 17.40, "longitude": 78.48},
                            headers=headers(delivery_person.user))

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["active_orders"] == [assigned_order["id"]]
    assert data["last_location_update"] is not None

    tracking = client.get(f"/api/v1/orders/{assigned_order['id']}/tracking", headers=headers(customer)).json()["data"]
    assert tracking["delivery_person"]["latitude"] == 17.40
    route = tracking["route"]
    assert route["distance_km"] > 0
    assert route["eta_minutes"] >= 1


def test_location_update_validates_coordinates(client, headers, delivery_person):
    response = client.patch("/api/v1/delivery/location", json={"latitude": 123, "longitude": 78.48},
                            headers=headers(delivery_person.user))
    assert response.status_code == 422
