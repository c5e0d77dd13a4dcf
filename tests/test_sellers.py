import pytest

from app.models import Order, OrderTrackingEvent, Product


@pytest.fixture()
def placed_order(client, customer, headers, make_address, make_seller, make_product):
    mart = make_seller("Fresh Mart")
    bakery = make_seller("Daily Bakery")
    tomatoes = make_product(mart, "Tomatoes", "40.00", stock=10)
    bread = make_product(bakery, "Bread", "45.00", stock=10)
    address = make_address(customer)
    order = client.post("/api/v1/orders", json={
        "items": [{"product_id": tomatoes.id, "quantity": 2}, {"product_id": bread.id, "quantity": 1}],
        "delivery_address_id": address.id,
    }, headers=headers(customer)).json()["data"]
    subs = {s["seller_id"]: s["id"] for s in order["sub_orders"]}
    return {"order": order, "mart": mart, "bakery": bakery, "subs": subs, "tomatoes": tomatoes}


def _set_status(client, headers, seller, sub_id, status):
    return client.patch(f"/api/v1/sellers/sub-orders/{sub_id}/status", json={"status": status},
                        headers=headers(seller.user))


def test_apply_creates_pending_profile(client, db, customer, headers):
    body = {
        "business_name": "Green Grocers", "business_address": "14 Station Road",
        "city": "Hyderabad", "pincode": "500003",
    }
    response = client.post("/api/v1/sellers/apply", json=body, headers=headers(customer))

    assert response.status_code == 201
    assert response.json()["data"]["approval_status"] == "pending"

    again = client.post("/api/v1/sellers/apply", json=body, headers=headers(customer))
    assert again.status_code == 409


def test_pending_seller_cannot_manage_products(client, make_seller, headers):
    pending = make_seller("Not Yet", approved=False)

    response = client.get("/api/v1/sellers/products", headers=headers(pending.user))

    assert response.status_code == 403


def test_seller_product_lifecycle(client, db, seller, headers):
    seller_headers = headers(seller.user)
    created = client.post("/api/v1/sellers/products", json={
        "name": "Basmati Rice", "price": "120.50", "unit": "kg", "stock": 20,
        "min_order_qty": 1, "max_order_qty": 10,
    }, headers=seller_headers)

    assert created.status_code == 201
    product = created.json()["data"]
    assert product["approval_status"] == "pending"

    updated = client.put(f"/api/v1/sellers/products/{product['id']}", json={"stock": 5}, headers=seller_headers)
    assert updated.json()["data"]["stock"] == 5

    listing = client.get("/api/v1/sellers/products", headers=seller_headers).json()["data"]
    assert [p["id"] for p in listing["items"]] == [product["id"]]

    deleted = client.delete(f"/api/v1/sellers/products/{product['id']}", headers=seller_headers)
    assert deleted.status_code == 200
    db.expire_all()
    assert db.get(Product, product["id"]) is None


def test_product_quantity_limits_are_checked(client, seller, headers):
    response = client.post("/api/v1/sellers/products", json={
        "name": "Eggs", "price": "6", "min_order_qty": 6, "max_order_qty": 2,
    }, headers=headers(seller.user))

    assert response.status_code == 400


def test_editing_details_sends_product_back_for_approval(client, seller, make_product, headers):
    product = make_product(seller, "Milk")

    response = client.put(f"/api/v1/sellers/products/{product.id}", json={"price": "55.00"},
                          headers=headers(seller.user))

    assert response.json()["data"]["approval_status"] == "pending"


def test_seller_cannot_touch_other_sellers_products(client, make_seller, make_product, headers):
    owner = make_seller("Owner")
    intruder = make_seller("Intruder")
    product = make_product(owner)

    response = client.put(f"/api/v1/sellers/products/{product.id}", json={"stock": 0},
                          headers=headers(intruder.user))

    assert response.status_code == 404


def test_seller_lists_only_own_sub_orders(client, headers, placed_order):
    response = client.get("/api/v1/sellers/orders", headers=headers(placed_order["mart"].user))

    items = response.json()["data"]["items"]
    assert [s["id"] for s in items] == [placed_order["subs"][placed_order["mart"].id]]
    assert items[0]["items"][0]["product_name"] == "Tomatoes"


def test_valid_transition_records_tracking_event(client, db, headers, placed_order):
    mart = placed_order["mart"]
    sub_id = placed_order["subs"][mart.id]

    response = _set_status(client, headers, mart, sub_id, "accepted")

    assert response.status_code == 200
    assert response.json()["data"]["status"] == "accepted"
    events = db.query(OrderTrackingEvent).filter(OrderTrackingEvent.sub_order_id == sub_id).all()
    assert [e.status for e in events] == ["accepted"]
    db.expire_all()
    assert db.get(Order, placed_order["order"]["id"]).status == "confirmed"


@pytest.mark.parametrize("path,target", [
    ([], "preparing"),
    ([], "ready_for_pickup"),
    (["accepted"], "ready_for_pickup"),
    (["accepted", "preparing"], "accepted"),
    (["rejected"], "accepted"),
    ([], "delivered"),
])
def test_invalid_transitions_are_400(client, headers, placed_order, path, target):
    mart = placed_order["mart"]
    sub_id = placed_order["subs"][mart.id]
    for status in path:
        assert _set_status(client, headers, mart, sub_id, status).status_code == 200

    response = _set_status(client, headers, mart, sub_id, target)

    assert response.status_code == 400


def test_same_status_is_a_no_op(client, db, headers, placed_order):
    mart = placed_order["mart"]
    sub_id = placed_order["subs"][mart.id]

    response = _set_status(client, headers, mart, sub_id, "pending")

    assert response.status_code == 200
    assert db.query(OrderTrackingEvent).filter(OrderTrackingEvent.sub_order_id == sub_id).count() == 0


def test_other_seller_cannot_update_sub_order(client, headers, placed_order):
    bakery = placed_order["bakery"]
    mart_sub = placed_order["subs"][placed_order["mart"].id]

    response = _set_status(client, headers, bakery, mart_sub, "accepted")

    assert response.status_code == 404


def test_master_order_moves_to_processing_when_all_ready(client, db, headers, placed_order):
    order_id = placed_order["order"]["id"]
    for seller in (placed_order["mart"], placed_order["bakery"]):
        for status in ("accepted", "preparing", "ready_for_pickup"):
            _set_status(client, headers, seller, placed_order["subs"][seller.id], status)
        db.expire_all()
        if seller is placed_order["mart"]:
            assert db.get(Order, order_id).status == "confirmed"

    assert db.get(Order, order_id).status == "processing"


def test_rejected_sub_orders_do_not_block_rollup(client, db, headers, placed_order):
    order_id = placed_order["order"]["id"]
    mart, bakery = placed_order["mart"], placed_order["bakery"]
    _set_status(client, headers, bakery, placed_order["subs"][bakery.id], "rejected")
    for status in ("accepted", "preparing", "ready_for_pickup"):
        _set_status(client, headers, mart, placed_order["subs"][mart.id], status)

    db.expire_all()
    assert db.get(Order, order_id).status == "processing"


def test_all_rejected_cancels_order_and_restores_stock(client, db, headers, placed_order):
    for seller in (placed_order["mart"], placed_order["bakery"]):
        _set_status(client, headers, seller, placed_order["subs"][seller.id], "rejected")

    db.expire_all()
    assert db.get(Order, placed_order["order"]["id"]).status == "cancelled"
    assert db.get(Product, placed_order["tomatoes"].id).stock == 10


def test_existing_seller_cannot_apply_again(client, seller, headers):
    response = client.post("/api/v1/sellers/apply", json={
        "business_name": "Second Shop", "business_address": "1 Main Street",
        "city": "Hyderabad", "pincode": "500001",
    }, headers=headers(seller.user))

    assert response.status_code == 409
