def test_public_listing_hides_unapproved(client, seller, make_seller, make_product):
    visible = make_product(seller, "Tomatoes")
    make_product(seller, "Mangoes", approval_status="pending")
    make_product(seller, "Onions", is_active=False)
    make_product(make_seller("Pending Shop", approved=False), "Bread")

    response = client.get("/api/v1/products")

    assert response.status_code == 200
    data = response.json()["data"]
    assert [p["id"] for p in data["items"]] == [visible.id]
    assert data["pagination"]["totalItems"] == 1


def test_public_listing_filters(client, seller, make_seller, make_product):
    make_product(seller, "Basmati Rice", category="grains")
    make_product(seller, "Tomatoes", category="vegetables")
    other = make_seller("Daily Bakery")
    bread = make_product(other, "Brown Bread", category="bakery")

    by_search = client.get("/api/v1/products?search=rice").json()["data"]["items"]
    by_category = client.get("/api/v1/products?category=vegetables").json()["data"]["items"]
    by_seller = client.get(f"/api/v1/products?seller_id={other.id}").json()["data"]["items"]

    assert [p["name"] for p in by_search] == ["Basmati Rice"]
    assert [p["name"] for p in by_category] == ["Tomatoes"]
    assert [p["id"] for p in by_seller] == [bread.id]


def test_unknown_product_is_404(client):
    assert client.get("/api/v1/products/missing").status_code == 404
