"""Cart and wishlist endpoints (always per-user, never cached)."""

import pytest
from bson import ObjectId

from backend.utils.dates import utc_now


@pytest.fixture
def product(db, seller):
    doc = {
        "name": "Hoe",
        "category": "Equipment & Tools",
        "subCategory": "Hand Tools",
        "regularPrice": 20000,
        "discountedPrice": 15000,
        "offer": True,
        "imageUrls": ["https://img.example.com/hoe.jpg"],
        "variants": [{"name": "Long handle", "price": 25000, "sku": "HOE-L", "stock": 3}],
        "status": "active",
        "moderationStatus": "approved",
        "userRef": seller["_id"],
        "createdAt": utc_now(),
    }
    doc["_id"] = db.products.insert_one(doc).inserted_id
    return doc


class TestCart:
    def test_empty_cart(self, client, buyer, auth_headers):
        resp = client.get("/api/cart", headers=auth_headers(buyer))
        assert resp.status_code == 200
        assert resp.get_json()["cartItems"] == []
        assert "X-Cache" not in resp.headers

    def test_add_uses_product_price(self, client, buyer, product, auth_headers):
        resp = client.post("/api/cart", json={"product": str(product["_id"]), "quantity": 2, "price": 1},
                           headers=auth_headers(buyer))
        assert resp.status_code == 201
        item = resp.get_json()["cartItems"][0]
        assert item["price"] == 15000
        assert item["quantity"] == 2
        assert item["name"] == "Hoe"

    def test_same_line_increments(self, client, buyer, product, auth_headers):
        body = {"product": str(product["_id"]), "quantity": 1}
        client.post("/api/cart", json=body, headers=auth_headers(buyer))
        resp = client.post("/api/cart", json=body, headers=auth_headers(buyer))
        assert resp.status_code == 200
        items = resp.get_json()["cartItems"]
        assert len(items) == 1
        assert items[0]["quantity"] == 2

    def test_variant_is_its_own_line(self, client, buyer, product, auth_headers):
        pid = str(product["_id"])
        client.post("/api/cart", json={"product": pid}, headers=auth_headers(buyer))
        resp = client.post("/api/cart", json={"product": pid, "variant": {"sku": "HOE-L"}},
                           headers=auth_headers(buyer))
        items = resp.get_json()["cartItems"]
        assert len(items) == 2
        assert items[1]["price"] == 25000
        assert items[1]["variant"] == {"name": "Long handle", "sku": "HOE-L"}

    def test_unknown_variant(self, client, buyer, product, auth_headers):
        resp = client.post("/api/cart", json={"product": str(product["_id"]), "variant": {"sku": "NOPE"}},
                           headers=auth_headers(buyer))
        assert resp.status_code == 400

    def test_remove_by_sku(self, client, buyer, product, auth_headers):
        pid = str(product["_id"])
        client.post("/api/cart", json={"product": pid}, headers=auth_headers(buyer))
        client.post("/api/cart", json={"product": pid, "variant": {"sku": "HOE-L"}}, headers=auth_headers(buyer))
        resp = client.delete(f"/api/cart/{pid}?sku=HOE-L", headers=auth_headers(buyer))
        items = resp.get_json()["cartItems"]
        assert len(items) == 1
        assert items[0]["variant"] is None

    def test_clear(self, client, buyer, product, auth_headers):
        client.post("/api/cart", json={"product": str(product["_id"])}, headers=auth_headers(buyer))
        assert client.delete("/api/cart", headers=auth_headers(buyer)).status_code == 200
        assert client.get("/api/cart", headers=auth_headers(buyer)).get_json()["cartItems"] == []

    def test_clear_without_cart(self, client, buyer, auth_headers):
        assert client.delete("/api/cart", headers=auth_headers(buyer)).status_code == 404

    def test_missing_product(self, client, buyer, auth_headers):
        resp = client.post("/api/cart", json={"product": str(ObjectId())}, headers=auth_headers(buyer))
        assert resp.status_code == 404

    def test_carts_are_private(self, client, buyer, seller, product, auth_headers):
        client.post("/api/cart", json={"product": str(product["_id"])}, headers=auth_headers(buyer))
        assert client.get("/api/cart", headers=auth_headers(seller)).get_json()["cartItems"] == []


class TestWishlist:
    def test_add_list_remove(self, client, buyer, product, auth_headers):
        pid = str(product["_id"])
        assert client.post(f"/api/wishlist/{pid}", headers=auth_headers(buyer)).status_code == 200
        client.post(f"/api/wishlist/{pid}", headers=auth_headers(buyer))
        items = client.get("/api/wishlist", headers=auth_headers(buyer)).get_json()
        assert [p["_id"] for p in items] == [pid]

        client.delete(f"/api/wishlist/{pid}", headers=auth_headers(buyer))
        assert client.get("/api/wishlist", headers=auth_headers(buyer)).get_json() == []

    def test_unknown_product(self, client, buyer, auth_headers):
        assert client.post(f"/api/wishlist/{ObjectId()}", headers=auth_headers(buyer)).status_code == 404

    def test_requires_token(self, client):
        assert client.get("/api/wishlist").status_code == 401
