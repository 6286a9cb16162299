"""Products: moderation-gated feed, reviews, owner writes."""

from bson import ObjectId

from backend.mongo import mongo


def _product(client, user, auth_headers, body, approve=True):
    resp = client.post("/api/products", json=body, headers=auth_headers(user))
    assert resp.status_code == 201, resp.get_json()
    product = resp.get_json()
    if approve:
        client.application.extensions["response_cache"].clear()
        mongo.db.products.update_one({"_id": ObjectId(product["_id"])},
                                     {"$set": {"moderationStatus": "approved"}})
    return product


class TestProductFeed:
    def test_new_products_wait_for_moderation(self, client, seller, auth_headers, listing_body):
        product = _product(client, seller, auth_headers, listing_body(), approve=False)
        assert product["moderationStatus"] == "pending"
        assert product["rating"] == 0
        data = client.get("/api/products").get_json()
        assert data["total"] == 0
        assert data["pages"] == 0

    def test_approved_products_listed(self, client, seller, auth_headers, listing_body):
        for price in (10000, 50000, 90000):
            _product(client, seller, auth_headers, listing_body(regularPrice=price))
        data = client.get("/api/products?sort=price_asc&pageSize=2").get_json()
        assert [p["regularPrice"] for p in data["products"]] == [10000, 50000]
        assert data["page"] == 1
        assert data["pages"] == 2
        assert data["total"] == 3

    def test_filters_shared_with_listings(self, client, seller, auth_headers, listing_body):
        _product(client, seller, auth_headers, listing_body(regularPrice=10000))
        _product(client, seller, auth_headers, listing_body(regularPrice=50000))
        data = client.get("/api/products?minPrice=20000").get_json()
        assert [p["regularPrice"] for p in data["products"]] == [50000]

    def test_my_products_include_pending(self, client, seller, auth_headers, listing_body):
        _product(client, seller, auth_headers, listing_body(), approve=False)
        resp = client.get("/api/products/myproducts", headers=auth_headers(seller))
        assert len(resp.get_json()) == 1

    def test_top_and_suggestions(self, client, seller, auth_headers, listing_body):
        _product(client, seller, auth_headers, listing_body(brand="Longe"))
        assert len(client.get("/api/products/top").get_json()) == 1
        assert client.get("/api/products/suggestions?query=longe").get_json()[0]["name"] == "Fresh Maize"


class TestProductDetail:
    def test_views_and_reviews_attached(self, client, seller, auth_headers, listing_body):
        product = _product(client, seller, auth_headers, listing_body())
        client.get(f"/api/products/{product['_id']}")
        data = client.get(f"/api/products/{product['_id']}").get_json()
        assert data["views"] == 2
        assert data["reviews"] == []

    def test_variants_require_entries(self, client, seller, auth_headers, listing_body):
        resp = client.post("/api/products", json=listing_body(hasVariants=True),
                           headers=auth_headers(seller))
        assert resp.status_code == 400


class TestReviews:
    def test_review_updates_rating(self, client, seller, buyer, make_user, auth_headers, listing_body):
        product = _product(client, seller, auth_headers, listing_body())
        other = make_user("other", "256772000333")
        url = f"/api/products/{product['_id']}/reviews"
        assert client.post(url, json={"rating": 5, "comment": "Great"}, headers=auth_headers(buyer)).status_code == 201
        assert client.post(url, json={"rating": 2}, headers=auth_headers(other)).status_code == 201
        data = client.get(f"/api/products/{product['_id']}").get_json()
        assert data["numReviews"] == 2
        assert data["rating"] == 3.5

    def test_one_review_per_user(self, client, seller, buyer, auth_headers, listing_body):
        product = _product(client, seller, auth_headers, listing_body())
        url = f"/api/products/{product['_id']}/reviews"
        client.post(url, json={"rating": 4}, headers=auth_headers(buyer))
        resp = client.post(url, json={"rating": 1}, headers=auth_headers(buyer))
        assert resp.status_code == 400
        assert resp.get_json()["message"] == "Product already reviewed"

    def test_cannot_review_own_product(self, client, seller, auth_headers, listing_body):
        product = _product(client, seller, auth_headers, listing_body())
        resp = client.post(f"/api/products/{product['_id']}/reviews", json={"rating": 5},
                           headers=auth_headers(seller))
        assert resp.status_code == 400

    def test_rating_range(self, client, seller, buyer, auth_headers, listing_body):
        product = _product(client, seller, auth_headers, listing_body())
        resp = client.post(f"/api/products/{product['_id']}/reviews", json={"rating": 6},
                           headers=auth_headers(buyer))
        assert resp.status_code == 400


class TestProductWrites:
    def test_rejected_product_returns_to_pending_on_edit(self, client, db, seller, auth_headers, listing_body):
        product = _product(client, seller, auth_headers, listing_body())
        db.products.update_one({"_id": ObjectId(product["_id"])}, {"$set": {"moderationStatus": "rejected"}})
        resp = client.put(f"/api/products/{product['_id']}", json={"description": "Sorted and dried"},
                          headers=auth_headers(seller))
        assert resp.status_code == 200
        assert resp.get_json()["moderationStatus"] == "pending"

    def test_delete_removes_reviews(self, client, db, seller, buyer, auth_headers, listing_body):
        product = _product(client, seller, auth_headers, listing_body())
        client.post(f"/api/products/{product['_id']}/reviews", json={"rating": 4}, headers=auth_headers(buyer))
        resp = client.delete(f"/api/products/{product['_id']}", headers=auth_headers(seller))
        assert resp.status_code == 200
        assert db.reviews.count_documents({}) == 0

    def test_other_user_cannot_delete(self, client, seller, buyer, auth_headers, listing_body):
        product = _product(client, seller, auth_headers, listing_body())
        resp = client.delete(f"/api/products/{product['_id']}", headers=auth_headers(buyer))
        assert resp.status_code == 403

    def test_promote(self, client, seller, auth_headers, listing_body):
        product = _product(client, seller, auth_headers, listing_body())
        resp = client.post(f"/api/products/{product['_id']}/promote", json={"days": 2},
                           headers=auth_headers(seller))
        assert resp.get_json()["product"]["isFeatured"] is True
