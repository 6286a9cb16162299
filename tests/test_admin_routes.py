"""Admin moderation and management endpoints."""

import pytest
from bson import ObjectId

from backend.utils.dates import utc_now


def _listing(db, owner, **fields):
    doc = {
        "name": "Goats",
        "category": "Livestock",
        "subCategory": "Goats & Sheep",
        "regularPrice": 300000,
        "status": "active",
        "isFeatured": False,
        "userRef": owner["_id"],
        "imagePublicIds": ["nguza/goat1"],
        "createdAt": utc_now(),
    }
    doc.update(fields)
    doc["_id"] = db.listings.insert_one(doc).inserted_id
    return doc


def _product(db, owner, **fields):
    doc = {
        "name": "NPK",
        "category": "Agricultural Inputs",
        "subCategory": "Fertilizers",
        "regularPrice": 120000,
        "status": "active",
        "moderationStatus": "pending",
        "userRef": owner["_id"],
        "createdAt": utc_now(),
    }
    doc.update(fields)
    doc["_id"] = db.products.insert_one(doc).inserted_id
    return doc


@pytest.fixture
def admin_headers(admin, auth_headers):
    return auth_headers(admin)


class TestAdminAccess:
    def test_non_admin_rejected(self, client, buyer, auth_headers):
        resp = client.get("/api/admin/stats", headers=auth_headers(buyer))
        assert resp.status_code == 403
        assert resp.get_json()["message"] == "Access denied. Administrative privileges required."

    def test_anonymous_rejected(self, client):
        assert client.get("/api/admin/stats").status_code == 401


class TestStats:
    def test_counts_and_market_value(self, client, db, seller, admin_headers):
        _listing(db, seller)
        _listing(db, seller, regularPrice=200000)
        _listing(db, seller, status="sold")
        stats = client.get("/api/admin/stats", headers=admin_headers).get_json()["stats"]
        assert stats["totalListings"] == 3
        assert stats["activeListings"] == 2
        assert stats["totalMarketValue"] == 500000
        assert stats["totalUsers"] == 2


class TestUserManagement:
    def test_list_users_hides_passwords(self, client, seller, admin_headers):
        users = client.get("/api/admin/users", headers=admin_headers).get_json()["users"]
        assert all("password" not in u for u in users)

    def test_activity(self, client, db, seller, admin_headers):
        _listing(db, seller)
        _product(db, seller)
        data = client.get(f"/api/admin/user/{seller['_id']}/activity", headers=admin_headers).get_json()
        assert data["activity"]["listingsCount"] == 1
        assert data["activity"]["productsCount"] == 1
        assert data["activity"]["ordersCount"] == 0

    def test_update_user(self, client, seller, admin_headers):
        resp = client.put(f"/api/admin/user/{seller['_id']}", json={"phoneNumber": "0700123456"},
                          headers=admin_headers)
        assert resp.get_json()["user"]["phoneNumber"] == "256700123456"

    def test_toggle_ban(self, client, db, seller, admin_headers):
        url = f"/api/admin/user/{seller['_id']}/ban"
        assert client.put(url, headers=admin_headers).get_json()["user"]["isBanned"] is True
        assert client.put(url, headers=admin_headers).get_json()["user"]["isBanned"] is False

    def test_cannot_ban_admin(self, client, admin, admin_headers):
        assert client.put(f"/api/admin/user/{admin['_id']}/ban", headers=admin_headers).status_code == 403

    def test_change_role(self, client, buyer, admin_headers):
        user = client.put(f"/api/admin/user/{buyer['_id']}/role", json={"role": "admin"},
                          headers=admin_headers).get_json()["user"]
        assert user["role"] == "admin"
        assert user["isAdmin"] is True

    def test_invalid_role(self, client, buyer, admin_headers):
        resp = client.put(f"/api/admin/user/{buyer['_id']}/role", json={"role": "owner"}, headers=admin_headers)
        assert resp.status_code == 400

    def test_delete_user_cascades(self, client, db, seller, admin_headers):
        _listing(db, seller)
        _product(db, seller)
        resp = client.delete(f"/api/admin/user/{seller['_id']}", headers=admin_headers)
        assert resp.status_code == 200
        assert db.users.find_one({"_id": seller["_id"]}) is None
        assert db.listings.count_documents({}) == 0
        assert db.products.count_documents({}) == 0

    def test_delete_user_clears_public_cache(self, client, db, seller, admin_headers):
        _listing(db, seller)
        assert client.get("/api/listing").get_json()["total"] == 1
        client.delete(f"/api/admin/user/{seller['_id']}", headers=admin_headers)
        resp = client.get("/api/listing")
        assert resp.headers["X-Cache"] == "MISS"
        assert resp.get_json()["total"] == 0

    def test_cannot_delete_admin(self, client, admin, admin_headers):
        assert client.delete(f"/api/admin/user/{admin['_id']}", headers=admin_headers).status_code == 403


class TestProductModeration:
    def test_list_filters_by_moderation_status(self, client, db, seller, admin_headers):
        _product(db, seller)
        _product(db, seller, moderationStatus="approved")
        data = client.get("/api/admin/products?moderationStatus=pending", headers=admin_headers).get_json()
        assert data["total"] == 1

    def test_approve_makes_product_public(self, client, db, seller, admin, admin_headers):
        product = _product(db, seller)
        assert client.get("/api/products").get_json()["total"] == 0
        resp = client.put(f"/api/admin/products/{product['_id']}/approve", headers=admin_headers)
        assert resp.get_json()["product"]["approvedBy"] == str(admin["_id"])
        assert client.get("/api/products").get_json()["total"] == 1

    def test_reject_with_reason(self, client, db, seller, admin_headers):
        product = _product(db, seller)
        data = client.put(f"/api/admin/products/{product['_id']}/reject", json={"reason": "Blurry photos"},
                          headers=admin_headers).get_json()["product"]
        assert data["moderationStatus"] == "rejected"
        assert data["rejectionReason"] == "Blurry photos"

    def test_toggle_feature(self, client, db, seller, admin_headers):
        product = _product(db, seller)
        url = f"/api/admin/products/{product['_id']}/feature"
        first = client.put(url, json={"days": 3}, headers=admin_headers).get_json()["product"]
        assert first["isFeatured"] is True
        assert first["featuredUntil"]
        second = client.put(url, headers=admin_headers).get_json()["product"]
        assert second["isFeatured"] is False
        assert second["featuredUntil"] is None

    def test_delete(self, client, db, seller, admin_headers):
        product = _product(db, seller)
        assert client.delete(f"/api/admin/products/{product['_id']}", headers=admin_headers).status_code == 200
        assert db.products.count_documents({}) == 0


class TestListingModeration:
    def test_list_any_status(self, client, db, seller, admin_headers):
        _listing(db, seller)
        _listing(db, seller, status="suspended")
        data = client.get("/api/admin/listings?status=all", headers=admin_headers).get_json()
        assert data["total"] == 2

    def test_reject_suspends(self, client, db, seller, admin_headers):
        listing = _listing(db, seller)
        data = client.put(f"/api/admin/listings/{listing['_id']}/reject", json={},
                          headers=admin_headers).get_json()["listing"]
        assert data["status"] == "suspended"
        assert data["rejectionReason"] == "Does not meet platform guidelines"

    def test_approve(self, client, db, seller, admin_headers):
        listing = _listing(db, seller, status="suspended")
        data = client.put(f"/api/admin/listings/{listing['_id']}/approve", headers=admin_headers).get_json()
        assert data["listing"]["status"] == "active"

    def test_bulk_approve(self, client, db, seller, admin_headers):
        ids = [str(_listing(db, seller, status="suspended")["_id"]) for _ in range(3)]
        resp = client.post("/api/admin/listings/bulk-approve", json={"listingIds": ids}, headers=admin_headers)
        assert resp.get_json()["modifiedCount"] == 3
        assert db.listings.count_documents({"status": "active"}) == 3

    def test_bulk_approve_needs_ids(self, client, admin_headers):
        resp = client.post("/api/admin/listings/bulk-approve", json={"listingIds": []}, headers=admin_headers)
        assert resp.status_code == 400

    def test_toggle_feature(self, client, db, seller, admin_headers):
        listing = _listing(db, seller)
        data = client.put(f"/api/admin/listings/{listing['_id']}/feature", json={"days": 7},
                          headers=admin_headers).get_json()
        assert data["listing"]["isFeatured"] is True

    def test_delete(self, client, db, seller, admin_headers):
        listing = _listing(db, seller)
        assert client.delete(f"/api/admin/listings/{listing['_id']}", headers=admin_headers).status_code == 200
        assert db.listings.find_one({"_id": listing["_id"]}) is None

    def test_missing_listing(self, client, admin_headers):
        resp = client.put(f"/api/admin/listings/{ObjectId()}/approve", headers=admin_headers)
        assert resp.status_code == 404


class TestOrderManagement:
    @pytest.fixture
    def order(self, db, buyer):
        doc = {
            "user": buyer["_id"],
            "orderItems": [],
            "status": "Pending",
            "statusHistory": [],
            "createdAt": utc_now(),
        }
        doc["_id"] = db.orders.insert_one(doc).inserted_id
        return doc

    def test_list_orders_with_user(self, client, order, admin_headers):
        orders = client.get("/api/admin/orders", headers=admin_headers).get_json()["orders"]
        assert orders[0]["user"]["username"] == "buyer"

    def test_status_update_with_notes(self, client, order, admin_headers):
        data = client.put(f"/api/admin/order/{order['_id']}/status",
                          json={"status": "Processing", "adminNotes": "Called buyer"},
                          headers=admin_headers).get_json()["order"]
        assert data["status"] == "Processing"
        assert data["adminNotes"] == "Called buyer"

    def test_cancel(self, client, order, admin_headers):
        data = client.put(f"/api/admin/order/{order['_id']}/cancel", json={},
                          headers=admin_headers).get_json()["order"]
        assert data["status"] == "Cancelled"
        assert data["cancellationReason"] == "Cancelled by admin"
