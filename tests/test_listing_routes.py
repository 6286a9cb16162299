"""Listing CRUD, the filtered feed, view counting and cache behaviour over HTTP."""

from datetime import timedelta

import mongomock
from bson import ObjectId
from pymongo.errors import PyMongoError

from backend.security import issue_token
from backend.utils.dates import utc_now


def _create(client, user, auth_headers, body):
    resp = client.post("/api/listing/create", json=body, headers=auth_headers(user))
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()


# ── Create / validation ──────────────────────────────────────────────────

class TestCreateListing:
    def test_create(self, client, db, seller, auth_headers, listing_body):
        listing = _create(client, seller, auth_headers, listing_body())
        assert listing["userRef"] == str(seller["_id"])
        assert listing["views"] == 0
        assert listing["status"] == "active"
        assert listing["sellerEmail"] == "seller@example.com"
        assert listing["contactPhone"] == "256772000001"
        assert listing["slug"] == "maize-masaka"
        assert db.listings.count_documents({}) == 1

    def test_image_required(self, client, seller, auth_headers, listing_body):
        resp = client.post("/api/listing/create", json=listing_body(imageUrls=[]),
                           headers=auth_headers(seller))
        assert resp.status_code == 400
        assert resp.get_json()["message"] == "At least one image is required."

    def test_discount_must_be_below_regular_price(self, client, seller, auth_headers, listing_body):
        resp = client.post(
            "/api/listing/create",
            json=listing_body(offer=True, regularPrice=50000, discountedPrice=60000),
            headers=auth_headers(seller),
        )
        assert resp.status_code == 400
        errors = resp.get_json()["errors"]
        assert any("Discounted price must be lower than regular price" in e for e in errors)

    def test_valid_offer(self, client, seller, auth_headers, listing_body):
        listing = _create(client, seller, auth_headers,
                          listing_body(offer=True, regularPrice=50000, discountedPrice=45000))
        assert listing["discountedPrice"] == 45000

    def test_subcategory_must_match_category(self, client, seller, auth_headers, listing_body):
        resp = client.post("/api/listing/create", json=listing_body(subCategory="Cattle"),
                           headers=auth_headers(seller))
        assert resp.status_code == 400

    def test_details_checked_against_subcategory(self, client, seller, auth_headers, listing_body):
        body = listing_body()
        body["details"]["breed"] = "Ankole"
        resp = client.post("/api/listing/create", json=body, headers=auth_headers(seller))
        assert resp.status_code == 400
        assert resp.get_json()["message"] == "Invalid details for this category"

    def test_requires_token(self, client, listing_body):
        assert client.post("/api/listing/create", json=listing_body()).status_code == 401

    def test_banned_user(self, client, make_user, auth_headers, listing_body):
        banned = make_user("banned", "256772000555", banned=True)
        resp = client.post("/api/listing/create", json=listing_body(), headers=auth_headers(banned))
        assert resp.status_code == 403


# ── Feed ─────────────────────────────────────────────────────────────────

class TestListingFeed:
    def test_price_range(self, client, seller, auth_headers, listing_body):
        for price in (10000, 50000, 90000):
            _create(client, seller, auth_headers, listing_body(regularPrice=price))
        data = client.get("/api/listing?minPrice=20000&maxPrice=60000").get_json()
        assert [l["regularPrice"] for l in data["listings"]] == [50000]
        assert data["total"] == 1

    def test_district(self, client, seller, auth_headers, listing_body):
        _create(client, seller, auth_headers, listing_body())
        _create(client, seller, auth_headers,
                listing_body(location={"district": "Gulu", "subcounty": "Bardege"}))
        data = client.get("/api/listing?district=Gulu").get_json()
        assert len(data["listings"]) == 1
        assert data["listings"][0]["location"]["district"] == "Gulu"

    def test_paging_and_has_more(self, client, seller, auth_headers, listing_body):
        for i in range(3):
            _create(client, seller, auth_headers, listing_body(name=f"Maize lot {i}"))
        first = client.get("/api/listing?limit=2").get_json()
        assert len(first["listings"]) == 2
        assert first["total"] == 3
        assert first["hasMore"] is True
        last = client.get("/api/listing?limit=2&skip=2").get_json()
        assert len(last["listings"]) == 1
        assert last["hasMore"] is False

    def test_inactive_listings_hidden(self, client, db, seller, auth_headers, listing_body):
        listing = _create(client, seller, auth_headers, listing_body())
        db.listings.update_one({"_id": ObjectId(listing["_id"])}, {"$set": {"status": "sold"}})
        client.application.extensions["response_cache"].clear()
        assert client.get("/api/listing").get_json()["total"] == 0

    def test_by_district_route(self, client, seller, auth_headers, listing_body):
        _create(client, seller, auth_headers, listing_body())
        data = client.get("/api/listing/district/Masaka").get_json()
        assert data["district"] == "Masaka"
        assert data["total"] == 1

    def test_suggestions(self, client, seller, auth_headers, listing_body):
        _create(client, seller, auth_headers, listing_body())
        data = client.get("/api/listing/suggestions?query=mai").get_json()
        assert data[0]["name"] == "Fresh Maize"
        assert data[0]["brand"] == "Maize"

    def test_expired_token_reads_as_anonymous(self, client, seller, auth_headers, listing_body):
        _create(client, seller, auth_headers, listing_body())
        stale = issue_token(seller, timedelta(seconds=-10))
        resp = client.get("/api/listing", headers={"Authorization": f"Bearer {stale}"})
        assert resp.status_code == 200
        assert resp.get_json()["total"] == 1

    def test_garbage_token_reads_as_anonymous(self, client):
        resp = client.get("/api/listing", headers={"Authorization": "Bearer not-a-jwt"})
        assert resp.status_code == 200
        assert resp.get_json()["listings"] == []

    def test_admin_token_sees_other_statuses(self, client, db, seller, admin, auth_headers, listing_body):
        listing = _create(client, seller, auth_headers, listing_body())
        db.listings.update_one({"_id": ObjectId(listing["_id"])}, {"$set": {"status": "sold"}})
        data = client.get("/api/listing?status=sold", headers=auth_headers(admin)).get_json()
        assert data["total"] == 1


# ── Detail / engagement ──────────────────────────────────────────────────

class TestListingDetail:
    def test_each_read_counts_a_view(self, client, seller, auth_headers, listing_body):
        listing = _create(client, seller, auth_headers, listing_body())
        for _ in range(3):
            resp = client.get(f"/api/listing/{listing['_id']}")
            assert "X-Cache" not in resp.headers
        assert resp.get_json()["views"] == 3

    def test_not_found(self, client):
        assert client.get(f"/api/listing/{ObjectId()}").status_code == 404

    def test_malformed_id(self, client):
        assert client.get("/api/listing/123").status_code == 400

    def test_seller_contact_backfilled(self, client, db, seller):
        oid = db.listings.insert_one({
            "name": "Old listing", "userRef": seller["_id"], "status": "active", "views": 0,
            "createdAt": utc_now(),
        }).inserted_id
        data = client.get(f"/api/listing/{oid}").get_json()
        assert data["sellerEmail"] == "seller@example.com"
        stored = db.listings.find_one({"_id": oid})
        assert stored["contactPhone"] == "256772000001"

    def test_seller_lookup_failure_still_serves_feed(self, client, db, seller, monkeypatch):
        db.listings.insert_one({
            "name": "Old listing", "userRef": seller["_id"], "status": "active", "views": 0,
            "createdAt": utc_now(),
        })
        real_find = mongomock.collection.Collection.find

        def find(self, *args, **kwargs):
            if self.name == "users":
                raise PyMongoError("users unavailable")
            return real_find(self, *args, **kwargs)

        monkeypatch.setattr(mongomock.collection.Collection, "find", find)
        resp = client.get("/api/listing")
        assert resp.status_code == 200
        listing = resp.get_json()["listings"][0]
        assert listing["name"] == "Old listing"
        assert "sellerEmail" not in listing

    def test_contact_click(self, client, db, seller, auth_headers, listing_body):
        listing = _create(client, seller, auth_headers, listing_body())
        assert client.post(f"/api/listing/{listing['_id']}/contact").status_code == 200
        assert db.listings.find_one({"_id": ObjectId(listing["_id"])})["contactClicks"] == 1


# ── Update / delete ──────────────────────────────────────────────────────

class TestListingWrites:
    def test_owner_update(self, client, seller, auth_headers, listing_body):
        listing = _create(client, seller, auth_headers, listing_body())
        resp = client.put(f"/api/listing/{listing['_id']}", json={"regularPrice": 55000},
                          headers=auth_headers(seller))
        assert resp.status_code == 200
        assert resp.get_json()["regularPrice"] == 55000

    def test_update_revalidates_offer(self, client, seller, auth_headers, listing_body):
        listing = _create(client, seller, auth_headers, listing_body())
        resp = client.put(f"/api/listing/{listing['_id']}",
                          json={"offer": True, "discountedPrice": 70000},
                          headers=auth_headers(seller))
        assert resp.status_code == 400

    def test_other_user_cannot_update(self, client, seller, buyer, auth_headers, listing_body):
        listing = _create(client, seller, auth_headers, listing_body())
        resp = client.put(f"/api/listing/{listing['_id']}", json={"regularPrice": 1},
                          headers=auth_headers(buyer))
        assert resp.status_code == 403

    def test_owner_cannot_suspend(self, client, seller, auth_headers, listing_body):
        listing = _create(client, seller, auth_headers, listing_body())
        resp = client.put(f"/api/listing/{listing['_id']}", json={"status": "suspended"},
                          headers=auth_headers(seller))
        assert resp.status_code == 403

    def test_admin_can_update_any(self, client, seller, admin, auth_headers, listing_body):
        listing = _create(client, seller, auth_headers, listing_body())
        resp = client.put(f"/api/listing/{listing['_id']}", json={"status": "sold"},
                          headers=auth_headers(admin))
        assert resp.status_code == 200
        assert resp.get_json()["status"] == "sold"

    def test_delete(self, client, seller, auth_headers, listing_body):
        listing = _create(client, seller, auth_headers, listing_body())
        resp = client.delete(f"/api/listing/{listing['_id']}", headers=auth_headers(seller))
        assert resp.status_code == 200
        assert client.get(f"/api/listing/{listing['_id']}").status_code == 404


# ── Promotion ────────────────────────────────────────────────────────────

class TestPromotion:
    def test_owner_promote_shows_in_featured(self, client, seller, auth_headers, listing_body):
        listing = _create(client, seller, auth_headers, listing_body())
        resp = client.post(f"/api/listing/{listing['_id']}/promote", json={"days": 3},
                           headers=auth_headers(seller))
        assert resp.status_code == 200
        assert resp.get_json()["listing"]["featuredDistricts"] == ["Masaka"]
        featured = client.get("/api/listing/featured/all?district=Masaka").get_json()["listings"]
        assert [f["_id"] for f in featured] == [listing["_id"]]

    def test_webhook_requires_secret(self, client, seller, auth_headers, listing_body):
        listing = _create(client, seller, auth_headers, listing_body())
        url = f"/api/listing/promote/webhook/{listing['_id']}"
        assert client.post(url, json={}).status_code == 401
        assert client.post(url, json={}, headers={"X-Promote-Secret": "wrong"}).status_code == 401
        resp = client.post(url, json={"days": 1}, headers={"X-Promote-Secret": "hook-secret"})
        assert resp.status_code == 200
        assert resp.get_json()["listing"]["isFeatured"] is True

    def test_boost_webhook(self, client, seller, auth_headers, listing_body):
        listing = _create(client, seller, auth_headers, listing_body())
        resp = client.post(f"/api/listing/boost/webhook/{listing['_id']}", json={"hours": 6},
                           headers={"X-Promote-Secret": "hook-secret"})
        assert resp.status_code == 200
        assert resp.get_json()["listing"]["boosted"] is True

    def test_other_user_cannot_boost(self, client, seller, buyer, auth_headers, listing_body):
        listing = _create(client, seller, auth_headers, listing_body())
        resp = client.post(f"/api/listing/{listing['_id']}/boost", json={}, headers=auth_headers(buyer))
        assert resp.status_code == 403


# ── Cache ────────────────────────────────────────────────────────────────

class TestListingCache:
    def test_write_invalidates_feed(self, client, seller, auth_headers, listing_body):
        assert client.get("/api/listing").headers["X-Cache"] == "MISS"
        cached = client.get("/api/listing")
        assert cached.headers["X-Cache"] == "HIT"
        assert cached.get_json()["total"] == 0

        _create(client, seller, auth_headers, listing_body())

        fresh = client.get("/api/listing")
        assert fresh.headers["X-Cache"] == "MISS"
        assert fresh.get_json()["total"] == 1

    def test_update_invalidates_feed(self, client, seller, auth_headers, listing_body):
        listing = _create(client, seller, auth_headers, listing_body())
        client.get("/api/listing")
        client.put(f"/api/listing/{listing['_id']}", json={"regularPrice": 61000},
                   headers=auth_headers(seller))
        resp = client.get("/api/listing")
        assert resp.headers["X-Cache"] == "MISS"
        assert resp.get_json()["listings"][0]["regularPrice"] == 61000
