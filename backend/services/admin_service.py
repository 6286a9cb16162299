# backend/services/admin_service.py

from __future__ import annotations

from datetime import timedelta
from typing import Any, Dict, List, Mapping, Optional

from flask import current_app
from pymongo import ReturnDocument

from backend.cache import invalidate_cache
from backend.errors import BadRequestError, ForbiddenError, NotFoundError
from backend.models.user_models import AdminUserUpdateModel, RoleChangeModel
from backend.mongo import mongo
from backend.services.catalog import load_or_404
from backend.services.listing_service import LISTINGS_CACHE_PREFIX, ListingService
from backend.services.media_service import MediaService
from backend.services.order_service import OrderService
from backend.services.product_service import PRODUCTS_CACHE_PREFIX, ProductService
from backend.services.user_service import (
    PUBLIC_PROJECTION,
    check_unique_fields,
    invalidate_catalog_caches,
    normalize_contact_fields,
)
from backend.utils.dates import utc_now
from backend.utils.serialize import (
    parse_object_id,
    public_user,
    serialize_doc,
    serialize_docs,
    to_json,
)

DEFAULT_REJECTION = "Does not meet platform guidelines"
DEFAULT_FEATURE_DAYS = 7


def _load_user(user_id: str) -> Dict[str, Any]:
    user = mongo.db.users.find_one({"_id": parse_object_id(user_id)})
    if not user:
        raise NotFoundError("User not found")
    return user


def _set(collection, oid, changes: Dict[str, Any], projection=None) -> Dict[str, Any]:
    return collection.find_one_and_update(
        {"_id": oid},
        {"$set": changes},
        projection=projection,
        return_document=ReturnDocument.AFTER,
    )


def _toggle_feature(collection, doc: Dict[str, Any], days: Any) -> Dict[str, Any]:
    if doc.get("isFeatured"):
        changes = {"isFeatured": False, "featuredUntil": None}
    else:
        try:
            days = int(days)
        except (TypeError, ValueError):
            raise BadRequestError("days must be a whole number")
        if days < 1:
            raise BadRequestError("days must be at least 1")
        changes = {"isFeatured": True, "featuredUntil": utc_now() + timedelta(days=days)}
    changes["updatedAt"] = utc_now()
    return _set(collection, doc["_id"], changes)


class AdminService:
    # ------------------------------------------------------------
    # DASHBOARD
    # ------------------------------------------------------------
    @staticmethod
    def get_stats() -> Dict[str, Any]:
        db = mongo.db
        value = list(db.listings.aggregate([
            {"$match": {"status": "active"}},
            {"$group": {"_id": None, "total": {"$sum": "$regularPrice"}}},
        ]))
        return {
            "totalUsers": db.users.count_documents({}),
            "totalListings": db.listings.count_documents({}),
            "activeListings": db.listings.count_documents({"status": "active"}),
            "totalProducts": db.products.count_documents({}),
            "pendingProducts": db.products.count_documents({"moderationStatus": "pending"}),
            "totalOrders": db.orders.count_documents({}),
            "pendingOrders": db.orders.count_documents({"status": "Pending"}),
            "totalMarketValue": value[0]["total"] if value else 0,
        }

    # ------------------------------------------------------------
    # USERS
    # ------------------------------------------------------------
    @staticmethod
    def get_users() -> List[Dict[str, Any]]:
        return serialize_docs(mongo.db.users.find({}, PUBLIC_PROJECTION).sort("createdAt", -1))

    @staticmethod
    def get_user_activity(user_id: str) -> Dict[str, Any]:
        user = _load_user(user_id)
        oid = user["_id"]
        return {
            "user": public_user(user),
            "activity": {
                "listingsCount": mongo.db.listings.count_documents({"userRef": oid}),
                "productsCount": mongo.db.products.count_documents({"userRef": oid}),
                "ordersCount": mongo.db.orders.count_documents({"user": oid}),
                "joinedAt": to_json(user.get("createdAt")),
                "lastActive": to_json(user.get("updatedAt")),
            },
        }

    @staticmethod
    def update_user(user_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        user = _load_user(user_id)
        changes = AdminUserUpdateModel.model_validate(body or {}).model_dump(exclude_none=True)
        normalize_contact_fields(changes)
        check_unique_fields(changes, user["_id"])
        if not changes:
            raise BadRequestError("Nothing to update")
        changes["updatedAt"] = utc_now()
        return public_user(_set(mongo.db.users, user["_id"], changes, PUBLIC_PROJECTION))

    @staticmethod
    def toggle_ban(user_id: str) -> Dict[str, Any]:
        user = _load_user(user_id)
        if user.get("isAdmin"):
            raise ForbiddenError("Cannot ban admin users")
        updated = _set(
            mongo.db.users,
            user["_id"],
            {"isBanned": not user.get("isBanned", False), "updatedAt": utc_now()},
            PUBLIC_PROJECTION,
        )
        return public_user(updated)

    @staticmethod
    def change_role(admin: Dict[str, Any], user_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        user = _load_user(user_id)
        role = RoleChangeModel.model_validate(body or {}).role
        if user["_id"] == admin["_id"] and role != "admin":
            raise BadRequestError("You cannot remove your own admin role")
        changes = {
            "role": role,
            "isAdmin": role == "admin",
            "isSeller": role in ("seller", "admin") or bool(user.get("isSeller")),
            "updatedAt": utc_now(),
        }
        return public_user(_set(mongo.db.users, user["_id"], changes, PUBLIC_PROJECTION))

    @staticmethod
    def delete_user(user_id: str) -> None:
        """Remove an account with everything it sells. Admin accounts are protected."""
        user = _load_user(user_id)
        if user.get("isAdmin"):
            raise ForbiddenError("Cannot delete an administrative account")

        oid = user["_id"]
        public_ids: List[str] = []
        for col in (mongo.db.listings, mongo.db.products):
            for doc in col.find({"userRef": oid}, {"imagePublicIds": 1}):
                public_ids.extend(doc.get("imagePublicIds") or [])

        product_ids = [p["_id"] for p in mongo.db.products.find({"userRef": oid}, {"_id": 1})]
        listings = mongo.db.listings.delete_many({"userRef": oid}).deleted_count
        products = mongo.db.products.delete_many({"userRef": oid}).deleted_count
        if product_ids:
            mongo.db.reviews.delete_many({"product": {"$in": product_ids}})
        mongo.db.reviews.delete_many({"user": oid})
        mongo.db.carts.delete_one({"user": oid})
        mongo.db.wishlists.delete_one({"user": oid})
        mongo.db.users.delete_one({"_id": oid})

        current_app.logger.info(
            "admin removed user %s with %d listings and %d products", oid, listings, products
        )
        MediaService.schedule_cleanup(public_ids, owner=f"user {oid}")
        invalidate_catalog_caches()

    # ------------------------------------------------------------
    # PRODUCTS
    # ------------------------------------------------------------
    @staticmethod
    def get_products(args: Mapping[str, Any]) -> Dict[str, Any]:
        return ProductService.get_products(args, public=False)

    @staticmethod
    def approve_product(admin: Dict[str, Any], product_id: str) -> Dict[str, Any]:
        product = load_or_404(mongo.db.products, product_id, "Product")
        now = utc_now()
        updated = _set(mongo.db.products, product["_id"], {
            "moderationStatus": "approved",
            "rejectionReason": None,
            "approvedAt": now,
            "approvedBy": admin["_id"],
            "updatedAt": now,
        })
        invalidate_cache(PRODUCTS_CACHE_PREFIX)
        return serialize_doc(updated)

    @staticmethod
    def reject_product(admin: Dict[str, Any], product_id: str, reason: Optional[str]) -> Dict[str, Any]:
        product = load_or_404(mongo.db.products, product_id, "Product")
        now = utc_now()
        updated = _set(mongo.db.products, product["_id"], {
            "moderationStatus": "rejected",
            "rejectionReason": reason or DEFAULT_REJECTION,
            "rejectedAt": now,
            "rejectedBy": admin["_id"],
            "updatedAt": now,
        })
        invalidate_cache(PRODUCTS_CACHE_PREFIX)
        return serialize_doc(updated)

    @staticmethod
    def update_product(admin: Dict[str, Any], product_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
        return ProductService.update_product(admin, product_id, patch)

    @staticmethod
    def toggle_feature_product(product_id: str, days: Any = DEFAULT_FEATURE_DAYS) -> Dict[str, Any]:
        product = load_or_404(mongo.db.products, product_id, "Product")
        updated = _toggle_feature(mongo.db.products, product, days)
        invalidate_cache(PRODUCTS_CACHE_PREFIX)
        return serialize_doc(updated)

    @staticmethod
    def delete_product(admin: Dict[str, Any], product_id: str) -> None:
        ProductService.delete_product(admin, product_id)

    # ------------------------------------------------------------
    # LISTINGS
    # ------------------------------------------------------------
    @staticmethod
    def get_listings(args: Mapping[str, Any]) -> Dict[str, Any]:
        return ListingService.get_listings(args, admin=True)

    @staticmethod
    def approve_listing(admin: Dict[str, Any], listing_id: str) -> Dict[str, Any]:
        listing = load_or_404(mongo.db.listings, listing_id, "Listing")
        now = utc_now()
        updated = _set(mongo.db.listings, listing["_id"], {
            "status": "active",
            "rejectionReason": None,
            "approvedAt": now,
            "approvedBy": admin["_id"],
            "updatedAt": now,
        })
        invalidate_cache(LISTINGS_CACHE_PREFIX)
        return serialize_doc(updated)

    @staticmethod
    def reject_listing(admin: Dict[str, Any], listing_id: str, reason: Optional[str]) -> Dict[str, Any]:
        listing = load_or_404(mongo.db.listings, listing_id, "Listing")
        now = utc_now()
        updated = _set(mongo.db.listings, listing["_id"], {
            "status": "suspended",
            "rejectionReason": reason or DEFAULT_REJECTION,
            "rejectedAt": now,
            "rejectedBy": admin["_id"],
            "updatedAt": now,
        })
        invalidate_cache(LISTINGS_CACHE_PREFIX)
        return serialize_doc(updated)

    @staticmethod
    def update_listing(admin: Dict[str, Any], listing_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
        return ListingService.update_listing(admin, listing_id, patch)

    @staticmethod
    def toggle_feature_listing(listing_id: str, days: Any = DEFAULT_FEATURE_DAYS) -> Dict[str, Any]:
        listing = load_or_404(mongo.db.listings, listing_id, "Listing")
        updated = _toggle_feature(mongo.db.listings, listing, days)
        invalidate_cache(LISTINGS_CACHE_PREFIX)
        return serialize_doc(updated)

    @staticmethod
    def bulk_approve_listings(admin: Dict[str, Any], listing_ids: Any) -> int:
        if not isinstance(listing_ids, list) or not listing_ids:
            raise BadRequestError("Invalid listing IDs")
        oids = [parse_object_id(i, "listingIds") for i in listing_ids]
        now = utc_now()
        result = mongo.db.listings.update_many(
            {"_id": {"$in": oids}},
            {"$set": {"status": "active", "approvedAt": now, "approvedBy": admin["_id"], "updatedAt": now}},
        )
        invalidate_cache(LISTINGS_CACHE_PREFIX)
        return result.modified_count

    @staticmethod
    def delete_listing(admin: Dict[str, Any], listing_id: str) -> None:
        ListingService.delete_listing(admin, listing_id)

    # ------------------------------------------------------------
    # ORDERS
    # ------------------------------------------------------------
    @staticmethod
    def get_orders(status: Optional[str] = None) -> List[Dict[str, Any]]:
        return OrderService.get_all_orders(status)

    @staticmethod
    def update_order_status(order_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        body = body or {}
        order = OrderService.update_status(order_id, body)
        notes = body.get("adminNotes")
        if notes:
            order = serialize_doc(_set(
                mongo.db.orders, parse_object_id(order_id), {"adminNotes": str(notes)}
            ))
        return order

    @staticmethod
    def cancel_order(order_id: str, reason: Optional[str]) -> Dict[str, Any]:
        return OrderService.cancel(order_id, reason or "Cancelled by admin")
