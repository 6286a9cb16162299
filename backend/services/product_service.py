# backend/services/product_service.py

from __future__ import annotations

import math
import re
from datetime import timedelta
from typing import Any, Dict, List, Mapping, Optional

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from backend.cache import invalidate_cache
from backend.errors import BadRequestError, ForbiddenError, NotFoundError
from backend.models.listing_models import ProductModel, PromoteModel, ReviewModel
from backend.mongo import mongo
from backend.services.catalog import (
    check_status_change,
    compute_expires_at,
    load_or_404,
    merge_for_update,
    seller_contact,
    seo_fields,
    validate_item,
)
from backend.services.listing_query import compile_product_query, run_listing_query
from backend.services.media_service import MediaService
from backend.services.seller_info import backfill_seller_contacts
from backend.utils.dates import utc_now
from backend.utils.serialize import parse_object_id, serialize_doc, serialize_docs

PRODUCTS_CACHE_PREFIX = "/api/products"
PUBLIC_FILTER = {"status": "active", "moderationStatus": "approved"}
TOP_LIMIT = 6
SUGGESTION_LIMIT = 6


def _col():
    return mongo.db.products


def _changed():
    invalidate_cache(PRODUCTS_CACHE_PREFIX)


class ProductService:
    # ------------------------------------------------------------
    # CREATE
    # ------------------------------------------------------------
    @staticmethod
    def create_product(user: Dict[str, Any], payload: Dict[str, Any]) -> Dict[str, Any]:
        if user.get("isBanned"):
            raise ForbiddenError("Your account has been banned")

        data = validate_item(ProductModel, payload)
        now = utc_now()
        doc = {
            **data,
            **seo_fields(data),
            **seller_contact(user, payload),
            "userRef": user["_id"],
            "moderationStatus": "pending",
            "rating": 0,
            "numReviews": 0,
            "isFeatured": False,
            "featuredUntil": None,
            "views": 0,
            "contactClicks": 0,
            "expiresAt": compute_expires_at(data["category"], data["details"], now),
            "createdAt": now,
            "updatedAt": now,
        }
        doc["_id"] = _col().insert_one(doc).inserted_id
        _changed()
        return serialize_doc(doc)

    # ------------------------------------------------------------
    # READ
    # ------------------------------------------------------------
    @staticmethod
    def get_products(args: Mapping[str, Any], public: bool = True) -> Dict[str, Any]:
        query = compile_product_query(args, public=public)
        page = run_listing_query(_col(), query)
        items = backfill_seller_contacts("products", page["items"])
        total = page["total"]
        return {
            "products": serialize_docs(items),
            "page": query.page,
            "pages": math.ceil(total / query.limit) if total else 0,
            "total": total,
        }

    @staticmethod
    def get_product(product_id: str) -> Dict[str, Any]:
        product = _col().find_one_and_update(
            {"_id": parse_object_id(product_id)},
            {"$inc": {"views": 1}},
            return_document=ReturnDocument.AFTER,
        )
        if not product:
            raise NotFoundError("Product not found")
        backfill_seller_contacts("products", [product])
        reviews = mongo.db.reviews.find({"product": product["_id"]}).sort("createdAt", -1)
        product["reviews"] = list(reviews)
        return serialize_doc(product)

    @staticmethod
    def get_top_products() -> List[Dict[str, Any]]:
        cursor = _col().find(dict(PUBLIC_FILTER)).sort([("rating", -1), ("numReviews", -1)]).limit(TOP_LIMIT)
        return serialize_docs(cursor)

    @staticmethod
    def get_my_products(user_id) -> List[Dict[str, Any]]:
        return serialize_docs(_col().find({"userRef": user_id}).sort("createdAt", -1))

    @staticmethod
    def get_suggestions(term: Optional[str]) -> List[Dict[str, Any]]:
        term = (term or "").strip()
        if not term:
            return []
        rx = {"$regex": re.escape(term), "$options": "i"}
        flt = {**PUBLIC_FILTER, "$or": [{"name": rx}, {"category": rx}, {"brand": rx}]}
        cursor = _col().find(flt, {"name": 1, "imageUrls": 1, "category": 1}).limit(SUGGESTION_LIMIT)
        return serialize_docs(cursor)

    # ------------------------------------------------------------
    # UPDATE / DELETE
    # ------------------------------------------------------------
    @staticmethod
    def update_product(user: Dict[str, Any], product_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
        product = load_or_404(_col(), product_id, "Product")
        admin = bool(user.get("isAdmin"))
        if not admin and product.get("userRef") != user["_id"]:
            raise ForbiddenError("You can only update your own products")
        check_status_change(product, patch or {}, admin)

        changes = merge_for_update(ProductModel, product, patch)
        if any(k in patch for k in ("category", "subCategory", "location", "details", "name")):
            changes.update(seo_fields({**product, **changes}))
        # an edited product goes back through moderation
        if not admin and product.get("moderationStatus") == "rejected":
            changes["moderationStatus"] = "pending"
        changes["updatedAt"] = utc_now()

        updated = _col().find_one_and_update(
            {"_id": product["_id"]},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        _changed()
        return serialize_doc(updated)

    @staticmethod
    def delete_product(user: Dict[str, Any], product_id: str) -> None:
        product = load_or_404(_col(), product_id, "Product")
        if not user.get("isAdmin") and product.get("userRef") != user["_id"]:
            raise ForbiddenError("You can only delete your own products")

        _col().delete_one({"_id": product["_id"]})
        mongo.db.reviews.delete_many({"product": product["_id"]})
        MediaService.schedule_cleanup(product.get("imagePublicIds"), owner=f"product {product['_id']}")
        _changed()

    # ------------------------------------------------------------
    # REVIEWS / ENGAGEMENT
    # ------------------------------------------------------------
    @staticmethod
    def add_review(user: Dict[str, Any], product_id: str, body: Dict[str, Any]) -> None:
        product = load_or_404(_col(), product_id, "Product")
        review = ReviewModel.model_validate(body or {})

        if product.get("userRef") == user["_id"]:
            raise BadRequestError("You cannot review your own product")
        if mongo.db.reviews.find_one({"product": product["_id"], "user": user["_id"]}):
            raise BadRequestError("Product already reviewed")

        try:
            mongo.db.reviews.insert_one({
                "product": product["_id"],
                "user": user["_id"],
                "name": user.get("username") or "Buyer",
                "rating": review.rating,
                "comment": review.comment,
                "createdAt": utc_now(),
            })
        except DuplicateKeyError:
            raise BadRequestError("Product already reviewed")

        ProductService._recompute_rating(product["_id"])
        _changed()

    @staticmethod
    def _recompute_rating(product_oid) -> None:
        ratings = [r["rating"] for r in mongo.db.reviews.find({"product": product_oid}, {"rating": 1})]
        avg = round(sum(ratings) / len(ratings), 2) if ratings else 0
        _col().update_one(
            {"_id": product_oid},
            {"$set": {"rating": avg, "numReviews": len(ratings)}},
        )

    @staticmethod
    def track_contact(product_id: str) -> None:
        res = _col().update_one({"_id": parse_object_id(product_id)}, {"$inc": {"contactClicks": 1}})
        if res.matched_count == 0:
            raise NotFoundError("Product not found")

    @staticmethod
    def promote(user: Dict[str, Any], product_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        product = load_or_404(_col(), product_id, "Product")
        if not user.get("isAdmin") and product.get("userRef") != user["_id"]:
            raise ForbiddenError("You can only promote your own products")

        opts = PromoteModel.model_validate(body or {})
        updated = _col().find_one_and_update(
            {"_id": product["_id"]},
            {"$set": {"isFeatured": True, "featuredUntil": utc_now() + timedelta(days=opts.days)}},
            return_document=ReturnDocument.AFTER,
        )
        _changed()
        return serialize_doc(updated)
