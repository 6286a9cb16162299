# backend/services/wishlist_service.py

from __future__ import annotations

from typing import Any, Dict, List

from backend.errors import NotFoundError
from backend.mongo import mongo
from backend.utils.dates import utc_now
from backend.utils.serialize import parse_object_id, serialize_docs


class WishlistService:
    @staticmethod
    def get_products(user_oid) -> List[Dict[str, Any]]:
        wishlist = mongo.db.wishlists.find_one({"user": user_oid})
        ids = (wishlist or {}).get("products", [])
        if not ids:
            return []
        by_id = {p["_id"]: p for p in mongo.db.products.find({"_id": {"$in": ids}})}
        # keep the order the user added them in; skip products deleted since
        return serialize_docs(by_id[i] for i in ids if i in by_id)

    @staticmethod
    def add(user_oid, product_id: str) -> None:
        product_oid = parse_object_id(product_id)
        if not mongo.db.products.find_one({"_id": product_oid}, {"_id": 1}):
            raise NotFoundError("Product not found")
        now = utc_now()
        mongo.db.wishlists.update_one(
            {"user": user_oid},
            {"$addToSet": {"products": product_oid}, "$set": {"updatedAt": now},
             "$setOnInsert": {"createdAt": now}},
            upsert=True,
        )

    @staticmethod
    def remove(user_oid, product_id: str) -> None:
        mongo.db.wishlists.update_one(
            {"user": user_oid},
            {"$pull": {"products": parse_object_id(product_id)}, "$set": {"updatedAt": utc_now()}},
        )
