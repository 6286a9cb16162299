# backend/services/listing_service.py

from __future__ import annotations

import hmac
import re
from datetime import timedelta
from typing import Any, Dict, List, Mapping, Optional

from flask import current_app
from pymongo import ReturnDocument

from backend.cache import invalidate_cache
from backend.errors import ForbiddenError, NotFoundError, UnauthorizedError
from backend.models.listing_models import BoostModel, ListingModel, PromoteModel
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
from backend.services.listing_query import (
    clamp,
    compile_listing_query,
    parse_int,
    run_listing_query,
)
from backend.services.media_service import MediaService
from backend.services.seller_info import backfill_seller_contacts
from backend.utils.dates import utc_now
from backend.utils.serialize import parse_object_id, serialize_doc, serialize_docs

LISTINGS_CACHE_PREFIX = "/api/listing"
SUGGESTION_LIMIT = 6


def _col():
    return mongo.db.listings


def _changed():
    invalidate_cache(LISTINGS_CACHE_PREFIX)


class ListingService:
    # ------------------------------------------------------------
    # CREATE
    # ------------------------------------------------------------
    @staticmethod
    def create_listing(user: Dict[str, Any], payload: Dict[str, Any]) -> Dict[str, Any]:
        if user.get("isBanned"):
            raise ForbiddenError("Your account has been banned")

        data = validate_item(ListingModel, payload)
        now = utc_now()

        doc = {
            **data,
            **seo_fields(data),
            **seller_contact(user, payload),
            "userRef": user["_id"],
            "isFeatured": False,
            "featuredUntil": None,
            "featuredDistricts": [],
            "boosted": False,
            "boostedUntil": None,
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
    def get_listings(args: Mapping[str, Any], admin: bool = False) -> Dict[str, Any]:
        query = compile_listing_query(args, allow_status_override=admin)
        page = run_listing_query(_col(), query)
        items = backfill_seller_contacts("listings", page["items"])
        return {
            "success": True,
            "listings": serialize_docs(items),
            "total": page["total"],
            "limit": query.limit,
            "skip": query.skip,
            "hasMore": page["hasMore"],
        }

    @staticmethod
    def get_listing(listing_id: str) -> Dict[str, Any]:
        """Single listing; every call counts as one view."""
        oid = parse_object_id(listing_id)
        listing = _col().find_one_and_update(
            {"_id": oid},
            {"$inc": {"views": 1}},
            return_document=ReturnDocument.AFTER,
        )
        if not listing:
            raise NotFoundError("Listing not found")
        backfill_seller_contacts("listings", [listing])
        return serialize_doc(listing)

    @staticmethod
    def get_featured(args: Mapping[str, Any]) -> Dict[str, Any]:
        limit = clamp(parse_int(args.get("limit"), 10), 1, 100)
        flt: Dict[str, Any] = {
            "isFeatured": True,
            "featuredUntil": {"$gte": utc_now()},
            "status": "active",
        }
        district = args.get("district")
        if district:
            flt["$or"] = [{"location.district": district}, {"featuredDistricts": district}]

        listings = list(_col().find(flt).sort([("boosted", -1), ("createdAt", -1)]).limit(limit))
        return {"success": True, "listings": serialize_docs(listings)}

    @staticmethod
    def get_by_district(district: str, args: Mapping[str, Any]) -> Dict[str, Any]:
        limit = clamp(parse_int(args.get("limit"), 20), 1, 100)
        skip = clamp(parse_int(args.get("skip"), 0), 0)
        flt: Dict[str, Any] = {"location.district": district, "status": "active"}
        if args.get("category"):
            flt["category"] = args.get("category")

        listings = list(
            _col().find(flt)
            .sort([("isFeatured", -1), ("boosted", -1), ("createdAt", -1)])
            .skip(skip)
            .limit(limit)
        )
        total = _col().count_documents(flt)
        return {
            "success": True,
            "listings": serialize_docs(listings),
            "total": total,
            "district": district,
        }

    @staticmethod
    def get_suggestions(term: Optional[str]) -> List[Dict[str, Any]]:
        term = (term or "").strip()
        if not term:
            return []
        rx = {"$regex": re.escape(term), "$options": "i"}
        cursor = _col().find(
            {
                "$or": [
                    {"name": rx},
                    {"details.brand": rx},
                    {"category": rx},
                    {"details.cropType": rx},
                ],
                "status": "active",
            },
            {"name": 1, "imageUrls": 1, "category": 1, "details.cropType": 1, "details.brand": 1},
        ).limit(SUGGESTION_LIMIT)

        out = []
        for doc in cursor:
            details = doc.get("details") or {}
            out.append({
                "_id": str(doc["_id"]),
                "name": doc.get("name"),
                "imageUrls": doc.get("imageUrls", []),
                "category": doc.get("category"),
                "brand": details.get("brand") or details.get("cropType"),
            })
        return out

    # ------------------------------------------------------------
    # UPDATE / DELETE
    # ------------------------------------------------------------
    @staticmethod
    def update_listing(user: Dict[str, Any], listing_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
        listing = load_or_404(_col(), listing_id, "Listing")
        admin = bool(user.get("isAdmin"))
        if not admin and listing.get("userRef") != user["_id"]:
            raise ForbiddenError("You can only update your own listings")
        check_status_change(listing, patch or {}, admin)

        changes = merge_for_update(ListingModel, listing, patch)
        if any(k in patch for k in ("category", "subCategory", "location", "details", "name")):
            merged = {**listing, **changes}
            changes.update(seo_fields(merged))
        changes["updatedAt"] = utc_now()

        updated = _col().find_one_and_update(
            {"_id": listing["_id"]},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        _changed()
        return serialize_doc(updated)

    @staticmethod
    def delete_listing(user: Dict[str, Any], listing_id: str) -> None:
        listing = load_or_404(_col(), listing_id, "Listing")
        if not user.get("isAdmin") and listing.get("userRef") != user["_id"]:
            raise ForbiddenError("You can only delete your own listings")

        _col().delete_one({"_id": listing["_id"]})
        MediaService.schedule_cleanup(listing.get("imagePublicIds"), owner=f"listing {listing['_id']}")
        _changed()

    # ------------------------------------------------------------
    # ENGAGEMENT / PROMOTION
    # ------------------------------------------------------------
    @staticmethod
    def track_contact(listing_id: str) -> None:
        res = _col().update_one({"_id": parse_object_id(listing_id)}, {"$inc": {"contactClicks": 1}})
        if res.matched_count == 0:
            raise NotFoundError("Listing not found")

    @staticmethod
    def check_webhook_secret(secret: Optional[str]) -> None:
        expected = current_app.config.get("PROMOTE_WEBHOOK_SECRET")
        if not expected or not secret or not hmac.compare_digest(str(secret), str(expected)):
            raise UnauthorizedError("Invalid webhook secret")

    @staticmethod
    def promote(listing_id: str, body: Dict[str, Any], user: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Feature a listing for `days` in `districts`; `user=None` means a verified webhook call."""
        listing = load_or_404(_col(), listing_id, "Listing")
        if user is not None and listing.get("userRef") != user["_id"] and not user.get("isAdmin"):
            raise ForbiddenError("You can only promote your own listings")

        opts = PromoteModel.model_validate(body or {})
        districts = opts.districts or [((listing.get("location") or {}).get("district"))]
        updated = _col().find_one_and_update(
            {"_id": listing["_id"]},
            {"$set": {
                "isFeatured": True,
                "featuredUntil": utc_now() + timedelta(days=opts.days),
                "featuredDistricts": [d for d in districts if d],
            }},
            return_document=ReturnDocument.AFTER,
        )
        _changed()
        return serialize_doc(updated)

    @staticmethod
    def boost(listing_id: str, body: Dict[str, Any], user: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        listing = load_or_404(_col(), listing_id, "Listing")
        if user is not None and listing.get("userRef") != user["_id"] and not user.get("isAdmin"):
            raise ForbiddenError("You can only boost your own listings")

        opts = BoostModel.model_validate(body or {})
        updated = _col().find_one_and_update(
            {"_id": listing["_id"]},
            {"$set": {"boosted": True, "boostedUntil": utc_now() + timedelta(hours=opts.hours)}},
            return_document=ReturnDocument.AFTER,
        )
        _changed()
        return serialize_doc(updated)
