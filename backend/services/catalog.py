# backend/services/catalog.py
"""Pieces shared by listings and products (same document shape, two collections)."""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Type

from pydantic import BaseModel

from backend.errors import BadRequestError, ForbiddenError, NotFoundError
from backend.models.details_models import validate_details
from backend.utils.dates import utc_now
from backend.utils.seo import generate_seo
from backend.utils.serialize import parse_object_id

IMAGE_REQUIRED = "At least one image is required."

# days until an item drops out of the feed, per category
EXPIRY_DAYS = {
    "Livestock": 60,
    "Agricultural Services": 365,
}
DEFAULT_EXPIRY_DAYS = 90
HARVEST_EXPIRY_DAYS = 14


def compute_expires_at(category: str, details: Dict[str, Any], now: Optional[datetime] = None) -> datetime:
    now = now or utc_now()
    harvest = details.get("harvestDate")
    if category == "Crops" and isinstance(harvest, datetime):
        return harvest + timedelta(days=HARVEST_EXPIRY_DAYS)
    return now + timedelta(days=EXPIRY_DAYS.get(category, DEFAULT_EXPIRY_DAYS))


def load_or_404(collection, item_id: str, label: str) -> Dict[str, Any]:
    doc = collection.find_one({"_id": parse_object_id(item_id)})
    if not doc:
        raise NotFoundError(f"{label} not found")
    return doc


def validate_item(model_cls: Type[BaseModel], payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate a full listing/product payload and return the clean document body.

    The image check runs first so a form with no photos gets the one message
    sellers actually need.
    """
    if not isinstance(payload, dict):
        raise BadRequestError("Request body must be a JSON object")
    if not payload.get("imageUrls"):
        raise BadRequestError(IMAGE_REQUIRED)

    model = model_cls.model_validate(payload)
    data = model.model_dump()
    data["details"] = validate_details(model.category, model.subCategory, payload.get("details"))
    if data.get("discountedPrice") is None:
        data.pop("discountedPrice", None)
    return data


def seo_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    seo = generate_seo(
        data.get("category"),
        data.get("subCategory"),
        data.get("details"),
        data.get("location"),
        data.get("name", ""),
    )
    return {"seo": seo, "slug": seo.get("slug")}


def merge_for_update(model_cls: Type[BaseModel], existing: Dict[str, Any], patch: Dict[str, Any]) -> Dict[str, Any]:
    """Apply `patch` over the stored document and re-check the whole thing."""
    if not isinstance(patch, dict):
        raise BadRequestError("Request body must be a JSON object")

    fields = model_cls.model_fields
    merged = {k: v for k, v in existing.items() if k in fields}
    merged.update({k: v for k, v in patch.items() if k in fields})

    # switching category without new details would keep the old category's keys
    if "category" in patch and patch["category"] != existing.get("category") and "details" not in patch:
        raise BadRequestError("details are required when changing category")

    data = validate_item(model_cls, merged)
    return {k: v for k, v in data.items() if k in patch or k == "details"}


def check_status_change(existing: Dict[str, Any], patch: Dict[str, Any], admin: bool) -> None:
    if admin or "status" not in patch:
        return
    if patch["status"] == "suspended" or existing.get("status") == "suspended":
        raise ForbiddenError("Only an administrator can change a suspended item")


def seller_contact(user: Dict[str, Any], payload: Dict[str, Any]) -> Dict[str, Any]:
    email = payload.get("sellerEmail") or user.get("email")
    phone = payload.get("contactPhone") or user.get("phoneNumber")
    out = {}
    if email:
        out["sellerEmail"] = str(email).strip().lower()
    if phone:
        out["contactPhone"] = str(phone).strip()
    return out
