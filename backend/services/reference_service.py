# backend/services/reference_service.py

from __future__ import annotations

import re
from typing import Any, Dict, Optional

from backend.data.reference_data import CROP_TYPES, DISTRICTS, LIVESTOCK_BREEDS
from backend.errors import BadRequestError, NotFoundError
from backend.models.details_models import subcategory_fields
from backend.models.listing_models import AGRICULTURE_CATEGORIES
from backend.mongo import mongo
from backend.utils.dates import utc_now
from backend.utils.serialize import serialize_docs

CATEGORY_META = {
    "Crops": ("🌾", "Agricultural crops and produce"),
    "Livestock": ("🐄", "Livestock and animals"),
    "Agricultural Inputs": ("🌱", "Farm inputs and supplies"),
    "Equipment & Tools": ("🚜", "Agricultural equipment and tools"),
    "Agricultural Services": ("🤝", "Agricultural services"),
}

UNIT_GROUPS = {
    "weight": ["kg", "bags", "tonnes"],
    "volume": ["litres", "crates"],
    "count": ["pieces", "bunches", "animals"],
    "area": ["acres", "hectares"],
    "time": ["hours", "days"],
    "other": ["units"],
}


def _ci(term: str) -> Dict[str, str]:
    return {"$regex": re.escape(term), "$options": "i"}


class ReferenceService:
    # ------------------------------------------------------------
    # LOCATIONS
    # ------------------------------------------------------------
    @staticmethod
    def get_districts(region: Optional[str] = None) -> Dict[str, Any]:
        flt = {"region": region} if region else {}
        districts = serialize_docs(
            mongo.db.districts.find(flt, {"name": 1, "region": 1, "code": 1, "subcounties": 1}).sort("name", 1)
        )
        return {"success": True, "districts": districts, "total": len(districts)}

    @staticmethod
    def _district(name: str) -> Dict[str, Any]:
        doc = mongo.db.districts.find_one({"name": name})
        if not doc:
            raise NotFoundError("District not found")
        return doc

    @staticmethod
    def get_subcounties(district: str) -> Dict[str, Any]:
        doc = ReferenceService._district(district)
        return {"success": True, "district": doc["name"], "subcounties": doc.get("subcounties") or []}

    @staticmethod
    def get_parishes(district: str, subcounty: str) -> Dict[str, Any]:
        doc = ReferenceService._district(district)
        sc = next((s for s in doc.get("subcounties") or [] if s.get("name") == subcounty), None)
        if sc is None:
            raise NotFoundError("Subcounty not found")
        return {
            "success": True,
            "district": doc["name"],
            "subcounty": sc["name"],
            "parishes": sc.get("parishes") or [],
        }

    # ------------------------------------------------------------
    # CROPS / LIVESTOCK
    # ------------------------------------------------------------
    @staticmethod
    def get_crop_types(category: Optional[str] = None, search: Optional[str] = None) -> Dict[str, Any]:
        flt: Dict[str, Any] = {}
        if category:
            flt["category"] = category
        if search:
            flt["$or"] = [{"name": _ci(search)}, {"commonVarieties": _ci(search)}]
        crop_types = serialize_docs(
            mongo.db.crop_types.find(
                flt, {"name": 1, "category": 1, "commonVarieties": 1, "seasonality": 1, "icon": 1}
            ).sort("name", 1)
        )
        return {"success": True, "cropTypes": crop_types, "total": len(crop_types)}

    @staticmethod
    def get_livestock_breeds(animal_type: Optional[str] = None, search: Optional[str] = None) -> Dict[str, Any]:
        flt: Dict[str, Any] = {}
        if animal_type:
            flt["animalType"] = animal_type
        if search:
            flt["name"] = _ci(search)
        breeds = serialize_docs(
            mongo.db.livestock_breeds.find(
                flt, {"name": 1, "animalType": 1, "purpose": 1, "characteristics": 1, "icon": 1}
            ).sort("name", 1)
        )
        return {"success": True, "breeds": breeds, "total": len(breeds)}

    # ------------------------------------------------------------
    # STATIC
    # ------------------------------------------------------------
    @staticmethod
    def get_categories() -> Dict[str, Any]:
        categories = {}
        for name, subs in AGRICULTURE_CATEGORIES.items():
            icon, description = CATEGORY_META[name]
            categories[name] = {"subcategories": list(subs), "icon": icon, "description": description}
        return {"success": True, "categories": categories}

    @staticmethod
    def get_subcategory_fields(category: Optional[str], sub_category: Optional[str]) -> Dict[str, Any]:
        """Which detail fields a listing form shows (and requires) for one subcategory."""
        if not category or not sub_category:
            raise BadRequestError("category and subCategory are required")
        if sub_category not in AGRICULTURE_CATEGORIES.get(category, ()):
            raise NotFoundError("Subcategory not found")
        return {
            "success": True,
            "category": category,
            "subCategory": sub_category,
            **subcategory_fields(category, sub_category),
        }

    @staticmethod
    def get_units() -> Dict[str, Any]:
        return {"success": True, "units": UNIT_GROUPS}

    # ------------------------------------------------------------
    # SEED
    # ------------------------------------------------------------
    @staticmethod
    def seed(db=None) -> Dict[str, int]:
        """Upsert the bundled reference documents by name. Safe to run repeatedly."""
        db = db if db is not None else mongo.db
        now = utc_now()
        counts = {}
        for collection, docs in (
            ("districts", DISTRICTS),
            ("crop_types", CROP_TYPES),
            ("livestock_breeds", LIVESTOCK_BREEDS),
        ):
            for doc in docs:
                db[collection].update_one(
                    {"name": doc["name"]},
                    {"$set": {**doc, "updatedAt": now}, "$setOnInsert": {"createdAt": now}},
                    upsert=True,
                )
            counts[collection] = len(docs)
        return counts
