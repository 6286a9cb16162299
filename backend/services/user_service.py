# backend/services/user_service.py

from __future__ import annotations

from typing import Any, Dict

from pymongo import ReturnDocument

from backend.cache import invalidate_cache
from backend.errors import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from backend.models.user_models import UserUpdateModel, VendorRegistrationModel
from backend.mongo import mongo
from backend.security import hash_password
from backend.utils.dates import utc_now
from backend.utils.phone_utils import normalize_ugandan_phone
from backend.utils.serialize import parse_object_id, public_user, serialize_docs

PUBLIC_PROJECTION = {"password": 0}


def check_unique_fields(changes: Dict[str, Any], user_oid) -> None:
    """Phone, email and username must stay unique across accounts."""
    users = mongo.db.users
    for key, message in (
        ("phoneNumber", "Phone number already registered."),
        ("email", "Email already registered."),
        ("username", "Username already taken."),
    ):
        if key in changes and users.find_one({key: changes[key], "_id": {"$ne": user_oid}}):
            raise ConflictError(message)


def normalize_contact_fields(changes: Dict[str, Any]) -> Dict[str, Any]:
    if "phoneNumber" in changes:
        phone = normalize_ugandan_phone(changes["phoneNumber"])
        if not phone:
            raise BadRequestError("Invalid Ugandan phone number format")
        changes["phoneNumber"] = phone
    if "email" in changes:
        email = (changes["email"] or "").strip().lower()
        if "@" not in email:
            raise BadRequestError("Invalid email format")
        changes["email"] = email
    return changes


class UserService:
    @staticmethod
    def get_user(user_id: str) -> Dict[str, Any]:
        user = mongo.db.users.find_one({"_id": parse_object_id(user_id)}, PUBLIC_PROJECTION)
        if not user:
            raise NotFoundError("User not found")
        return public_user(user)

    @staticmethod
    def update_user(requester: Dict[str, Any], user_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        target = parse_object_id(user_id)
        if requester["_id"] != target:
            raise ForbiddenError("You can only update your own account")

        data = UserUpdateModel.model_validate(body or {})
        changes = data.model_dump(exclude_none=True)
        normalize_contact_fields(changes)
        check_unique_fields(changes, target)
        if "password" in changes:
            changes["password"] = hash_password(changes["password"])
        if not changes:
            raise BadRequestError("Nothing to update")
        changes["updatedAt"] = utc_now()

        updated = mongo.db.users.find_one_and_update(
            {"_id": target},
            {"$set": changes},
            projection=PUBLIC_PROJECTION,
            return_document=ReturnDocument.AFTER,
        )
        if not updated:
            raise NotFoundError("User not found")
        return public_user(updated)

    @staticmethod
    def delete_user(requester: Dict[str, Any], user_id: str) -> None:
        target = parse_object_id(user_id)
        if requester["_id"] != target:
            raise ForbiddenError("You can only delete your own account")
        mongo.db.users.delete_one({"_id": target})
        mongo.db.carts.delete_one({"user": target})
        mongo.db.wishlists.delete_one({"user": target})

    @staticmethod
    def register_vendor(user: Dict[str, Any], body: Dict[str, Any]) -> Dict[str, Any]:
        data = VendorRegistrationModel.model_validate(body or {})
        profile = {**data.model_dump(exclude_none=True), "verificationStatus": "pending"}
        # admins keep their role
        role = "admin" if user.get("role") == "admin" else "seller"

        updated = mongo.db.users.find_one_and_update(
            {"_id": user["_id"]},
            {"$set": {
                "vendorProfile": profile,
                "role": role,
                "isSeller": True,
                "updatedAt": utc_now(),
            }},
            projection=PUBLIC_PROJECTION,
            return_document=ReturnDocument.AFTER,
        )
        return public_user(updated)

    @staticmethod
    def get_user_items(user_id: str) -> Dict[str, Any]:
        oid = parse_object_id(user_id)
        products = mongo.db.products.find({"userRef": oid}).sort("createdAt", -1)
        listings = mongo.db.listings.find({"userRef": oid}).sort("createdAt", -1)
        return {
            "success": True,
            "products": serialize_docs(products),
            "listings": serialize_docs(listings),
        }


def invalidate_catalog_caches() -> None:
    invalidate_cache("/api/listing")
    invalidate_cache("/api/products")
