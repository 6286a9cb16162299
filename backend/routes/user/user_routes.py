# backend/routes/user/user_routes.py

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from backend.cache import no_cache
from backend.security import current_user
from backend.services.user_service import UserService

user_bp = Blueprint("user", __name__, url_prefix="/api/user")


# ------------------------------------------------------------
# Profile
# ------------------------------------------------------------
@user_bp.get("/<user_id>")
@no_cache
def get_user(user_id: str):
    return jsonify(UserService.get_user(user_id)), 200


@user_bp.route("/update/<user_id>", methods=["PATCH", "POST"])
@jwt_required()
def update_user(user_id: str):
    user = UserService.update_user(current_user(), user_id, request.get_json(silent=True) or {})
    return jsonify(user), 200


@user_bp.delete("/delete/<user_id>")
@jwt_required()
def delete_user(user_id: str):
    UserService.delete_user(current_user(), user_id)
    return jsonify(success=True, message="User has been deleted!"), 200


# ------------------------------------------------------------
# Selling
# ------------------------------------------------------------
@user_bp.post("/register-vendor")
@jwt_required()
def register_vendor():
    user = UserService.register_vendor(current_user(), request.get_json(silent=True) or {})
    return jsonify(success=True, message="Vendor registration submitted", user=user), 200


@user_bp.get("/products/<user_id>")
@jwt_required()
def get_user_items(user_id: str):
    return jsonify(UserService.get_user_items(user_id)), 200
