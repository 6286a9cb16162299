# backend/routes/shop/wishlist_routes.py

from __future__ import annotations

from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required

from backend.security import current_user_id
from backend.services.wishlist_service import WishlistService

wishlist_bp = Blueprint("wishlist", __name__, url_prefix="/api/wishlist")


@wishlist_bp.get("/", strict_slashes=False)
@jwt_required()
def get_wishlist():
    return jsonify(WishlistService.get_products(current_user_id())), 200


@wishlist_bp.post("/<product_id>")
@jwt_required()
def add_to_wishlist(product_id: str):
    WishlistService.add(current_user_id(), product_id)
    return jsonify(message="Product added to wishlist"), 200


@wishlist_bp.delete("/<product_id>")
@jwt_required()
def remove_from_wishlist(product_id: str):
    WishlistService.remove(current_user_id(), product_id)
    return jsonify(message="Product removed from wishlist"), 200
