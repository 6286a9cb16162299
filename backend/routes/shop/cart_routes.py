# backend/routes/shop/cart_routes.py

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from backend.security import current_user_id
from backend.services.cart_service import CartService

cart_bp = Blueprint("cart", __name__, url_prefix="/api/cart")


@cart_bp.get("/", strict_slashes=False)
@jwt_required()
def get_cart():
    return jsonify(CartService.get_cart(current_user_id())), 200


@cart_bp.post("/", strict_slashes=False)
@jwt_required()
def add_to_cart():
    cart, created = CartService.add_item(current_user_id(), request.get_json(silent=True) or {})
    return jsonify(cart), 201 if created else 200


@cart_bp.delete("/", strict_slashes=False)
@jwt_required()
def clear_cart():
    CartService.clear(current_user_id())
    return jsonify(message="Cart cleared"), 200


@cart_bp.delete("/<product_id>")
@jwt_required()
def remove_from_cart(product_id: str):
    cart = CartService.remove_item(current_user_id(), product_id, request.args.get("sku"))
    return jsonify(cart), 200
