# backend/routes/admin/admin_routes.py
"""
Moderation and management endpoints. Every route needs a bearer token for an
admin account; /api/admin is never served from the response cache.
"""
from __future__ import annotations

from flask import Blueprint, jsonify, request

from backend.security import admin_required, current_user
from backend.services.admin_service import DEFAULT_FEATURE_DAYS, AdminService

admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")


def _body() -> dict:
    return request.get_json(silent=True) or {}


# ------------------------------------------------------------
# Stats
# ------------------------------------------------------------
@admin_bp.get("/stats")
@admin_required
def get_stats():
    return jsonify(success=True, stats=AdminService.get_stats()), 200


# ------------------------------------------------------------
# Users
# ------------------------------------------------------------
@admin_bp.get("/users")
@admin_required
def get_users():
    return jsonify(success=True, users=AdminService.get_users()), 200


@admin_bp.get("/user/<user_id>/activity")
@admin_required
def get_user_activity(user_id: str):
    return jsonify(success=True, **AdminService.get_user_activity(user_id)), 200


@admin_bp.put("/user/<user_id>")
@admin_required
def update_user(user_id: str):
    user = AdminService.update_user(user_id, _body())
    return jsonify(success=True, message="User updated successfully", user=user), 200


@admin_bp.put("/user/<user_id>/ban")
@admin_required
def toggle_ban(user_id: str):
    user = AdminService.toggle_ban(user_id)
    state = "banned" if user.get("isBanned") else "unbanned"
    return jsonify(success=True, message=f"User {state} successfully", user=user), 200


@admin_bp.put("/user/<user_id>/role")
@admin_required
def change_role(user_id: str):
    user = AdminService.change_role(current_user(), user_id, _body())
    return jsonify(success=True, message="User role updated successfully", user=user), 200


@admin_bp.delete("/user/<user_id>")
@admin_required
def delete_user(user_id: str):
    AdminService.delete_user(user_id)
    return jsonify(success=True, message="User and their listings deleted successfully"), 200


# ------------------------------------------------------------
# Products
# ------------------------------------------------------------
@admin_bp.get("/products")
@admin_required
def get_products():
    return jsonify(success=True, **AdminService.get_products(request.args)), 200


@admin_bp.put("/products/<product_id>/approve")
@admin_required
def approve_product(product_id: str):
    product = AdminService.approve_product(current_user(), product_id)
    return jsonify(success=True, message="Product approved", product=product), 200


@admin_bp.put("/products/<product_id>/reject")
@admin_required
def reject_product(product_id: str):
    product = AdminService.reject_product(current_user(), product_id, _body().get("reason"))
    return jsonify(success=True, message="Product rejected", product=product), 200


@admin_bp.put("/products/<product_id>")
@admin_required
def update_product(product_id: str):
    product = AdminService.update_product(current_user(), product_id, _body())
    return jsonify(success=True, message="Product updated successfully", product=product), 200


@admin_bp.put("/products/<product_id>/feature")
@admin_required
def toggle_feature_product(product_id: str):
    product = AdminService.toggle_feature_product(product_id, _body().get("days", DEFAULT_FEATURE_DAYS))
    state = "featured" if product.get("isFeatured") else "unfeatured"
    return jsonify(success=True, message=f"Product {state} successfully", product=product), 200


@admin_bp.delete("/products/<product_id>")
@admin_required
def delete_product(product_id: str):
    AdminService.delete_product(current_user(), product_id)
    return jsonify(success=True, message="Product deleted"), 200


# ------------------------------------------------------------
# Listings
# ------------------------------------------------------------
@admin_bp.get("/listings")
@admin_required
def get_listings():
    return jsonify(AdminService.get_listings(request.args)), 200


@admin_bp.post("/listings/bulk-approve")
@admin_required
def bulk_approve_listings():
    count = AdminService.bulk_approve_listings(current_user(), _body().get("listingIds"))
    return jsonify(success=True, message=f"{count} listings approved", modifiedCount=count), 200


@admin_bp.put("/listings/<listing_id>/approve")
@admin_required
def approve_listing(listing_id: str):
    listing = AdminService.approve_listing(current_user(), listing_id)
    return jsonify(success=True, message="Listing approved successfully", listing=listing), 200


@admin_bp.put("/listings/<listing_id>/reject")
@admin_required
def reject_listing(listing_id: str):
    listing = AdminService.reject_listing(current_user(), listing_id, _body().get("reason"))
    return jsonify(success=True, message="Listing rejected", listing=listing), 200


@admin_bp.put("/listings/<listing_id>")
@admin_required
def update_listing(listing_id: str):
    listing = AdminService.update_listing(current_user(), listing_id, _body())
    return jsonify(success=True, message="Listing updated successfully", listing=listing), 200


@admin_bp.put("/listings/<listing_id>/feature")
@admin_required
def toggle_feature_listing(listing_id: str):
    listing = AdminService.toggle_feature_listing(listing_id, _body().get("days", DEFAULT_FEATURE_DAYS))
    state = "featured" if listing.get("isFeatured") else "unfeatured"
    return jsonify(success=True, message=f"Listing {state} successfully", listing=listing), 200


@admin_bp.delete("/listings/<listing_id>")
@admin_required
def delete_listing(listing_id: str):
    AdminService.delete_listing(current_user(), listing_id)
    return jsonify(success=True, message="Listing moderated successfully"), 200


# ------------------------------------------------------------
# Orders
# ------------------------------------------------------------
@admin_bp.get("/orders")
@admin_required
def get_orders():
    return jsonify(success=True, orders=AdminService.get_orders(request.args.get("status"))), 200


@admin_bp.put("/order/<order_id>/status")
@admin_required
def update_order_status(order_id: str):
    order = AdminService.update_order_status(order_id, _body())
    return jsonify(success=True, message="Order status updated", order=order), 200


@admin_bp.put("/order/<order_id>/cancel")
@admin_required
def cancel_order(order_id: str):
    order = AdminService.cancel_order(order_id, _body().get("reason"))
    return jsonify(success=True, message="Order cancelled", order=order), 200
