# backend/routes/listing/listing_routes.py

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from backend.cache import no_cache
from backend.security import current_user, optional_user
from backend.services.listing_service import ListingService

listing_bp = Blueprint("listing", __name__, url_prefix="/api/listing")

WEBHOOK_SECRET_HEADER = "X-Promote-Secret"


def _body() -> dict:
    return request.get_json(silent=True) or {}


# ------------------------------------------------------------
# Browse
# ------------------------------------------------------------
@listing_bp.get("/", strict_slashes=False)
def get_listings():
    # admins may look past the active-only default
    user = optional_user()
    admin = bool(user and user.get("isAdmin"))
    return jsonify(ListingService.get_listings(request.args, admin=admin)), 200


@listing_bp.get("/featured/all")
def get_featured():
    return jsonify(ListingService.get_featured(request.args)), 200


@listing_bp.get("/district/<district>")
def get_by_district(district: str):
    return jsonify(ListingService.get_by_district(district, request.args)), 200


@listing_bp.get("/suggestions")
def get_suggestions():
    term = request.args.get("query") or request.args.get("q")
    return jsonify(ListingService.get_suggestions(term)), 200


@listing_bp.get("/<listing_id>")
@no_cache
def get_listing(listing_id: str):
    return jsonify(ListingService.get_listing(listing_id)), 200


# ------------------------------------------------------------
# Write (owner or admin)
# ------------------------------------------------------------
@listing_bp.post("/create")
@jwt_required()
def create_listing():
    listing = ListingService.create_listing(current_user(), _body())
    return jsonify(listing), 201


@listing_bp.put("/<listing_id>")
@jwt_required()
def update_listing(listing_id: str):
    return jsonify(ListingService.update_listing(current_user(), listing_id, _body())), 200


@listing_bp.delete("/<listing_id>")
@jwt_required()
def delete_listing(listing_id: str):
    ListingService.delete_listing(current_user(), listing_id)
    return jsonify(success=True, message="Listing has been deleted!"), 200


# ------------------------------------------------------------
# Engagement / promotion
# ------------------------------------------------------------
@listing_bp.post("/<listing_id>/contact")
def track_contact(listing_id: str):
    ListingService.track_contact(listing_id)
    return jsonify(success=True), 200


@listing_bp.post("/<listing_id>/promote")
@jwt_required()
def promote(listing_id: str):
    listing = ListingService.promote(listing_id, _body(), user=current_user())
    return jsonify(success=True, message="Listing promoted", listing=listing), 200


@listing_bp.post("/<listing_id>/boost")
@jwt_required()
def boost(listing_id: str):
    listing = ListingService.boost(listing_id, _body(), user=current_user())
    return jsonify(success=True, message="Listing boosted", listing=listing), 200


# ------------------------------------------------------------
# Payment provider callbacks, authenticated by shared secret
# ------------------------------------------------------------
@listing_bp.post("/promote/webhook/<listing_id>")
def promote_webhook(listing_id: str):
    ListingService.check_webhook_secret(request.headers.get(WEBHOOK_SECRET_HEADER))
    listing = ListingService.promote(listing_id, _body())
    return jsonify(success=True, message="Listing promoted", listing=listing), 200


@listing_bp.post("/boost/webhook/<listing_id>")
def boost_webhook(listing_id: str):
    ListingService.check_webhook_secret(request.headers.get(WEBHOOK_SECRET_HEADER))
    listing = ListingService.boost(listing_id, _body())
    return jsonify(success=True, message="Listing boosted", listing=listing), 200
