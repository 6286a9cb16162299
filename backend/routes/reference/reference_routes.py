# backend/routes/reference/reference_routes.py

from __future__ import annotations

from flask import Blueprint, jsonify, request

from backend.services.reference_service import ReferenceService

reference_bp = Blueprint("reference", __name__, url_prefix="/api/reference")


# ------------------------------------------------------------
# Locations
# ------------------------------------------------------------
@reference_bp.get("/districts")
def get_districts():
    return jsonify(ReferenceService.get_districts(request.args.get("region"))), 200


@reference_bp.get("/districts/<district>/subcounties")
def get_subcounties(district: str):
    return jsonify(ReferenceService.get_subcounties(district)), 200


@reference_bp.get("/districts/<district>/subcounties/<subcounty>/parishes")
def get_parishes(district: str, subcounty: str):
    return jsonify(ReferenceService.get_parishes(district, subcounty)), 200


# ------------------------------------------------------------
# Agriculture
# ------------------------------------------------------------
@reference_bp.get("/crop-types")
def get_crop_types():
    args = request.args
    return jsonify(ReferenceService.get_crop_types(args.get("category"), args.get("search"))), 200


@reference_bp.get("/livestock-breeds")
def get_livestock_breeds():
    args = request.args
    return jsonify(ReferenceService.get_livestock_breeds(args.get("animalType"), args.get("search"))), 200


@reference_bp.get("/categories")
def get_categories():
    return jsonify(ReferenceService.get_categories()), 200


@reference_bp.get("/fields")
def get_subcategory_fields():
    args = request.args
    return jsonify(ReferenceService.get_subcategory_fields(args.get("category"), args.get("subCategory"))), 200


@reference_bp.get("/units")
def get_units():
    return jsonify(ReferenceService.get_units()), 200
