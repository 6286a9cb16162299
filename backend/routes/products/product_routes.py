# backend/routes/products/product_routes.py

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from backend.cache import no_cache
from backend.security import current_user
from backend.services.product_service import ProductService

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


def _body() -> dict:
    return request.get_json(silent=True) or {}


# ------------------------------------------------------------
# Catalog
# ------------------------------------------------------------
@products_bp.get("/", strict_slashes=False)
def get_products():
    return jsonify(ProductService.get_products(request.args)), 200


@products_bp.post("/", strict_slashes=False)
@jwt_required()
def create_product():
    return jsonify(ProductService.create_product(current_user(), _body())), 201


@products_bp.get("/top")
def get_top_products():
    return jsonify(ProductService.get_top_products()), 200


@products_bp.get("/suggestions")
def get_suggestions():
    term = request.args.get("query") or request.args.get("q")
    return jsonify(ProductService.get_suggestions(term)), 200


@products_bp.get("/myproducts")
@jwt_required()
def get_my_products():
    return jsonify(ProductService.get_my_products(current_user()["_id"])), 200


# ------------------------------------------------------------
# Single product
# ------------------------------------------------------------
@products_bp.get("/<product_id>")
@no_cache
def get_product(product_id: str):
    return jsonify(ProductService.get_product(product_id)), 200


@products_bp.put("/<product_id>")
@jwt_required()
def update_product(product_id: str):
    return jsonify(ProductService.update_product(current_user(), product_id, _body())), 200


@products_bp.delete("/<product_id>")
@jwt_required()
def delete_product(product_id: str):
    ProductService.delete_product(current_user(), product_id)
    return jsonify(message="Product removed"), 200


@products_bp.post("/<product_id>/reviews")
@jwt_required()
def create_review(product_id: str):
    ProductService.add_review(current_user(), product_id, _body())
    return jsonify(message="Review added"), 201


@products_bp.post("/<product_id>/contact")
def track_contact(product_id: str):
    ProductService.track_contact(product_id)
    return jsonify(success=True), 200


@products_bp.post("/<product_id>/promote")
@jwt_required()
def promote(product_id: str):
    product = ProductService.promote(current_user(), product_id, _body())
    return jsonify(success=True, message="Product promoted", product=product), 200
