# backend/routes/shop/order_routes.py

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from backend.security import admin_required, current_user
from backend.services.order_service import OrderService

orders_bp = Blueprint("orders", __name__, url_prefix="/api/orders")


def _body() -> dict:
    return request.get_json(silent=True) or {}


# ------------------------------------------------------------
# Buyer
# ------------------------------------------------------------
@orders_bp.post("/", strict_slashes=False)
@jwt_required()
def create_order():
    return jsonify(OrderService.create_order(current_user(), _body())), 201


@orders_bp.get("/myorders")
@jwt_required()
def get_my_orders():
    return jsonify(OrderService.get_my_orders(current_user()["_id"])), 200


@orders_bp.get("/<order_id>")
@jwt_required()
def get_order(order_id: str):
    return jsonify(OrderService.get_order(current_user(), order_id)), 200


@orders_bp.put("/<order_id>/pay")
@jwt_required()
def pay_order(order_id: str):
    return jsonify(OrderService.pay(current_user(), order_id, _body())), 200


# ------------------------------------------------------------
# Admin
# ------------------------------------------------------------
@orders_bp.get("/", strict_slashes=False)
@admin_required
def get_orders():
    return jsonify(OrderService.get_all_orders(request.args.get("status"))), 200


@orders_bp.put("/<order_id>/deliver")
@admin_required
def deliver_order(order_id: str):
    return jsonify(OrderService.deliver(order_id)), 200


@orders_bp.put("/<order_id>/status")
@admin_required
def update_order_status(order_id: str):
    return jsonify(OrderService.update_status(order_id, _body())), 200
