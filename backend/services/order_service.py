# backend/services/order_service.py

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pymongo import ReturnDocument

from backend.errors import BadRequestError, ForbiddenError, NotFoundError
from backend.models.order_models import (
    ORDER_TRANSITIONS,
    OrderCreateModel,
    PaymentResultModel,
    StatusUpdateModel,
)
from backend.mongo import mongo
from backend.services.cart_service import unit_price
from backend.utils.dates import utc_now
from backend.utils.serialize import parse_object_id, serialize_doc, serialize_docs

NO_ITEMS = "No order items"


def _history(status: str, description: str) -> Dict[str, Any]:
    return {"status": status, "description": description, "timestamp": utc_now()}


def _money(x: float) -> float:
    return round(float(x), 2)


def _load(order_id: str) -> Dict[str, Any]:
    order = mongo.db.orders.find_one({"_id": parse_object_id(order_id)})
    if not order:
        raise NotFoundError("Order not found")
    return order


def _attach_user(orders: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    ids = list({o["user"] for o in orders if o.get("user")})
    users = {
        u["_id"]: u
        for u in mongo.db.users.find({"_id": {"$in": ids}}, {"username": 1, "email": 1})
    }
    for o in orders:
        u = users.get(o.get("user"))
        o["user"] = {"_id": u["_id"], "username": u.get("username"), "email": u.get("email")} if u else o.get("user")
    return orders


class OrderService:
    # ------------------------------------------------------------
    # CREATE
    # ------------------------------------------------------------
    @staticmethod
    def create_order(user: Dict[str, Any], body: Dict[str, Any]) -> Dict[str, Any]:
        body = body or {}
        if not body.get("orderItems"):
            raise BadRequestError(NO_ITEMS)
        data = OrderCreateModel.model_validate(body)

        items = []
        for item in data.orderItems:
            product_oid = parse_object_id(item.product, "product")
            product = mongo.db.products.find_one({"_id": product_oid})
            if not product:
                raise NotFoundError(f"Product not found: {item.product}")
            sku = (item.variant or {}).get("sku")
            price, variant = unit_price(product, sku)
            items.append({
                "product": product_oid,
                "name": item.name or product.get("name"),
                "quantity": item.quantity,
                "image": item.image or (product.get("imageUrls") or [None])[0],
                "price": price,
                "variant": {"name": variant.get("name"), "sku": sku} if variant else None,
            })

        items_price = _money(sum(i["price"] * i["quantity"] for i in items))
        now = utc_now()
        doc = {
            "user": user["_id"],
            "orderItems": items,
            "shippingAddress": data.shippingAddress.model_dump(exclude_none=True),
            "paymentMethod": data.paymentMethod,
            "itemsPrice": items_price,
            "taxPrice": _money(data.taxPrice),
            "shippingPrice": _money(data.shippingPrice),
            "totalPrice": _money(items_price + data.taxPrice + data.shippingPrice),
            "status": "Pending",
            "statusHistory": [_history("Pending", "Order placed successfully")],
            "isPaid": False,
            "paidAt": None,
            "isDelivered": False,
            "deliveredAt": None,
            "createdAt": now,
            "updatedAt": now,
        }
        doc["_id"] = mongo.db.orders.insert_one(doc).inserted_id
        return serialize_doc(doc)

    # ------------------------------------------------------------
    # READ
    # ------------------------------------------------------------
    @staticmethod
    def get_order(user: Dict[str, Any], order_id: str) -> Dict[str, Any]:
        order = _load(order_id)
        if order.get("user") != user["_id"] and not user.get("isAdmin"):
            raise ForbiddenError("Not authorized to view this order")
        return serialize_doc(_attach_user([order])[0])

    @staticmethod
    def get_my_orders(user_oid) -> List[Dict[str, Any]]:
        return serialize_docs(mongo.db.orders.find({"user": user_oid}).sort("createdAt", -1))

    @staticmethod
    def get_all_orders(status: Optional[str] = None) -> List[Dict[str, Any]]:
        flt = {"status": status} if status else {}
        orders = list(mongo.db.orders.find(flt).sort("createdAt", -1))
        return serialize_docs(_attach_user(orders))

    # ------------------------------------------------------------
    # STATUS TRANSITIONS
    # ------------------------------------------------------------
    @staticmethod
    def transition(order: Dict[str, Any], new_status: str, description: Optional[str] = None,
                   extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        current = order.get("status", "Pending")
        if new_status not in ORDER_TRANSITIONS.get(current, ()):
            raise BadRequestError(f"Cannot change order status from {current} to {new_status}")

        now = utc_now()
        changes: Dict[str, Any] = {"status": new_status, "updatedAt": now, **(extra or {})}
        if new_status == "Delivered":
            changes.update(isDelivered=True, deliveredAt=now)
        if new_status == "Cancelled":
            changes.update(cancelledAt=now, cancellationReason=description)

        updated = mongo.db.orders.find_one_and_update(
            {"_id": order["_id"], "status": current},
            {
                "$set": changes,
                "$push": {"statusHistory": _history(new_status, description or f"Order status updated to {new_status}")},
            },
            return_document=ReturnDocument.AFTER,
        )
        if not updated:
            raise BadRequestError("Order was modified concurrently, retry")
        return serialize_doc(updated)

    @staticmethod
    def pay(user: Dict[str, Any], order_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        order = _load(order_id)
        if order.get("user") != user["_id"] and not user.get("isAdmin"):
            raise ForbiddenError("Not authorized to pay for this order")
        if order.get("status") == "Cancelled":
            raise BadRequestError("Cannot pay for a cancelled order")

        now = utc_now()
        payment = {
            "isPaid": True,
            "paidAt": now,
            "paymentResult": PaymentResultModel.model_validate(body or {}).model_dump(),
        }
        if order.get("status") == "Pending":
            return OrderService.transition(
                order, "Processing", "Payment confirmed. Order is being processed.", extra=payment
            )

        updated = mongo.db.orders.find_one_and_update(
            {"_id": order["_id"]},
            {
                "$set": {**payment, "updatedAt": now},
                "$push": {"statusHistory": _history(order.get("status"), "Payment information updated.")},
            },
            return_document=ReturnDocument.AFTER,
        )
        return serialize_doc(updated)

    @staticmethod
    def deliver(order_id: str) -> Dict[str, Any]:
        return OrderService.transition(_load(order_id), "Delivered", "Package delivered to customer.")

    @staticmethod
    def update_status(order_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        data = StatusUpdateModel.model_validate(body or {})
        return OrderService.transition(_load(order_id), data.status, data.description)

    @staticmethod
    def cancel(order_id: str, reason: Optional[str] = None) -> Dict[str, Any]:
        return OrderService.transition(_load(order_id), "Cancelled", reason or "Order cancelled by admin")
