# backend/services/cart_service.py

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from backend.errors import BadRequestError, NotFoundError
from backend.models.cart_models import CartAddModel
from backend.mongo import mongo
from backend.utils.dates import utc_now
from backend.utils.serialize import parse_object_id, serialize_doc


def unit_price(product: Dict[str, Any], sku: Optional[str]) -> Tuple[float, Optional[Dict[str, Any]]]:
    """Current price of a product (or one of its variants) and the matched variant."""
    if sku:
        for v in product.get("variants") or []:
            if v.get("sku") == sku:
                return float(v.get("price", 0)), v
        raise BadRequestError("Variant not found for this product")
    if product.get("offer") and product.get("discountedPrice") is not None:
        return float(product["discountedPrice"]), None
    return float(product.get("regularPrice", 0)), None


def _same_line(item: Dict[str, Any], product_oid, sku: Optional[str]) -> bool:
    if item.get("product") != product_oid:
        return False
    item_sku = (item.get("variant") or {}).get("sku")
    return item_sku == sku


class CartService:
    @staticmethod
    def get_cart(user_oid) -> Dict[str, Any]:
        cart = mongo.db.carts.find_one({"user": user_oid})
        if not cart:
            return {"user": str(user_oid), "cartItems": []}
        return serialize_doc(cart)

    @staticmethod
    def add_item(user_oid, body: Dict[str, Any]) -> Tuple[Dict[str, Any], bool]:
        """Add a product or bump its quantity. Returns (cart, created)."""
        data = CartAddModel.model_validate(body or {})
        product_oid = parse_object_id(data.product, "product")
        product = mongo.db.products.find_one({"_id": product_oid})
        if not product:
            raise NotFoundError("Product not found")

        sku = data.variant.sku if data.variant else None
        price, variant = unit_price(product, sku)

        carts = mongo.db.carts
        cart = carts.find_one({"user": user_oid})
        created = cart is None
        items: List[Dict[str, Any]] = list(cart.get("cartItems", [])) if cart else []

        for item in items:
            if _same_line(item, product_oid, sku):
                item["quantity"] = int(item.get("quantity", 0)) + data.quantity
                break
        else:
            items.append({
                "product": product_oid,
                "name": product.get("name"),
                "quantity": data.quantity,
                "image": (product.get("imageUrls") or [None])[0],
                "price": price,
                "variant": {"name": variant.get("name"), "sku": sku} if variant else None,
            })

        now = utc_now()
        carts.update_one(
            {"user": user_oid},
            {"$set": {"cartItems": items, "updatedAt": now}, "$setOnInsert": {"createdAt": now}},
            upsert=True,
        )
        return serialize_doc(carts.find_one({"user": user_oid})), created

    @staticmethod
    def remove_item(user_oid, product_id: str, sku: Optional[str] = None) -> Dict[str, Any]:
        product_oid = parse_object_id(product_id, "productId")
        cart = mongo.db.carts.find_one({"user": user_oid})
        if not cart:
            raise NotFoundError("Cart not found")

        items = [
            i for i in cart.get("cartItems", [])
            if not (i.get("product") == product_oid and (not sku or (i.get("variant") or {}).get("sku") == sku))
        ]
        mongo.db.carts.update_one(
            {"_id": cart["_id"]},
            {"$set": {"cartItems": items, "updatedAt": utc_now()}},
        )
        cart["cartItems"] = items
        return serialize_doc(cart)

    @staticmethod
    def clear(user_oid) -> None:
        res = mongo.db.carts.update_one(
            {"user": user_oid},
            {"$set": {"cartItems": [], "updatedAt": utc_now()}},
        )
        if res.matched_count == 0:
            raise NotFoundError("Cart not found")
