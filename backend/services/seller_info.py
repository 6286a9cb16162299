# backend/services/seller_info.py
from __future__ import annotations

from typing import Any, Dict, List, Tuple

from flask import current_app
from pymongo.errors import PyMongoError

from backend.mongo import mongo
from backend.tasks import run_in_background


def _missing_contact(doc: Dict[str, Any]) -> bool:
    return bool(doc.get("userRef")) and (not doc.get("sellerEmail") or not doc.get("contactPhone"))


def _persist_contacts(collection, updates: List[Tuple[Any, Dict[str, Any]]]) -> None:
    for doc_id, fields in updates:
        collection.update_one({"_id": doc_id}, {"$set": fields})


def backfill_seller_contacts(collection_name: str, docs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Fill missing sellerEmail / contactPhone on `docs` from their owners.

    The filled values are returned right away; writing them back to the
    collection happens on the background queue. Failures only get logged.
    """
    pending = [d for d in docs if _missing_contact(d)]
    if not pending:
        return docs

    owner_ids = list({d["userRef"] for d in pending})
    try:
        users = mongo.db.users.find(
            {"_id": {"$in": owner_ids}},
            {"email": 1, "phoneNumber": 1},
        )
        by_id = {u["_id"]: u for u in users}
    except PyMongoError as e:
        current_app.logger.warning("Seller lookup failed for %s: %s", collection_name, e)
        return docs

    updates: List[Tuple[Any, Dict[str, Any]]] = []
    for doc in pending:
        owner = by_id.get(doc["userRef"])
        if not owner:
            continue
        doc["sellerEmail"] = doc.get("sellerEmail") or owner.get("email")
        doc["contactPhone"] = doc.get("contactPhone") or owner.get("phoneNumber")

        fields = {k: doc[k] for k in ("sellerEmail", "contactPhone") if doc.get(k)}
        if fields:
            updates.append((doc["_id"], fields))

    if updates:
        run_in_background(
            _persist_contacts,
            mongo.db[collection_name],
            updates,
            description=f"seller contact backfill ({collection_name}, {len(updates)} docs)",
        )
    return docs
