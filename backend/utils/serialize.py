# backend/utils/serialize.py
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Iterable, List

from bson import ObjectId

from backend.errors import BadRequestError

# Never leaves the API
PRIVATE_USER_FIELDS = ("password",)


def to_json(value: Any) -> Any:
    """Recursively convert BSON values (ObjectId, datetime) into JSON-safe ones."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json(v) for v in value]
    return value


def serialize_doc(doc: dict | None) -> dict | None:
    if doc is None:
        return None
    return to_json(doc)


def serialize_docs(docs: Iterable[dict]) -> List[dict]:
    return [to_json(d) for d in docs]


def public_user(doc: dict | None) -> dict | None:
    if doc is None:
        return None
    return to_json({k: v for k, v in doc.items() if k not in PRIVATE_USER_FIELDS})


def parse_object_id(value: Any, name: str = "id") -> ObjectId:
    if isinstance(value, ObjectId):
        return value
    if not value or not ObjectId.is_valid(str(value)):
        raise BadRequestError(f"Invalid id for param '{name}'")
    return ObjectId(str(value))
