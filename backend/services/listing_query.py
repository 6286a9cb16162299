# backend/services/listing_query.py
"""
Query-string -> MongoDB query compiler for the listing and product feeds.

Every optional parameter becomes one predicate clause; the clauses are AND-ed
together when the filter is built. A parameter that needs OR semantics (brand)
contributes a single {"$or": [...]} clause, so two OR groups can never
overwrite each other.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

DEFAULT_LIMIT = 12
MAX_LIMIT = 100
DEFAULT_SORT = "-createdAt"

BRAND_FIELDS = ("details.brand", "details.variety", "details.breed", "details.productName")

TEXT_SCORE = {"$meta": "textScore"}

_SORT_FIELD_RE = re.compile(r"^-?[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")

PRODUCT_SORTS: Dict[str, List[Tuple[str, int]]] = {
    "newest": [("createdAt", -1)],
    "price_asc": [("regularPrice", 1)],
    "price_desc": [("regularPrice", -1)],
    "views": [("views", -1)],
    "rating": [("rating", -1)],
}


# ------------------------------------------------------------
# Parsing helpers (never raise)
# ------------------------------------------------------------
def parse_number(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        n = float(value)
    except (TypeError, ValueError):
        return None
    return n if math.isfinite(n) else None


def parse_int(value: Any, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def clamp(n: int, lo: int, hi: Optional[int] = None) -> int:
    n = max(lo, n)
    return n if hi is None else min(hi, n)


def parse_sort(raw: Any, default: str = DEFAULT_SORT) -> List[Tuple[str, int]]:
    order = raw if isinstance(raw, str) and _SORT_FIELD_RE.match(raw) else default
    if order.startswith("-"):
        return [(order[1:], -1)]
    return [(order, 1)]


# ------------------------------------------------------------
# Builder
# ------------------------------------------------------------
class FilterBuilder:
    """Collects predicate clauses; build() ANDs them into one filter document."""

    def __init__(self):
        self._clauses: List[Dict[str, Any]] = []
        self._text: Optional[str] = None

    def add(self, clause: Dict[str, Any]) -> "FilterBuilder":
        if clause:
            self._clauses.append(clause)
        return self

    def eq(self, path: str, value: Any) -> "FilterBuilder":
        if value is None or value == "":
            return self
        return self.add({path: value})

    def between(self, path: str, lo: Optional[float] = None, hi: Optional[float] = None) -> "FilterBuilder":
        bounds: Dict[str, float] = {}
        if lo is not None:
            bounds["$gte"] = lo
        if hi is not None:
            bounds["$lte"] = hi
        if bounds:
            self.add({path: bounds})
        return self

    def any_of(self, clauses: List[Dict[str, Any]]) -> "FilterBuilder":
        if clauses:
            self.add({"$or": list(clauses)})
        return self

    def contains_any(self, paths, text: Optional[str]) -> "FilterBuilder":
        """Case-insensitive substring match of `text` on any of `paths`."""
        if not text:
            return self
        rx = {"$regex": re.escape(text), "$options": "i"}
        return self.any_of([{p: dict(rx)} for p in paths])

    def text(self, term: Optional[str]) -> "FilterBuilder":
        if term:
            self._text = term
        return self

    @property
    def has_text(self) -> bool:
        return self._text is not None

    def build(self) -> Dict[str, Any]:
        flat: Dict[str, Any] = {}
        rest: List[Dict[str, Any]] = []
        for clause in self._clauses:
            # a key seen twice (two $or groups, two bounds on one path) must not overwrite
            if any(k in flat for k in clause):
                rest.append(clause)
            else:
                flat.update(clause)
        if rest:
            flat["$and"] = rest
        if self._text:
            flat["$text"] = {"$search": self._text}
        return flat


@dataclass
class ListingQuery:
    filter: Dict[str, Any]
    sort: List[Tuple[str, Any]]
    skip: int = 0
    limit: int = DEFAULT_LIMIT
    projection: Optional[Dict[str, Any]] = None
    page: int = 1


# ------------------------------------------------------------
# Compilers
# ------------------------------------------------------------
def _apply_common_filters(b: FilterBuilder, args: Mapping[str, Any]) -> None:
    b.eq("category", args.get("category"))
    b.eq("subCategory", args.get("subCategory"))

    b.eq("location.district", args.get("district"))
    b.eq("location.subcounty", args.get("subcounty"))
    b.eq("location.parish", args.get("parish"))

    b.eq("details.cropType", args.get("cropType"))
    b.eq("details.animalType", args.get("animalType"))
    b.eq("details.unit", args.get("unit"))
    # only the literal "true" means anything here
    if args.get("organic") == "true":
        b.eq("details.organic", True)

    b.between("regularPrice", parse_number(args.get("minPrice")), parse_number(args.get("maxPrice")))
    b.between("details.quantity", parse_number(args.get("minQuantity")))

    b.contains_any(BRAND_FIELDS, args.get("brand"))


def _status_clause(b: FilterBuilder, args: Mapping[str, Any], allow_override: bool) -> None:
    status = args.get("status") if allow_override else None
    if status == "all":
        return
    b.eq("status", status or "active")


def compile_listing_query(args: Mapping[str, Any], allow_status_override: bool = False) -> ListingQuery:
    """Compile listing feed parameters (`GET /api/listing`)."""
    b = FilterBuilder()
    _status_clause(b, args, allow_status_override)
    _apply_common_filters(b, args)

    search = (args.get("search") or "").strip() or None
    b.text(search)

    limit = clamp(parse_int(args.get("limit"), DEFAULT_LIMIT), 1, MAX_LIMIT)
    skip = clamp(parse_int(args.get("skip"), 0), 0)

    raw_sort = args.get("sort")
    projection = None
    if search and (not raw_sort or raw_sort == "relevance"):
        sort: List[Tuple[str, Any]] = [("score", TEXT_SCORE)]
        projection = {"score": TEXT_SCORE}
    else:
        sort = parse_sort(raw_sort)

    return ListingQuery(filter=b.build(), sort=sort, skip=skip, limit=limit,
                        projection=projection)


def compile_product_query(args: Mapping[str, Any], public: bool = True) -> ListingQuery:
    """
    Compile product feed parameters (`GET /api/products`).

    Public reads only ever see active + approved products. Admin reads may pass
    `status` / `moderationStatus` (`all` drops the clause).
    """
    b = FilterBuilder()
    if public:
        b.eq("status", "active")
        b.eq("moderationStatus", "approved")
    else:
        _status_clause(b, {"status": args.get("status") or "all"}, True)
        moderation = args.get("moderationStatus")
        if moderation and moderation != "all":
            b.eq("moderationStatus", moderation)

    _apply_common_filters(b, args)
    min_rating = parse_number(args.get("rating"))
    if min_rating is not None:
        b.add({"rating": {"$gte": min_rating}})

    search = (args.get("keyword") or args.get("search") or "").strip() or None
    b.text(search)

    page_size = clamp(parse_int(args.get("pageSize"), DEFAULT_LIMIT), 1, MAX_LIMIT)
    page = clamp(parse_int(args.get("pageNumber"), 1), 1)

    raw_sort = args.get("sort")
    projection = None
    if search and raw_sort == "relevance":
        sort: List[Tuple[str, Any]] = [("score", TEXT_SCORE)]
        projection = {"score": TEXT_SCORE}
    else:
        sort = PRODUCT_SORTS.get(raw_sort or "newest", PRODUCT_SORTS["newest"])

    return ListingQuery(filter=b.build(), sort=list(sort), skip=page_size * (page - 1),
                        limit=page_size, projection=projection, page=page)


def run_listing_query(collection, query: ListingQuery) -> Dict[str, Any]:
    """Execute a compiled query: one page of documents plus the unpaginated total."""
    cursor = collection.find(query.filter, query.projection)
    if query.sort:
        cursor = cursor.sort(query.sort)
    items = list(cursor.skip(query.skip).limit(query.limit))
    total = collection.count_documents(query.filter)
    return {
        "items": items,
        "total": total,
        "hasMore": query.skip + len(items) < total,
    }
