# backend/models/listing_models.py
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

AGRICULTURE_CATEGORIES: Dict[str, List[str]] = {
    "Crops": ["Grains & Cereals", "Legumes & Pulses", "Vegetables", "Fruits", "Root Crops", "Cash Crops"],
    "Livestock": ["Cattle", "Goats & Sheep", "Poultry", "Pigs", "Fish & Aquaculture", "Other Livestock"],
    "Agricultural Inputs": ["Seeds & Seedlings", "Fertilizers", "Pesticides & Chemicals", "Animal Feed", "Veterinary Products"],
    "Equipment & Tools": ["Tractors & Machinery", "Hand Tools", "Irrigation Equipment", "Processing Equipment", "Transport Equipment"],
    "Agricultural Services": ["Land Preparation", "Planting Services", "Harvesting Services", "Transport & Logistics", "Veterinary Services", "Agronomy Services"],
}

UNITS = [
    "kg", "bags", "tonnes", "crates", "bunches", "pieces", "litres",
    "acres", "hectares", "units", "animals", "hours", "days",
]

LISTING_STATUSES = ("active", "sold", "expired", "suspended")
PRODUCT_STATUSES = LISTING_STATUSES + ("draft",)
MODERATION_STATUSES = ("pending", "approved", "rejected")

MAX_IMAGES = 10


class GeoPoint(BaseModel):
    type: Literal["Point"] = "Point"
    coordinates: List[float] = Field(default_factory=lambda: [0.0, 0.0], min_length=2, max_length=2)


class LocationModel(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    district: str = Field(..., min_length=1)
    subcounty: str = Field(..., min_length=1)
    parish: Optional[str] = None
    village: Optional[str] = None
    coordinates: GeoPoint = Field(default_factory=GeoPoint)

    @field_validator("coordinates", mode="before")
    @classmethod
    def _point(cls, v):
        # accept a bare [lng, lat] pair as well as GeoJSON
        if v is None:
            return GeoPoint()
        if isinstance(v, (list, tuple)):
            return {"type": "Point", "coordinates": list(v)}
        return v


def _check_category(category: str, sub_category: str) -> None:
    subs = AGRICULTURE_CATEGORIES.get(category)
    if subs is None:
        raise ValueError(f"{category} is not a valid category")
    if sub_category not in subs:
        raise ValueError(f"{sub_category} is not valid for {category}")


def _check_offer(offer: bool, regular: float, discounted: Optional[float]) -> None:
    if not offer:
        return
    if discounted is None:
        raise ValueError("discountedPrice is required when offer is true")
    if discounted >= regular:
        raise ValueError("Discounted price must be lower than regular price")


class ListingModel(BaseModel):
    """Full listing document as accepted on create (and re-checked on update)."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=1000)
    category: str
    subCategory: str
    location: LocationModel
    regularPrice: float = Field(..., ge=0)
    discountedPrice: Optional[float] = Field(None, ge=0)
    offer: bool = False
    negotiable: bool = False
    details: Dict[str, Any] = Field(default_factory=dict)
    imageUrls: List[str] = Field(..., min_length=1, max_length=MAX_IMAGES)
    imagePublicIds: List[str] = Field(default_factory=list)
    status: Literal["active", "sold", "expired", "suspended"] = "active"

    @model_validator(mode="after")
    def _invariants(self):
        _check_category(self.category, self.subCategory)
        _check_offer(self.offer, self.regularPrice, self.discountedPrice)
        return self


class VariantModel(BaseModel):
    name: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    stock: int = Field(0, ge=0)
    sku: Optional[str] = None
    weight: Optional[float] = None
    images: List[str] = Field(default_factory=list)


class ProductModel(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=2000)
    brand: Optional[str] = None
    category: str
    subCategory: str
    location: LocationModel
    regularPrice: float = Field(..., ge=0)
    discountedPrice: Optional[float] = Field(None, ge=0)
    offer: bool = False
    countInStock: int = Field(0, ge=0)
    hasVariants: bool = False
    variants: List[VariantModel] = Field(default_factory=list)
    details: Dict[str, Any] = Field(default_factory=dict)
    imageUrls: List[str] = Field(..., min_length=1, max_length=MAX_IMAGES)
    imagePublicIds: List[str] = Field(default_factory=list)
    status: Literal["active", "sold", "expired", "suspended", "draft"] = "active"

    @model_validator(mode="after")
    def _invariants(self):
        _check_category(self.category, self.subCategory)
        _check_offer(self.offer, self.regularPrice, self.discountedPrice)
        if self.hasVariants and not self.variants:
            raise ValueError("variants are required when hasVariants is true")
        return self


class PromoteModel(BaseModel):
    days: int = Field(7, ge=1, le=365)
    districts: List[str] = Field(default_factory=list)


class BoostModel(BaseModel):
    hours: int = Field(24, ge=1, le=24 * 30)


class ReviewModel(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: str = Field("", max_length=1000)
