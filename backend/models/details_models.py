# backend/models/details_models.py
"""
Category-specific `details` sub-document.

Each category has one closed pydantic model (unknown keys rejected) and each
(category, subCategory) pair narrows the allowed keys further and names the
keys a seller must fill in.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from backend.errors import BadRequestError, format_validation_errors
from backend.utils.dates import as_naive_utc

Unit = Literal[
    "kg", "bags", "tonnes", "crates", "bunches", "pieces", "litres",
    "acres", "hectares", "units", "animals", "hours", "days",
]


class _DetailsBase(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


def _split_list(v: Any) -> Any:
    if isinstance(v, str):
        return [p.strip() for p in v.split(",") if p.strip()]
    return v


def _naive(v: Optional[datetime]) -> Optional[datetime]:
    return as_naive_utc(v) if v is not None else None


class CropDetails(_DetailsBase):
    cropType: Optional[str] = None
    variety: Optional[str] = None
    quantity: Optional[float] = Field(None, gt=0)
    unit: Optional[Unit] = None
    pricePerUnit: Optional[float] = Field(None, gt=0)
    harvestDate: Optional[datetime] = None
    grade: Optional[Literal["Grade A", "Grade B", "Grade C", "Mixed", "Premium", "Standard"]] = None
    organic: Optional[bool] = None
    season: Optional[Literal["First Season", "Second Season", "Year-round", "Dry Season", "Rainy Season"]] = None
    availability: Optional[Literal["In Stock", "Pre-order", "Seasonal", "On Request"]] = None

    @field_validator("harvestDate")
    @classmethod
    def _harvest_utc(cls, v):
        return _naive(v)


class LivestockDetails(_DetailsBase):
    animalType: Optional[str] = None
    breed: Optional[str] = None
    quantity: Optional[float] = Field(None, gt=0)
    age: Optional[str] = None
    weight: Optional[float] = Field(None, ge=0)
    sex: Optional[Literal["Male", "Female", "Mixed"]] = None
    healthStatus: Optional[str] = None
    purpose: Optional[Literal["Dairy", "Meat", "Breeding", "Layers", "Dual Purpose", "Draught"]] = None


class InputDetails(_DetailsBase):
    productName: Optional[str] = None
    brand: Optional[str] = None
    quantity: Optional[float] = Field(None, gt=0)
    unit: Optional[Unit] = None
    composition: Optional[str] = None
    expiryDate: Optional[datetime] = None
    certification: Optional[str] = None

    @field_validator("expiryDate")
    @classmethod
    def _expiry_utc(cls, v):
        return _naive(v)


class EquipmentDetails(_DetailsBase):
    equipmentType: Optional[str] = None
    brand: Optional[str] = None
    model: Optional[str] = None
    condition: Optional[Literal["New", "Used - Excellent", "Used - Good", "Used - Fair", "Refurbished"]] = None
    yearOfManufacture: Optional[int] = Field(None, ge=1900, le=2100)
    specifications: Optional[str] = None
    warranty: Optional[str] = None


class ServiceDetails(_DetailsBase):
    serviceType: Optional[str] = None
    coverage: Optional[List[str]] = None
    priceModel: Optional[Literal["Per Acre", "Per Hour", "Per Day", "Fixed Rate", "Negotiable"]] = None
    availability: Optional[str] = None
    experience: Optional[str] = None
    certifications: Optional[List[str]] = None

    @field_validator("coverage", "certifications", mode="before")
    @classmethod
    def _comma_separated(cls, v):
        return _split_list(v)


DETAILS_MODELS: Dict[str, type[_DetailsBase]] = {
    "Crops": CropDetails,
    "Livestock": LivestockDetails,
    "Agricultural Inputs": InputDetails,
    "Equipment & Tools": EquipmentDetails,
    "Agricultural Services": ServiceDetails,
}


def _f(fields: str, required: str) -> Tuple[Tuple[str, ...], Tuple[str, ...]]:
    return tuple(fields.split()), tuple(required.split())


_CROP_REQ = "cropType quantity unit pricePerUnit"
_ANIMAL_REQ = "animalType quantity"
_INPUT_REQ = "productName quantity unit"

# (allowed fields, required fields) per subcategory
SUBCATEGORY_FIELDS: Dict[str, Dict[str, Tuple[Tuple[str, ...], Tuple[str, ...]]]] = {
    "Crops": {
        "Grains & Cereals": _f("cropType variety quantity unit pricePerUnit harvestDate grade organic season availability", _CROP_REQ),
        "Legumes & Pulses": _f("cropType variety quantity unit pricePerUnit harvestDate grade organic", _CROP_REQ),
        "Vegetables": _f("cropType variety quantity unit pricePerUnit harvestDate organic", _CROP_REQ),
        "Fruits": _f("cropType variety quantity unit pricePerUnit harvestDate organic", _CROP_REQ),
        "Root Crops": _f("cropType variety quantity unit pricePerUnit harvestDate", _CROP_REQ),
        "Cash Crops": _f("cropType variety quantity unit pricePerUnit season", _CROP_REQ),
    },
    "Livestock": {
        "Cattle": _f("animalType breed quantity age weight sex healthStatus purpose", _ANIMAL_REQ),
        "Goats & Sheep": _f("animalType breed quantity age weight sex healthStatus", _ANIMAL_REQ),
        "Poultry": _f("animalType breed quantity age weight healthStatus", _ANIMAL_REQ),
        "Pigs": _f("animalType breed quantity age weight healthStatus", _ANIMAL_REQ),
        "Fish & Aquaculture": _f("animalType breed quantity age weight healthStatus", _ANIMAL_REQ),
        "Other Livestock": _f("animalType breed quantity age healthStatus", _ANIMAL_REQ),
    },
    "Agricultural Inputs": {
        "Seeds & Seedlings": _f("productName brand quantity unit expiryDate certification", _INPUT_REQ),
        "Fertilizers": _f("productName brand quantity unit composition certification", _INPUT_REQ),
        "Pesticides & Chemicals": _f("productName brand quantity unit composition expiryDate certification", _INPUT_REQ),
        "Animal Feed": _f("productName brand quantity unit composition", _INPUT_REQ),
        "Veterinary Products": _f("productName brand quantity unit expiryDate certification", _INPUT_REQ),
    },
    "Equipment & Tools": {
        "Tractors & Machinery": _f("equipmentType brand model condition yearOfManufacture specifications warranty", "equipmentType condition"),
        "Hand Tools": _f("equipmentType brand condition specifications", "equipmentType"),
        "Irrigation Equipment": _f("equipmentType brand condition specifications", "equipmentType"),
        "Processing Equipment": _f("equipmentType brand condition specifications", "equipmentType"),
        "Transport Equipment": _f("equipmentType brand condition specifications", "equipmentType"),
    },
    "Agricultural Services": {
        "Land Preparation": _f("serviceType coverage priceModel availability experience", "serviceType priceModel"),
        "Planting Services": _f("serviceType coverage priceModel availability", "serviceType priceModel"),
        "Harvesting Services": _f("serviceType coverage priceModel availability", "serviceType priceModel"),
        "Transport & Logistics": _f("serviceType coverage priceModel availability", "serviceType"),
        "Veterinary Services": _f("serviceType coverage priceModel experience certifications", "serviceType"),
        "Agronomy Services": _f("serviceType coverage priceModel experience", "serviceType"),
    },
}


def _is_blank(v: Any) -> bool:
    return v is None or (isinstance(v, str) and not v.strip())


def validate_details(category: str, sub_category: str, raw: Any) -> Dict[str, Any]:
    """
    Validate a raw details payload for (category, subCategory).

    Blank form values are dropped before validation. Returns the cleaned
    document (only keys that carry a value) or raises BadRequestError with
    one message per problem.
    """
    model = DETAILS_MODELS.get(category)
    if model is None:
        raise BadRequestError("Invalid category", errors=[f"category: unknown category '{category}'"])

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise BadRequestError("Invalid details for this category", errors=["details: must be an object"])

    data = {k: v for k, v in raw.items() if not _is_blank(v)}
    errors: List[str] = []

    rules = SUBCATEGORY_FIELDS.get(category, {}).get(sub_category)
    if rules is not None:
        allowed, required = rules
        for key in data:
            # unknown keys are reported by the model itself
            if key in model.model_fields and key not in allowed:
                errors.append(f"{key}: not used for {sub_category}")
        for key in required:
            if key not in data:
                errors.append(f"{key}: required for {sub_category}")

    try:
        parsed = model.model_validate(data)
    except ValidationError as e:
        errors.extend(format_validation_errors(e))
        parsed = None

    if errors:
        raise BadRequestError("Invalid details for this category", errors=errors)

    return parsed.model_dump(exclude_none=True)


def subcategory_fields(category: str, sub_category: str) -> Dict[str, List[str]]:
    allowed, required = SUBCATEGORY_FIELDS.get(category, {}).get(sub_category, ((), ()))
    return {"fields": list(allowed), "required": list(required)}
