# backend/models/cart_models.py
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CartVariantModel(BaseModel):
    name: Optional[str] = None
    sku: Optional[str] = None


class CartAddModel(BaseModel):
    """Name, image and price are taken from the product itself, not the client."""

    model_config = ConfigDict(extra="ignore")

    product: str = Field(..., min_length=1)
    quantity: int = Field(1, ge=1)
    variant: Optional[CartVariantModel] = None
