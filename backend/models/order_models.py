# backend/models/order_models.py
from __future__ import annotations

from typing import Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

ORDER_STATUSES = ("Pending", "Processing", "Delivered", "Cancelled")

# status -> statuses it may move to
ORDER_TRANSITIONS: Dict[str, Tuple[str, ...]] = {
    "Pending": ("Processing", "Cancelled"),
    "Processing": ("Delivered", "Cancelled"),
    "Delivered": (),
    "Cancelled": (),
}

OrderStatus = Literal["Pending", "Processing", "Delivered", "Cancelled"]


class OrderItemModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    product: str
    name: Optional[str] = None
    quantity: int = Field(..., ge=1)
    image: Optional[str] = None
    # informational; the order is priced from the product itself
    price: Optional[float] = Field(None, ge=0)
    variant: Optional[Dict[str, object]] = None


class ShippingAddressModel(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    district: Optional[str] = None
    phoneNumber: Optional[str] = None
    postalCode: Optional[str] = None
    country: str = "Uganda"


class OrderCreateModel(BaseModel):
    orderItems: List[OrderItemModel] = Field(default_factory=list)
    shippingAddress: ShippingAddressModel
    paymentMethod: str = Field(..., min_length=1)
    taxPrice: float = Field(0, ge=0)
    shippingPrice: float = Field(0, ge=0)


class PaymentResultModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    status: Optional[str] = None
    update_time: Optional[str] = None
    email_address: Optional[str] = None


class StatusUpdateModel(BaseModel):
    status: OrderStatus
    description: Optional[str] = None


class CancelOrderModel(BaseModel):
    reason: Optional[str] = None
