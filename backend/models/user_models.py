# backend/models/user_models.py
from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

USER_ROLES = ("user", "seller", "admin")

DEFAULT_AVATAR = (
    "https://res.cloudinary.com/dnj7dtnvx/image/upload/"
    "v1763294361/vecteezy_user-avatar-ui-button_13907861_j7b38y.jpg"
)


class SignupModel(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    username: Optional[str] = None
    phoneNumber: Optional[str] = None
    password: Optional[str] = None
    email: Optional[str] = None


class SigninModel(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    phoneNumber: Optional[str] = None
    password: Optional[str] = None


class GoogleAuthModel(BaseModel):
    email: str = Field(..., min_length=3)
    username: Optional[str] = None
    photo: Optional[str] = None


class UserUpdateModel(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    username: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = None
    phoneNumber: Optional[str] = None
    password: Optional[str] = Field(None, min_length=6)
    avatar: Optional[str] = None


class VendorRegistrationModel(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    businessName: str = Field(..., min_length=1)
    businessDescription: Optional[str] = None
    businessAddress: Optional[str] = None
    businessLogo: Optional[str] = None


class AdminUserUpdateModel(BaseModel):
    """Fields an admin may edit on any account."""

    model_config = ConfigDict(str_strip_whitespace=True)

    username: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = None
    phoneNumber: Optional[str] = None
    avatar: Optional[str] = None
    isSeller: Optional[bool] = None


class RoleChangeModel(BaseModel):
    role: Literal["user", "seller", "admin"]
