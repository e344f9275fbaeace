"""
Pydantic schemas for the storefront API.

Field names are camelCase to match the stored documents.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt

# Provided values are stored exactly as sent, without coercion.
Number = Union[StrictInt, StrictFloat]

# Fields a user may change on their own profile.
USER_UPDATABLE_FIELDS = (
    "cart",
    "wishlist",
    "addresses",
    "firstName",
    "lastName",
    "phone",
)


class CreateUserRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    firstName: str = Field(..., min_length=1)
    lastName: str = Field(..., min_length=1)
    phone: Optional[str] = None


class UpdateUserRequest(BaseModel):
    """Every field is optional; values are opaque to the API."""

    model_config = ConfigDict(extra="ignore")

    cart: Any = None
    wishlist: Any = None
    addresses: Any = None
    firstName: Any = None
    lastName: Any = None
    phone: Any = None


class UserEnvelope(BaseModel):
    uid: str
    user: dict


class UserUpdatedResponse(BaseModel):
    message: str
    user: dict


class CreateProductRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    name: str
    description: str = ""
    categoryId: str
    subcategoryId: str
    typeId: str
    subtypeId: Optional[str] = None
    price: Number
    discountType: Optional[str] = None
    discountValue: Number = 0
    packOf: StrictInt = 1
    images: list = Field(default_factory=list)
    variants: list = Field(default_factory=list)
    attributes: list = Field(default_factory=list)
    rating: Number = 0


class ErrorResponse(BaseModel):
    error: str
