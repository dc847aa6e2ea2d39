"""Request and response bodies shared by the API and the client."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, confloat

from .models.user import Role


class Identity(BaseModel):
    """The authenticated (id, username, role) tuple."""

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    id: int
    username: str
    role: Role


class SessionResponse(Identity):
    """Identity plus the signed token that proves it."""

    token: str


class UserCreate(BaseModel):
    """Request body for registering a new user."""

    username: str = Field(..., min_length=1)
    password: str
    # checked by the users table constraint, not here
    role: str


class UserLogin(BaseModel):
    """Request body for user login."""

    username: str
    password: str


class _ProductFields(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    name: str
    description: Optional[str] = ""
    price: confloat(ge=0)
    image_url: Optional[str] = Field(None, alias="imageUrl")


class ProductCreate(_ProductFields):
    """Request body for listing a new product."""

    merchant_id: Optional[int] = Field(None, alias="merchantId")


class ProductCreated(_ProductFields):
    """Echo of a created product."""

    id: int


class ProductOut(ProductCreated):
    """A catalog row as served to every client."""

    merchant_id: Optional[int] = Field(None, alias="merchantId")
