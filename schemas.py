"""
Database Schemas for the Marketplace

Each Pydantic model describes the documents of one MongoDB collection.
Field aliases are the stored (and wire) camelCase names:
- Account     -> "accounts"
- Product     -> "products"
- OrderRecord -> "orders"
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel


class Role(str, Enum):
    SELLER = "seller"
    CUSTOMER = "customer"


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Account(WireModel):
    name: str = Field(..., description="Display name")
    email: EmailStr = Field(..., description="Unique email address")
    phone: Optional[str] = Field(None, description="Contact phone")
    address: Optional[str] = Field(None, description="Postal address")
    password: str = Field(..., description="bcrypt hash of the password")
    role: Role = Field(..., description="Role: seller or customer")


class Product(WireModel):
    id: str = Field(..., description="Product _id (string)")
    name: str = Field(..., description="Product name")
    description: Optional[str] = Field("", description="Product description")
    price: float = Field(..., description="Unit price")
    image: Optional[str] = Field("", description="Image URL")
    seller_email: str = Field(..., description="Owning seller's email")


class OrderRecord(WireModel):
    """Snapshot of a product at purchase time; never updated."""
    id: str = Field(..., description="Order _id (string)")
    product_id: str
    product_name: str
    product_price: float
    product_image: Optional[str] = ""
    product_description: Optional[str] = ""
    seller_email: str
    customer_email: str
    purchased_at: datetime
