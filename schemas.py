"""
Database Schemas for the F1 Marketplace

Each Pydantic model maps to a MongoDB collection (lowercased class name).
Fields are loose on purpose: nothing is required, numbers sent for text
fields are stored as text, and unknown fields are dropped before a document
is written.

Collections:
- product
- order
"""
from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Document(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)


class Variant(Document):
    id: Optional[str] = None
    label: Optional[str] = None
    stock: Optional[int] = None


class Product(Document):
    """
    Products collection schema
    Collection name: "product"
    """
    id: Optional[str] = Field(None, description="External product identifier, distinct from Mongo _id")
    title: Optional[str] = None
    vendor_type: Optional[str] = Field(None, description="official | creator")
    team: Optional[str] = None
    creator_name: Optional[str] = None
    price: Optional[float] = Field(None, description="Price in the product currency")
    currency: Optional[str] = "USD"
    images: List[str] = Field(default_factory=list, description="Image URLs")
    variants: List[Variant] = Field(default_factory=list, description="Sizes/styles with their own stock")
    stock_total: Optional[int] = Field(None, description="Aggregate units in stock")
    description: Optional[str] = None
    badges: List[str] = Field(default_factory=list, description="Tags such as official, new, limited")
    category: Optional[str] = None
    sku: Optional[str] = None
    royalty_percent: Optional[float] = None
    release_date: Optional[str] = Field(None, description="ISO date, used by the newest-first sort")


class Customer(Document):
    email: Optional[str] = None
    phone: Optional[str] = None
    fullName: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    zip: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None


class Order(Document):
    """
    Orders collection schema
    Collection name: "order"
    """
    orderNumber: Optional[str] = None
    customer: Customer = Field(default_factory=Customer)
    items: List[Any] = Field(default_factory=list, description="Cart items as sent by the client")
    paymentMethod: Optional[str] = None
    shippingMethod: Optional[str] = None
    totalAmount: Optional[float] = None
    status: str = Field("Pending", description="No transitions exist; always Pending on creation")
    orderDate: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    idempotencyKey: Optional[str] = None


class SeedPayload(BaseModel):
    products: List[Product] = Field(default_factory=list)
    orders: Optional[List[Order]] = None
