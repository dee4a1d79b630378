from pydantic import BaseModel, Field

from datetime import datetime
from typing import List, Optional

from .validation import MAX_QUANTITY


# Tokens
class TokenCreate(BaseModel):
    email: str
    password: str


class Token(BaseModel):
    token: str


# Users
class UserCreate(BaseModel):
    email: str
    password: str


class UserUpdate(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class ProductSummary(BaseModel):
    id: int
    title: str
    price: float
    published: bool

    model_config = {"from_attributes": True}


class UserResponse(BaseModel):
    id: int
    email: str
    products: List[ProductSummary] = []

    model_config = {"from_attributes": True}


# Products
class ProductCreate(BaseModel):
    title: Optional[str] = None
    price: Optional[float] = Field(None, allow_inf_nan=False)
    published: bool = False
    quantity: int = Field(0, le=MAX_QUANTITY)


class ProductUpdate(BaseModel):
    title: Optional[str] = None
    price: Optional[float] = Field(None, allow_inf_nan=False)
    published: Optional[bool] = None
    quantity: Optional[int] = Field(None, le=MAX_QUANTITY)


class ProductOwner(BaseModel):
    id: int
    email: str

    model_config = {"from_attributes": True}


class ProductResponse(BaseModel):
    id: int
    title: str
    price: float
    published: bool
    quantity: int
    user: ProductOwner
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


# Orders
class OrderItem(BaseModel):
    id: int = Field(..., gt=0, le=MAX_QUANTITY)
    quantity: int = Field(1, gt=0, le=MAX_QUANTITY)


class OrderCreate(BaseModel):
    products: List[OrderItem] = Field(default_factory=list)


class PlacementResponse(BaseModel):
    id: int
    product_id: int
    quantity: int

    model_config = {"from_attributes": True}


class OrderResponse(BaseModel):
    id: int
    total: float
    created_at: datetime
    updated_at: datetime
    placements: List[PlacementResponse] = []

    model_config = {"from_attributes": True}


# Listings
class PageLinks(BaseModel):
    first: str
    last: str
    prev: str
    next: str


class PageMeta(BaseModel):
    total: int
    page: int
    pages: int


class ProductPage(BaseModel):
    data: List[ProductResponse]
    links: PageLinks
    meta: PageMeta


class OrderPage(BaseModel):
    data: List[OrderResponse]
    links: PageLinks
    meta: PageMeta

