from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from schemas.validators import normalize_email


class CategoryRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    slug: str = Field(min_length=1, max_length=100)


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str


class ProductRequest(BaseModel):
    name: str = Field(min_length=1, max_length=150)
    slug: str = Field(min_length=1, max_length=150)
    description: str = Field(min_length=1)
    price: int = Field(ge=0)
    image_url: str = Field(min_length=1, max_length=500)
    category_id: Optional[int] = None
    featured: bool = False
    rating: int = Field(default=0, ge=0, le=5)
    review_count: int = Field(default=0, ge=0)


class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str
    description: str
    price: int
    image_url: str
    category_id: Optional[int] = None
    featured: bool
    rating: int
    review_count: int


class CartItemRequest(BaseModel):
    cart_id: str = Field(min_length=1, max_length=100)
    product_id: int = Field(gt=0)
    quantity: int = Field(ge=1)


class CartQuantityRequest(BaseModel):
    quantity: int = Field(ge=1)


class CartItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    cart_id: str
    product_id: int
    quantity: int


class CartItemWithProductResponse(CartItemResponse):
    product: ProductResponse


class SubscriptionRequest(BaseModel):
    user_id: int = Field(gt=0)
    plan: str = Field(min_length=1, max_length=100)
    status: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class SubscriptionUpdateRequest(BaseModel):
    plan: Optional[str] = Field(default=None, min_length=1, max_length=100)
    status: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class SubscriptionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    plan: str
    status: str
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    created_at: Optional[datetime] = None


class NewsletterRequest(BaseModel):
    email: EmailStr
    status: Optional[str] = None

    normalize_email_field = field_validator('email', mode='before')(normalize_email)


class NewsletterUpdateRequest(BaseModel):
    status: str = Field(min_length=1, max_length=20)


class NewsletterResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    status: str
    created_at: Optional[datetime] = None
