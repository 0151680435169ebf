from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from schemas.validators import normalize_phone, normalize_email

OrderStatus = Literal["pending", "confirmed", "processing", "shipped", "delivered", "completed", "cancelled"]


class OrderItemRequest(BaseModel):
    """
    A line of a new order. Name and price are accepted for client
    convenience but the stored snapshot always uses the catalog values.
    """
    product_id: int = Field(gt=0)
    quantity: int = Field(ge=1)
    product_name: Optional[str] = None
    price: Optional[int] = Field(default=None, ge=0)


class OrderItemSnapshot(BaseModel):
    product_id: int
    product_name: str
    price: int
    quantity: int


class StatusHistoryEntry(BaseModel):
    status: str
    timestamp: str
    tracking_number: Optional[str] = None
    estimated_delivery: Optional[str] = None
    notes: Optional[str] = None


class CreateOrderRequest(BaseModel):
    customer_name: str = Field(min_length=1, max_length=150)
    email: EmailStr
    phone: str
    address: str = Field(min_length=1)
    items: list[OrderItemRequest] = Field(min_length=1)
    total: int = Field(ge=0)
    notes: Optional[str] = None
    cart_id: Optional[str] = None

    normalize_email_field = field_validator('email', mode='before')(normalize_email)

    @field_validator('phone')
    @classmethod
    def validate_phone(cls, value):
        return normalize_phone(value)


class UpdateOwnOrderRequest(BaseModel):
    """Owners may only touch delivery details and the item list."""
    address: Optional[str] = Field(default=None, min_length=1)
    phone: Optional[str] = None
    items: Optional[list[OrderItemRequest]] = Field(default=None, min_length=1)

    @field_validator('phone')
    @classmethod
    def validate_phone(cls, value):
        if value is None:
            return value
        return normalize_phone(value)

    @model_validator(mode='after')
    def check_not_empty(self):
        if self.address is None and self.phone is None and self.items is None:
            raise ValueError('Provide at least one of address, phone or items')
        return self


class UpdateOrderStatusRequest(BaseModel):
    status: OrderStatus
    tracking_number: Optional[str] = Field(default=None, max_length=100)
    estimated_delivery: Optional[datetime] = None
    notes: Optional[str] = None


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: Optional[int] = None
    customer_name: str
    email: str
    phone: str
    address: str
    items: list[OrderItemSnapshot]
    total: int
    status: str
    status_history: list[StatusHistoryEntry]
    tracking_number: Optional[str] = None
    estimated_delivery: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CustomOrderRequest(BaseModel):
    name: str = Field(min_length=1, max_length=150)
    email: EmailStr
    phone: Optional[str] = None
    details: str = Field(min_length=1, max_length=5000)
    date_needed: Optional[str] = None

    normalize_email_field = field_validator('email', mode='before')(normalize_email)
