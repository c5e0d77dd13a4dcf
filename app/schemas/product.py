from pydantic import BaseModel, Field
from typing import Optional
from decimal import Decimal
from datetime import datetime


class ProductCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    category: Optional[str] = None
    price: Decimal = Field(gt=0)
    original_price: Optional[Decimal] = None
    unit: str = "piece"
    stock: int = Field(default=0, ge=0)
    min_order_qty: int = Field(default=1, ge=1)
    max_order_qty: Optional[int] = None
    image_url: Optional[str] = None
    estimated_delivery_time: Optional[str] = None


class ProductUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, gt=0)
    original_price: Optional[Decimal] = None
    unit: Optional[str] = None
    stock: Optional[int] = Field(default=None, ge=0)
    min_order_qty: Optional[int] = Field(default=None, ge=1)
    max_order_qty: Optional[int] = None
    image_url: Optional[str] = None
    estimated_delivery_time: Optional[str] = None
    is_active: Optional[bool] = None


class ProductResponse(BaseModel):
    id: str
    seller_id: str
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    price: Decimal
    original_price: Optional[Decimal] = None
    unit: str
    stock: int
    min_order_qty: int
    max_order_qty: Optional[int] = None
    image_url: Optional[str] = None
    estimated_delivery_time: Optional[str] = None
    is_active: bool
    approval_status: str
    rejection_reason: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class RejectRequest(BaseModel):
    reason: str = Field(min_length=1)
