from pydantic import BaseModel, Field
from typing import Optional
from decimal import Decimal
from datetime import datetime


class DeliveryAreaCreate(BaseModel):
    area_name: str = Field(min_length=1)
    pincode: str = Field(min_length=6, max_length=6)
    city: str = Field(min_length=1)
    delivery_charge: Decimal = Field(default=Decimal("0"), ge=0)
    free_delivery_above: Optional[Decimal] = Field(default=None, ge=0)
    is_active: bool = True


class DeliveryAreaUpdate(BaseModel):
    area_name: Optional[str] = None
    city: Optional[str] = None
    delivery_charge: Optional[Decimal] = Field(default=None, ge=0)
    free_delivery_above: Optional[Decimal] = Field(default=None, ge=0)
    is_active: Optional[bool] = None


class DeliveryAreaResponse(BaseModel):
    id: str
    area_name: str
    pincode: str
    city: str
    delivery_charge: Decimal
    free_delivery_above: Optional[Decimal] = None
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True
