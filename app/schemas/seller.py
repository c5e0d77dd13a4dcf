from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class SellerApply(BaseModel):
    business_name: str = Field(min_length=2, max_length=255)
    business_type: Optional[str] = None
    description: Optional[str] = None
    business_address: str = Field(min_length=5)
    city: str
    pincode: str = Field(min_length=6, max_length=6)
    business_phone: Optional[str] = None
    gst_number: Optional[str] = Field(default=None, max_length=15)
    delivery_radius_km: int = Field(default=5, ge=1, le=50)


class SellerResponse(BaseModel):
    id: str
    user_id: str
    business_name: str
    business_type: Optional[str] = None
    description: Optional[str] = None
    business_address: str
    city: str
    pincode: str
    business_phone: Optional[str] = None
    gst_number: Optional[str] = None
    delivery_radius_km: int
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    approval_status: str
    approved_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
