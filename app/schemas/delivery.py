"""
Delivery partner schemas
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class DeliveryPersonRegister(BaseModel):
    name: str = Field(min_length=2, max_length=255)
    phone: str = Field(min_length=10, max_length=20)
    vehicle_type: Optional[str] = None
    vehicle_number: Optional[str] = None
    license_number: Optional[str] = None


class DeliveryPersonResponse(BaseModel):
    id: str
    user_id: str
    name: str
    phone: str
    vehicle_type: Optional[str] = None
    vehicle_number: Optional[str] = None
    license_number: Optional[str] = None
    approval_status: str
    is_available: bool
    current_latitude: Optional[float] = None
    current_longitude: Optional[float] = None
    last_location_update: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class AvailabilityUpdate(BaseModel):
    is_available: bool


class LocationUpdate(BaseModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class DeliveryStatusUpdate(BaseModel):
    status: str
    otp: Optional[str] = None


class AssignDeliveryRequest(BaseModel):
    delivery_person_id: str
