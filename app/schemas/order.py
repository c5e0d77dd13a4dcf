from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from decimal import Decimal
from datetime import datetime
from app.schemas.address import AddressCreate


class OrderItemCreate(BaseModel):
    product_id: str
    quantity: int = Field(ge=1)


class OrderCreate(BaseModel):
    items: List[OrderItemCreate]
    delivery_address_id: Optional[str] = None
    new_delivery_address: Optional[AddressCreate] = None
    payment_method: str = "COD"
    delivery_instructions: Optional[str] = None


class OrderItemResponse(BaseModel):
    id: str
    product_id: Optional[str] = None
    product_name: str
    product_price: Decimal
    product_unit: Optional[str] = None
    quantity: int
    item_total: Decimal

    class Config:
        from_attributes = True


class SubOrderResponse(BaseModel):
    id: str
    order_id: str
    sub_order_number: str
    seller_id: Optional[str] = None
    status: str
    delivery_status: str
    subtotal: Decimal
    delivery_charge: Decimal
    total: Decimal
    items: List[OrderItemResponse] = []
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class OrderResponse(BaseModel):
    id: str
    order_number: str
    customer_id: Optional[str] = None
    delivery_address_id: Optional[str] = None
    delivery_address: Dict[str, Any]
    delivery_latitude: Optional[float] = None
    delivery_longitude: Optional[float] = None
    delivery_instructions: Optional[str] = None
    delivery_person_id: Optional[str] = None
    subtotal: Decimal
    delivery_charge: Decimal
    total: Decimal
    payment_method: str
    payment_status: str
    status: str
    estimated_delivery_time: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    sub_orders: List[SubOrderResponse] = []
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TrackingEventResponse(BaseModel):
    id: str
    order_id: str
    sub_order_id: Optional[str] = None
    status: str
    message: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    updated_by: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class SubOrderStatusUpdate(BaseModel):
    status: str


class OrderStatusUpdate(BaseModel):
    status: str
    message: Optional[str] = None
