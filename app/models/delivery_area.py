from sqlalchemy import Column, String, Boolean, DateTime, Numeric
import uuid
from datetime import datetime
from app.database import Base


class DeliveryArea(Base):
    """Serviceable pincode with its delivery pricing"""
    __tablename__ = "delivery_areas"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    area_name = Column(String(255), nullable=False)
    pincode = Column(String(10), unique=True, nullable=False, index=True)
    city = Column(String(100), nullable=False)
    delivery_charge = Column(Numeric(10, 2), default=0, nullable=False)
    free_delivery_above = Column(Numeric(10, 2), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
