"""
Delivery Person Model
Delivery partners pick up sub-orders from sellers and deliver the master order
"""
from sqlalchemy import Column, String, Boolean, DateTime, Float, ForeignKey
from sqlalchemy.orm import relationship
import uuid
from datetime import datetime
from app.database import Base
from app.models.seller import ApprovalStatus


class DeliveryPerson(Base):
    __tablename__ = "delivery_persons"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=False, index=True)

    # Identification
    license_number = Column(String(50), nullable=True)
    vehicle_number = Column(String(50), nullable=True)
    vehicle_type = Column(String(50), nullable=True)  # bike, scooter, bicycle

    # Status
    approval_status = Column(String(20), default=ApprovalStatus.PENDING.value, nullable=False, index=True)
    is_available = Column(Boolean, default=False, nullable=False)

    # Current location (updated frequently)
    current_latitude = Column(Float, nullable=True)
    current_longitude = Column(Float, nullable=True)
    last_location_update = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    user = relationship("User", back_populates="delivery_person")
    assigned_orders = relationship("Order", back_populates="delivery_person")

    @property
    def is_approved(self) -> bool:
        return self.approval_status == ApprovalStatus.APPROVED.value

    def __repr__(self):
        return f"<DeliveryPerson {self.name} ({self.phone})>"
