from sqlalchemy import Column, String, Integer, Float, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
import uuid
from datetime import datetime
import enum
from app.database import Base


class ApprovalStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Seller(Base):
    __tablename__ = "sellers"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False, index=True)
    business_name = Column(String(255), nullable=False)
    business_type = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)
    business_address = Column(Text, nullable=False)
    city = Column(String(100), nullable=False)
    pincode = Column(String(10), nullable=False, index=True)
    business_phone = Column(String(20), nullable=True)
    gst_number = Column(String(15), nullable=True)
    delivery_radius_km = Column(Integer, default=5, nullable=False)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    approval_status = Column(String(20), default=ApprovalStatus.PENDING.value, nullable=False, index=True)
    approved_at = Column(DateTime, nullable=True)
    rejection_reason = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    user = relationship("User", back_populates="seller")
    products = relationship("Product", back_populates="seller", cascade="all, delete-orphan")
    sub_orders = relationship("SubOrder", back_populates="seller")

    @property
    def is_approved(self) -> bool:
        return self.approval_status == ApprovalStatus.APPROVED.value
