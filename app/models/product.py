from sqlalchemy import Column, String, Integer, Numeric, Boolean, Text, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
import uuid
from datetime import datetime
from app.database import Base
from app.models.seller import ApprovalStatus


class Product(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    seller_id = Column(String(36), ForeignKey("sellers.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    category = Column(String(100), nullable=True, index=True)
    price = Column(Numeric(10, 2), nullable=False)
    original_price = Column(Numeric(10, 2), nullable=True)
    unit = Column(String(50), default="piece", nullable=False)
    stock = Column(Integer, default=0, nullable=False)
    min_order_qty = Column(Integer, default=1, nullable=False)
    max_order_qty = Column(Integer, nullable=True)
    image_url = Column(String(500), nullable=True)
    estimated_delivery_time = Column(String(50), nullable=True)  # e.g. "30-45 min"
    is_active = Column(Boolean, default=True, nullable=False)
    approval_status = Column(String(20), default=ApprovalStatus.PENDING.value, nullable=False, index=True)
    approved_at = Column(DateTime, nullable=True)
    rejection_reason = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("stock >= 0", name="check_product_stock_non_negative"),
    )

    # Relationships
    seller = relationship("Seller", back_populates="products")

    @property
    def is_orderable(self) -> bool:
        return self.is_active and self.approval_status == ApprovalStatus.APPROVED.value
