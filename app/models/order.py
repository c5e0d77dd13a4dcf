from sqlalchemy import Column, String, Integer, Numeric, DateTime, ForeignKey, Float, Text, JSON
from sqlalchemy.orm import relationship
import uuid
from datetime import datetime
import enum
from app.database import Base


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class SubOrderStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    PREPARING = "preparing"
    READY_FOR_PICKUP = "ready_for_pickup"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class DeliveryStatus(str, enum.Enum):
    PENDING = "pending"
    ASSIGNED = "assigned"
    PICKED_UP = "picked_up"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentMethod(str, enum.Enum):
    COD = "COD"
    ONLINE = "ONLINE"


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class Order(Base):
    """Master order placed by a customer; split into one SubOrder per seller"""
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    order_number = Column(String(50), unique=True, nullable=False, index=True)
    customer_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    delivery_address_id = Column(String(36), ForeignKey("delivery_addresses.id", ondelete="SET NULL"), nullable=True)
    delivery_address = Column(JSON, nullable=False)  # snapshot at order time
    delivery_latitude = Column(Float, nullable=True)
    delivery_longitude = Column(Float, nullable=True)
    delivery_instructions = Column(Text, nullable=True)
    delivery_person_id = Column(String(36), ForeignKey("delivery_persons.id", ondelete="SET NULL"), nullable=True, index=True)
    subtotal = Column(Numeric(10, 2), nullable=False)
    delivery_charge = Column(Numeric(10, 2), default=0, nullable=False)
    total = Column(Numeric(10, 2), nullable=False)
    payment_method = Column(String(20), default=PaymentMethod.COD.value, nullable=False)
    payment_status = Column(String(20), default=PaymentStatus.PENDING.value, nullable=False)
    status = Column(String(30), default=OrderStatus.PENDING.value, nullable=False, index=True)
    delivery_otp = Column(String(10), nullable=True)
    estimated_delivery_time = Column(DateTime, nullable=True)
    delivered_at = Column(DateTime, nullable=True)
    cancelled_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    customer = relationship("User", back_populates="orders")
    delivery_person = relationship("DeliveryPerson", back_populates="assigned_orders")
    sub_orders = relationship("SubOrder", back_populates="order", cascade="all, delete-orphan", order_by="SubOrder.sub_order_number")
    tracking_events = relationship("OrderTrackingEvent", back_populates="order", cascade="all, delete-orphan", order_by="OrderTrackingEvent.created_at")


class SubOrder(Base):
    """Part of a master order fulfilled by a single seller"""
    __tablename__ = "sub_orders"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    order_id = Column(String(36), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    sub_order_number = Column(String(60), unique=True, nullable=False)
    seller_id = Column(String(36), ForeignKey("sellers.id", ondelete="SET NULL"), nullable=True, index=True)
    status = Column(String(30), default=SubOrderStatus.PENDING.value, nullable=False, index=True)
    delivery_status = Column(String(30), default=DeliveryStatus.PENDING.value, nullable=False)
    subtotal = Column(Numeric(10, 2), nullable=False)
    delivery_charge = Column(Numeric(10, 2), default=0, nullable=False)
    total = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    order = relationship("Order", back_populates="sub_orders")
    seller = relationship("Seller", back_populates="sub_orders")
    items = relationship("OrderItem", back_populates="sub_order", cascade="all, delete-orphan")


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    sub_order_id = Column(String(36), ForeignKey("sub_orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(String(36), ForeignKey("products.id", ondelete="SET NULL"), nullable=True)

    # Product snapshot at order time
    product_name = Column(String(255), nullable=False)
    product_price = Column(Numeric(10, 2), nullable=False)
    product_unit = Column(String(50), nullable=True)
    quantity = Column(Integer, nullable=False)
    item_total = Column(Numeric(10, 2), nullable=False)

    # Relationships
    sub_order = relationship("SubOrder", back_populates="items")
    product = relationship("Product")
