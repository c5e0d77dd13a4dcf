"""
Delivery partner workflow: onboarding, assignment, hand-off and live position
"""
import logging
from datetime import datetime, timedelta
from typing import List

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.config import settings
from app.models.delivery_person import DeliveryPerson
from app.models.order import Order, OrderStatus, DeliveryStatus, PaymentMethod, PaymentStatus
from app.models.seller import ApprovalStatus
from app.models.user import User, UserRole
from app.schemas.delivery import DeliveryPersonRegister
from app.services.order_service import CLOSED_SUB_ORDER_STATUSES
from app.services.tracking_service import record_event, delivery_route
from app.utils.security import generate_otp

logger = logging.getLogger(__name__)

# Each step may only advance to the next one
DELIVERY_FLOW = [
    DeliveryStatus.ASSIGNED.value,
    DeliveryStatus.PICKED_UP.value,
    DeliveryStatus.OUT_FOR_DELIVERY.value,
    DeliveryStatus.DELIVERED.value,
]

FINISHED_ORDER_STATUSES = {OrderStatus.DELIVERED.value, OrderStatus.CANCELLED.value}


def register_delivery_person(db: Session, user: User, data: DeliveryPersonRegister) -> DeliveryPerson:
    if user.delivery_person is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Delivery profile already exists")
    if user.role != UserRole.CUSTOMER.value:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Only customer accounts can register for delivery")

    person = DeliveryPerson(
        user_id=user.id,
        name=data.name,
        phone=data.phone,
        vehicle_type=data.vehicle_type,
        vehicle_number=data.vehicle_number,
        license_number=data.license_number,
    )
    db.add(person)
    db.commit()
    db.refresh(person)
    return person


def review_delivery_person(db: Session, person_id: str, approve: bool) -> DeliveryPerson:
    person = db.query(DeliveryPerson).filter(DeliveryPerson.id == person_id).first()
    if not person:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Delivery person not found")

    if approve:
        person.approval_status = ApprovalStatus.APPROVED.value
        person.user.role = UserRole.DELIVERY_BOY.value
    else:
        person.approval_status = ApprovalStatus.REJECTED.value
        person.is_available = False
    db.commit()
    db.refresh(person)
    return person


def _active_sub_orders(order: Order):
    return [sub for sub in order.sub_orders if sub.status not in CLOSED_SUB_ORDER_STATUSES]


def current_delivery_status(order: Order) -> str:
    active = _active_sub_orders(order)
    return active[0].delivery_status if active else DeliveryStatus.CANCELLED.value


def assign_delivery_person(db: Session, admin: User, order_id: str, person_id: str) -> Order:
    order = db.query(Order).filter(Order.id == order_id).first()
    if not order:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    if order.status in FINISHED_ORDER_STATUSES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Cannot assign delivery to a {order.status} order")

    person = db.query(DeliveryPerson).filter(DeliveryPerson.id == person_id).first()
    if not person:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Delivery person not found")
    if not person.is_approved or not person.is_available:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Delivery person is not available")

    order.delivery_person_id = person.id
    for sub in _active_sub_orders(order):
        sub.delivery_status = DeliveryStatus.ASSIGNED.value
    record_event(db, order, DeliveryStatus.ASSIGNED.value, f"Assigned to {person.name}", updated_by=admin.id)
    db.commit()
    db.refresh(order)
    logger.info("Order %s assigned to delivery person %s", order.order_number, person.id)
    return order


def list_assigned_orders(db: Session, person: DeliveryPerson, include_finished: bool = False) -> List[Order]:
    query = db.query(Order).filter(Order.delivery_person_id == person.id)
    if not include_finished:
        query = query.filter(Order.status.notin_(FINISHED_ORDER_STATUSES))
    return query.order_by(Order.created_at.desc()).all()


def update_delivery_status(db: Session, person: DeliveryPerson, order_id: str, new_status: str, otp: str = None) -> Order:
    order = db.query(Order).filter(
        Order.id == order_id,
        Order.delivery_person_id == person.id
    ).first()
    if not order:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")

    if new_status not in DELIVERY_FLOW[1:]:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid delivery status: {new_status}")

    current = current_delivery_status(order)
    if current not in DELIVERY_FLOW or DELIVERY_FLOW.index(new_status) != DELIVERY_FLOW.index(current) + 1:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Cannot change delivery status from {current} to {new_status}"
        )

    now = datetime.utcnow()
    if new_status == DeliveryStatus.OUT_FOR_DELIVERY.value:
        order.status = OrderStatus.OUT_FOR_DELIVERY.value
        order.delivery_otp = generate_otp(settings.DELIVERY_OTP_LENGTH)
        route = delivery_route(order)
        if route is not None:
            order.estimated_delivery_time = now + timedelta(minutes=route["eta_minutes"])
        message = "Order is out for delivery"
    elif new_status == DeliveryStatus.DELIVERED.value:
        if not otp or otp != order.delivery_otp:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid delivery OTP")
        order.status = OrderStatus.DELIVERED.value
        order.delivered_at = now
        if order.payment_method == PaymentMethod.COD.value:
            order.payment_status = PaymentStatus.PAID.value
        message = "Order delivered"
    else:
        message = "Order picked up from sellers"

    for sub in _active_sub_orders(order):
        sub.delivery_status = new_status
    record_event(
        db, order, new_status, message, updated_by=person.user_id,
        latitude=person.current_latitude, longitude=person.current_longitude,
    )
    db.commit()
    db.refresh(order)
    return order


def update_location(db: Session, person: DeliveryPerson, latitude: float, longitude: float) -> List[Order]:
    """Store the latest position; returns the active orders whose watchers should hear about it"""
    person.current_latitude = latitude
    person.current_longitude = longitude
    person.last_location_update = datetime.utcnow()
    db.commit()
    db.refresh(person)
    return list_assigned_orders(db, person)
