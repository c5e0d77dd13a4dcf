from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.api.deps import get_current_user, get_current_delivery_person
from app.models.delivery_person import DeliveryPerson
from app.models.user import User
from app.schemas.common import ResponseModel
from app.schemas.delivery import (
    DeliveryPersonRegister, DeliveryPersonResponse, AvailabilityUpdate, LocationUpdate, DeliveryStatusUpdate
)
from app.schemas.order import OrderResponse
from app.services import delivery_service
from app.utils.notification_helper import notify_order_status, notify_delivery_location

router = APIRouter()


@router.post("/register", response_model=ResponseModel, status_code=status.HTTP_201_CREATED)
def register(
    data: DeliveryPersonRegister,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Apply as a delivery partner; an admin approves the profile"""
    person = delivery_service.register_delivery_person(db, current_user, data)
    return ResponseModel(
        success=True,
        data=DeliveryPersonResponse.model_validate(person),
        message="Registration submitted for approval"
    )


@router.get("/me", response_model=ResponseModel)
def my_profile(current_user: User = Depends(get_current_user)):
    person = current_user.delivery_person
    return ResponseModel(
        success=True,
        data=DeliveryPersonResponse.model_validate(person) if person else None
    )


@router.post("/availability", response_model=ResponseModel)
def set_availability(
    body: AvailabilityUpdate,
    person: DeliveryPerson = Depends(get_current_delivery_person),
    db: Session = Depends(get_db)
):
    person.is_available = body.is_available
    db.commit()
    db.refresh(person)
    return ResponseModel(
        success=True,
        data=DeliveryPersonResponse.model_validate(person),
        message="You are now online" if person.is_available else "You are now offline"
    )


@router.get("/orders", response_model=ResponseModel)
def assigned_orders(
    include_finished: bool = False,
    person: DeliveryPerson = Depends(get_current_delivery_person),
    db: Session = Depends(get_db)
):
    orders = delivery_service.list_assigned_orders(db, person, include_finished=include_finished)
    return ResponseModel(success=True, data=[OrderResponse.model_validate(o) for o in orders])


@router.patch("/orders/{order_id}/status", response_model=ResponseModel)
async def update_delivery_status(
    order_id: str,
    body: DeliveryStatusUpdate,
    person: DeliveryPerson = Depends(get_current_delivery_person),
    db: Session = Depends(get_db)
):
    order = delivery_service.update_delivery_status(db, person, order_id, body.status, body.otp)
    await notify_order_status(order)
    return ResponseModel(
        success=True,
        data=OrderResponse.model_validate(order),
        message=f"Delivery status updated to {body.status}"
    )


@router.patch("/location", response_model=ResponseModel)
async def update_location(
    body: LocationUpdate,
    person: DeliveryPerson = Depends(get_current_delivery_person),
    db: Session = Depends(get_db)
):
    """Record the partner's position and push it to every active order's watchers"""
    orders = delivery_service.update_location(db, person, body.latitude, body.longitude)
    for order in orders:
        await notify_delivery_location(order)
    return ResponseModel(
        success=True,
        data={
            "latitude": person.current_latitude,
            "longitude": person.current_longitude,
            "last_location_update": person.last_location_update,
            "active_orders": [o.id for o in orders]
        },
        message="Location updated"
    )
