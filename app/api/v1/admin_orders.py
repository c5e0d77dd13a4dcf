from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from app.database import get_db
from app.api.deps import get_current_admin
from app.models.order import Order
from app.models.user import User
from app.schemas.common import ResponseModel
from app.schemas.delivery import AssignDeliveryRequest
from app.schemas.order import OrderResponse, OrderStatusUpdate
from app.services import delivery_service, order_service
from app.utils.notification_helper import notify_order_status, notify_delivery_assigned
from app.utils.pagination import paginate_query

router = APIRouter()


@router.get("", response_model=ResponseModel)
def list_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status_filter: Optional[str] = Query(None, alias="status"),
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    query = db.query(Order)
    if status_filter:
        query = query.filter(Order.status == status_filter)
    orders, pagination = paginate_query(query.order_by(Order.created_at.desc()), page, limit)
    return ResponseModel(
        success=True,
        data={"items": [OrderResponse.model_validate(o) for o in orders], "pagination": pagination}
    )


@router.patch("/{order_id}/assign-delivery", response_model=ResponseModel)
async def assign_delivery(
    order_id: str,
    body: AssignDeliveryRequest,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    order = delivery_service.assign_delivery_person(db, admin, order_id, body.delivery_person_id)
    await notify_delivery_assigned(order)
    return ResponseModel(success=True, data=OrderResponse.model_validate(order), message="Delivery partner assigned")


@router.patch("/{order_id}/status", response_model=ResponseModel)
async def update_order_status(
    order_id: str,
    body: OrderStatusUpdate,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    order = order_service.admin_update_order_status(db, admin, order_id, body.status, body.message)
    await notify_order_status(order)
    return ResponseModel(success=True, data=OrderResponse.model_validate(order), message="Order status updated")
