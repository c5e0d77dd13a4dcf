from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool
from app.database import get_db
from app.api.deps import get_current_user
from app.models.order import Order
from app.models.user import User
from app.schemas.common import ResponseModel
from app.schemas.order import OrderCreate, OrderResponse, SubOrderResponse
from app.services import order_service
from app.services.tracking_service import build_tracking_view, scope_sub_orders
from app.utils.notification_helper import notify_new_order, notify_order_status
from app.utils.pagination import paginate_query

router = APIRouter()


@router.post("", response_model=ResponseModel, status_code=status.HTTP_201_CREATED)
async def create_order(
    order_data: OrderCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Place an order; items are split into one sub-order per seller"""
    # Address geocoding does blocking HTTP, keep it off the event loop
    order = await run_in_threadpool(order_service.place_order, db, current_user, order_data)
    await notify_new_order(order)
    return ResponseModel(
        success=True,
        data=OrderResponse.model_validate(order),
        message="Order placed successfully"
    )


@router.get("", response_model=ResponseModel)
def list_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status_filter: Optional[str] = Query(None, alias="status"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    query = db.query(Order).filter(Order.customer_id == current_user.id)
    if status_filter:
        query = query.filter(Order.status == status_filter)
    orders, pagination = paginate_query(query.order_by(Order.created_at.desc()), page, limit)
    return ResponseModel(
        success=True,
        data={"items": [OrderResponse.model_validate(o) for o in orders], "pagination": pagination}
    )


@router.get("/{order_id}", response_model=ResponseModel)
def get_order(
    order_id: str,
    seller_id: Optional[str] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Order with its sub-orders; seller_id narrows it to one seller's part"""
    order = order_service.get_order_for_viewer(db, current_user, order_id)
    scope = order_service.viewer_seller_scope(current_user, order, seller_id)
    data = OrderResponse.model_validate(order).model_dump()
    if scope is not None:
        data["sub_orders"] = [SubOrderResponse.model_validate(s).model_dump() for s in scope_sub_orders(order, scope)]
    return ResponseModel(success=True, data=data)


@router.get("/{order_id}/tracking", response_model=ResponseModel)
def track_order(
    order_id: str,
    seller_id: Optional[str] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    order = order_service.get_order_for_viewer(db, current_user, order_id)
    view = build_tracking_view(
        order,
        seller_id=order_service.viewer_seller_scope(current_user, order, seller_id),
        include_otp=order.customer_id == current_user.id
    )
    return ResponseModel(success=True, data=view)


@router.post("/{order_id}/cancel", response_model=ResponseModel)
async def cancel_order(
    order_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    order = order_service.cancel_order(db, current_user, order_id)
    await notify_order_status(order)
    return ResponseModel(success=True, data=OrderResponse.model_validate(order), message="Order cancelled")
