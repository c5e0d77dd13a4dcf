"""
Order tracking timeline and the tracking view shared by REST and WebSocket.

The view is a plain dict: order state, sub-order states, the event timeline,
the delivery person's last known position and a route from that position to
the delivery address. Push messages (order:status-updated,
order:delivery_location) carry the pieces a client needs to patch this view
in place.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.models.order import Order, SubOrder, OrderStatus
from app.models.order_tracking import OrderTrackingEvent
from app.schemas.order import TrackingEventResponse
from app.utils.geo import build_route


def record_event(
    db: Session,
    order: Order,
    event_status: str,
    message: Optional[str] = None,
    updated_by: Optional[str] = None,
    sub_order: Optional[SubOrder] = None,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
) -> OrderTrackingEvent:
    """Append a timeline entry; the caller commits"""
    event = OrderTrackingEvent(
        order_id=order.id,
        sub_order_id=sub_order.id if sub_order else None,
        status=event_status,
        message=message,
        latitude=latitude,
        longitude=longitude,
        updated_by=updated_by,
        created_at=datetime.utcnow(),
    )
    db.add(event)
    return event


def scope_sub_orders(order: Order, seller_id: Optional[str] = None) -> List[SubOrder]:
    if seller_id is None:
        return list(order.sub_orders)
    scoped = [sub for sub in order.sub_orders if sub.seller_id == seller_id]
    if not scoped:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found for this seller")
    return scoped


def delivery_route(order: Order) -> Optional[Dict[str, Any]]:
    person = order.delivery_person
    if person is None:
        return None
    return build_route(
        person.current_latitude,
        person.current_longitude,
        order.delivery_latitude,
        order.delivery_longitude,
    )


def status_payload(order: Order, sub_order: Optional[SubOrder] = None, event: Optional[OrderTrackingEvent] = None) -> Dict[str, Any]:
    """Body of an order:status-updated push"""
    payload = {
        "order_id": order.id,
        "order_number": order.order_number,
        "status": order.status,
        "updated_at": order.updated_at,
    }
    if sub_order is not None:
        payload["sub_order"] = {
            "id": sub_order.id,
            "seller_id": sub_order.seller_id,
            "status": sub_order.status,
            "delivery_status": sub_order.delivery_status,
        }
    if event is not None:
        payload["event"] = TrackingEventResponse.model_validate(event).model_dump()
    return payload


def location_payload(order: Order) -> Dict[str, Any]:
    """Body of an order:delivery_location push"""
    person = order.delivery_person
    return {
        "order_id": order.id,
        "latitude": person.current_latitude,
        "longitude": person.current_longitude,
        "timestamp": person.last_location_update,
        "route": delivery_route(order),
    }


def build_tracking_view(order: Order, seller_id: Optional[str] = None, include_otp: bool = False) -> Dict[str, Any]:
    sub_orders = scope_sub_orders(order, seller_id)
    scoped_ids = {sub.id for sub in sub_orders}

    events = [
        TrackingEventResponse.model_validate(event).model_dump()
        for event in order.tracking_events
        if seller_id is None or event.sub_order_id is None or event.sub_order_id in scoped_ids
    ]

    person = order.delivery_person
    delivery_person = None
    if person is not None:
        delivery_person = {
            "id": person.id,
            "name": person.name,
            "phone": person.phone,
            "vehicle_type": person.vehicle_type,
            "latitude": person.current_latitude,
            "longitude": person.current_longitude,
            "last_location_update": person.last_location_update,
        }

    view = {
        "order_id": order.id,
        "order_number": order.order_number,
        "status": order.status,
        "payment_status": order.payment_status,
        "estimated_delivery_time": order.estimated_delivery_time,
        "sub_orders": [
            {
                "id": sub.id,
                "sub_order_number": sub.sub_order_number,
                "seller_id": sub.seller_id,
                "business_name": sub.seller.business_name if sub.seller else None,
                "status": sub.status,
                "delivery_status": sub.delivery_status,
            }
            for sub in sub_orders
        ],
        "events": events,
        "delivery_person": delivery_person,
        "destination": {
            "latitude": order.delivery_latitude,
            "longitude": order.delivery_longitude,
            "address": order.delivery_address,
        },
        "route": delivery_route(order),
    }
    if include_otp and order.status == OrderStatus.OUT_FOR_DELIVERY.value:
        view["delivery_otp"] = order.delivery_otp
    return view
