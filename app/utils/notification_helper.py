"""
Helpers that fan order events out to the push channels.
"""
from typing import Optional

from app.models.order import Order, SubOrder
from app.models.order_tracking import OrderTrackingEvent
from app.services.realtime_service import (
    realtime_manager, order_channel, user_channel, seller_channel, delivery_channel, ADMIN_CHANNEL
)
from app.services.tracking_service import status_payload, location_payload


def _latest_event(order: Order) -> Optional[OrderTrackingEvent]:
    return order.tracking_events[-1] if order.tracking_events else None


async def notify_order_status(order: Order, sub_order: Optional[SubOrder] = None) -> None:
    """order:status-updated to the order's watchers and the customer"""
    payload = status_payload(order, sub_order, _latest_event(order))
    await realtime_manager.broadcast(order_channel(order.id), "order:status-updated", payload)
    if order.customer_id:
        await realtime_manager.broadcast(user_channel(order.customer_id), "order:status-updated", payload)


async def notify_new_order(order: Order) -> None:
    for sub in order.sub_orders:
        await realtime_manager.broadcast(seller_channel(sub.seller_id), "new-order-for-seller", {
            "order_id": order.id,
            "order_number": order.order_number,
            "sub_order_id": sub.id,
            "sub_order_number": sub.sub_order_number,
            "total": sub.total,
            "item_count": len(sub.items),
        })
    await realtime_manager.broadcast(ADMIN_CHANNEL, "new-order", {
        "order_id": order.id,
        "order_number": order.order_number,
        "total": order.total,
        "seller_count": len(order.sub_orders),
    })


async def notify_delivery_assigned(order: Order) -> None:
    await realtime_manager.broadcast(delivery_channel(order.delivery_person_id), "delivery:assigned", {
        "order_id": order.id,
        "order_number": order.order_number,
        "delivery_address": order.delivery_address,
        "delivery_latitude": order.delivery_latitude,
        "delivery_longitude": order.delivery_longitude,
    })
    await notify_order_status(order)


async def notify_delivery_location(order: Order) -> None:
    await realtime_manager.broadcast(order_channel(order.id), "order:delivery_location", location_payload(order))
