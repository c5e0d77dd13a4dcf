import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, WebSocket, status
from fastapi.encoders import jsonable_encoder
from sqlalchemy.orm import Session, sessionmaker
from starlette.websockets import WebSocketDisconnect

from app.api.deps import resolve_user
from app.database import get_session_factory
from app.models.order import Order
from app.models.user import User, UserRole
from app.services import order_service
from app.services.realtime_service import (
    realtime_manager, order_channel, user_channel, seller_channel, delivery_channel, ADMIN_CHANNEL
)
from app.services.tracking_service import build_tracking_view

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ws", tags=["WebSocket"])


def personal_channels(user: User) -> List[str]:
    channels = [user_channel(user.id)]
    if user.seller is not None and user.seller.is_approved:
        channels.append(seller_channel(user.seller.id))
    if user.delivery_person is not None and user.delivery_person.is_approved:
        channels.append(delivery_channel(user.delivery_person.id))
    if user.role == UserRole.ADMIN.value:
        channels.append(ADMIN_CHANNEL)
    return channels


def order_snapshot(db: Session, order_id: str, token: Optional[str], seller_id: Optional[str]) -> Optional[Dict[str, Any]]:
    """Tracking view for the token's user, or None if they may not watch this order"""
    user = resolve_user(db, token)
    order = db.query(Order).filter(Order.id == order_id).first() if user else None
    if user is None or order is None or not order_service.can_view_order(user, order):
        return None

    scope = order_service.viewer_seller_scope(user, order, seller_id)
    if scope is not None and not any(sub.seller_id == scope for sub in order.sub_orders):
        return None

    view = build_tracking_view(order, seller_id=scope, include_otp=order.customer_id == user.id)
    return jsonable_encoder(view)


def channels_for_token(db: Session, token: Optional[str]) -> Optional[List[str]]:
    user = resolve_user(db, token)
    return personal_channels(user) if user is not None else None


async def _serve(websocket: WebSocket, channels: List[str], first_message: Dict[str, Any]) -> None:
    """
    Subscribe, send the first message, then keep the socket open until the
    client leaves. Answers "ping" with a pong event. The socket leaves every
    channel however the connection ends.
    """
    await realtime_manager.connect(websocket, channels)
    try:
        await websocket.send_json(first_message)
        while True:
            message = await websocket.receive_text()
            if message == "ping":
                await websocket.send_json({"event": "pong", "data": None})
    except WebSocketDisconnect:
        logger.debug("WebSocket client disconnected")
    finally:
        realtime_manager.disconnect(websocket)


@router.websocket("/orders/{order_id}")
async def order_updates(
    websocket: WebSocket,
    order_id: str,
    token: Optional[str] = None,
    seller_id: Optional[str] = None,
    session_factory: sessionmaker = Depends(get_session_factory)
):
    """Live tracking for one order: a snapshot on connect, then status and location pushes"""
    # Pushes carry their own data, so the session only lives for the handshake
    db = session_factory()
    try:
        snapshot = order_snapshot(db, order_id, token, seller_id)
    finally:
        db.close()

    if snapshot is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return
    await _serve(websocket, [order_channel(order_id)], {"event": "order:snapshot", "data": snapshot})


@router.websocket("/notifications")
async def notifications(
    websocket: WebSocket,
    token: Optional[str] = None,
    session_factory: sessionmaker = Depends(get_session_factory)
):
    """Personal feed: new orders for sellers, assignments for delivery partners, admin alerts"""
    db = session_factory()
    try:
        channels = channels_for_token(db, token)
    finally:
        db.close()

    if channels is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return
    await _serve(websocket, channels, {"event": "connected", "data": {"channels": channels}})
