"""
In-process push channels over WebSocket.

A channel is a plain string key: "order:{id}" for one order's tracking view,
"user:{id}", "seller:{id}", "delivery:{id}" for personal feeds and "admin"
for the operations dashboard. Messages are JSON objects {"event", "data"}.
"""
import logging
from collections import defaultdict
from typing import Any, Dict, Iterable, Set

from fastapi import WebSocket
from fastapi.encoders import jsonable_encoder

logger = logging.getLogger(__name__)


def order_channel(order_id: str) -> str:
    return f"order:{order_id}"


def user_channel(user_id: str) -> str:
    return f"user:{user_id}"


def seller_channel(seller_id: str) -> str:
    return f"seller:{seller_id}"


def delivery_channel(delivery_person_id: str) -> str:
    return f"delivery:{delivery_person_id}"


ADMIN_CHANNEL = "admin"


class ConnectionManager:
    def __init__(self):
        self.channels: Dict[str, Set[WebSocket]] = defaultdict(set)

    async def connect(self, websocket: WebSocket, channels: Iterable[str]) -> None:
        await websocket.accept()
        self.subscribe(websocket, channels)

    def subscribe(self, websocket: WebSocket, channels: Iterable[str]) -> None:
        for channel in channels:
            self.channels[channel].add(websocket)
            logger.debug("Subscribed socket to %s", channel)

    def disconnect(self, websocket: WebSocket) -> None:
        for channel in list(self.channels):
            subscribers = self.channels[channel]
            subscribers.discard(websocket)
            if not subscribers:
                del self.channels[channel]

    def subscriber_count(self, channel: str) -> int:
        return len(self.channels.get(channel, ()))

    async def broadcast(self, channel: str, event: str, data: Any) -> int:
        """Send one event to every subscriber of a channel; returns the number delivered"""
        subscribers = list(self.channels.get(channel, ()))
        if not subscribers:
            return 0

        message = {"event": event, "data": jsonable_encoder(data)}
        delivered = 0
        dead = []
        for websocket in subscribers:
            try:
                await websocket.send_json(message)
                delivered += 1
            except Exception as e:
                # Socket went away without a clean disconnect
                logger.warning("Dropping subscriber of %s: %s", channel, e)
                dead.append(websocket)
        for websocket in dead:
            self.disconnect(websocket)
        return delivered


realtime_manager = ConnectionManager()
