"""
Geometry helpers for delivery tracking.

Distances are great-circle (haversine) distances; road routing is left to the
client map, the server only needs a reasonable distance and ETA estimate.
"""
import math
from typing import Any, Dict, Optional

from app.config import settings

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))


def estimate_eta_minutes(distance_km: float, speed_kmph: Optional[float] = None) -> int:
    speed = speed_kmph or settings.AVERAGE_DELIVERY_SPEED_KMPH
    if speed <= 0:
        return 0
    return int(math.ceil(distance_km / speed * 60))


def build_route(
    origin_lat: Optional[float],
    origin_lng: Optional[float],
    dest_lat: Optional[float],
    dest_lng: Optional[float],
) -> Optional[Dict[str, Any]]:
    """Route between the mover and the destination, or None if either end is unknown"""
    if None in (origin_lat, origin_lng, dest_lat, dest_lng):
        return None
    distance = haversine_km(origin_lat, origin_lng, dest_lat, dest_lng)
    return {
        "origin": {"latitude": origin_lat, "longitude": origin_lng},
        "destination": {"latitude": dest_lat, "longitude": dest_lng},
        "distance_km": round(distance, 2),
        "eta_minutes": estimate_eta_minutes(distance),
    }
