"""
Google Geocoding adapter.

Both lookups return None instead of raising: callers treat a missing result
as "no coordinates" and carry on.
"""
import logging
from typing import Any, Dict, Optional

import requests

from app.config import settings

logger = logging.getLogger(__name__)


def _lookup(params: Dict[str, str]) -> Optional[Dict[str, Any]]:
    """Call the geocoding API and return the first result, or None"""
    if not settings.GOOGLE_MAPS_API_KEY:
        logger.error("GOOGLE_MAPS_API_KEY is not configured, skipping geocoding")
        return None

    try:
        response = requests.get(
            settings.GEOCODING_API_URL,
            params={**params, "key": settings.GOOGLE_MAPS_API_KEY},
            timeout=settings.GEOCODING_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        payload = response.json()
    except requests.RequestException as e:
        logger.error("Geocoding request failed: %s", e)
        return None
    except ValueError:
        logger.error("Geocoding API returned a non-JSON body")
        return None

    if not isinstance(payload, dict):
        logger.error("Unexpected geocoding payload: %r", payload)
        return None

    status = payload.get("status")
    results = payload.get("results") or []
    if status == "OK" and results:
        return results[0]
    if status == "ZERO_RESULTS":
        logger.warning("No geocoding results for %s", params)
    else:
        logger.error("Geocoding failed with status %s: %s", status, payload.get("error_message", "no error message"))
    return None


def geocode_address(address: str) -> Optional[Dict[str, Any]]:
    """
    Resolve a free-form address to coordinates.

    Returns {"latitude", "longitude", "formatted_address"} or None.
    """
    if not address or not address.strip():
        return None

    result = _lookup({"address": address})
    if result is None:
        return None

    try:
        location = result["geometry"]["location"]
        return {
            "latitude": float(location["lat"]),
            "longitude": float(location["lng"]),
            "formatted_address": result.get("formatted_address", address),
        }
    except (KeyError, TypeError, ValueError):
        logger.error("Geocoding result for %r has no usable location", address)
        return None


def _component(components, kind: str) -> Optional[str]:
    for component in components:
        if kind in component.get("types", []):
            return component.get("long_name")
    return None


def reverse_geocode(latitude: float, longitude: float) -> Optional[Dict[str, Any]]:
    """
    Resolve coordinates to a structured address.

    Returns {"formatted_address", "address_line1", "city", "state", "pincode",
    "latitude", "longitude"} or None.
    """
    result = _lookup({"latlng": f"{latitude},{longitude}"})
    if result is None:
        return None

    components = result.get("address_components") or []
    try:
        street_number = _component(components, "street_number")
        route = _component(components, "route")
        sublocality = _component(components, "sublocality_level_2")
        city = _component(components, "locality")
        state = _component(components, "administrative_area_level_1")
        pincode = _component(components, "postal_code")
    except AttributeError:
        logger.error("Malformed address components for %s,%s", latitude, longitude)
        return None

    address_line1 = " ".join(part for part in (street_number, route) if part)
    if sublocality:
        address_line1 = f"{sublocality}, {address_line1}" if address_line1 else sublocality
    if not address_line1:
        address_line1 = city or "Unknown location"

    return {
        "formatted_address": result.get("formatted_address", ""),
        "address_line1": address_line1,
        "city": city or "Unknown City",
        "state": state or "Unknown State",
        "pincode": pincode or "",
        "latitude": latitude,
        "longitude": longitude,
    }
