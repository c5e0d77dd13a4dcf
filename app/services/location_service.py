"""
Service area checks and delivery pricing, driven by the delivery_areas table
"""
import logging
from decimal import Decimal
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from app.config import settings
from app.models.delivery_area import DeliveryArea

logger = logging.getLogger(__name__)


def _active_area(db: Session, pincode: Optional[str]) -> Optional[DeliveryArea]:
    if not pincode:
        return None
    return db.query(DeliveryArea).filter(
        DeliveryArea.pincode == pincode,
        DeliveryArea.is_active == True  # noqa: E712
    ).first()


def is_within_service_area(db: Session, pincode: Optional[str]) -> bool:
    """A pincode is serviceable when it has an active area; with no areas configured everything is"""
    if db.query(DeliveryArea).count() == 0:
        return True
    return _active_area(db, pincode) is not None


def calculate_delivery_charge(db: Session, pincode: Optional[str], subtotal: Optional[Decimal] = None) -> Decimal:
    area = _active_area(db, pincode)
    if area is None:
        return Decimal(str(settings.DEFAULT_DELIVERY_CHARGE))
    if (
        subtotal is not None
        and area.free_delivery_above is not None
        and Decimal(subtotal) >= area.free_delivery_above
    ):
        return Decimal("0.00")
    return Decimal(area.delivery_charge)


def describe_location(db: Session, location: Dict[str, Any]) -> Dict[str, Any]:
    """Attach serviceability and pricing to a reverse-geocoded location"""
    pincode = location.get("pincode")
    serviceable = is_within_service_area(db, pincode)
    if not serviceable:
        logger.info("Pincode %s is outside the service area", pincode)
    return {
        "location": location,
        "is_serviceable": serviceable,
        "delivery_charge": calculate_delivery_charge(db, pincode) if serviceable else None,
    }
