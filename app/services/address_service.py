"""
Customer address management.

Every query is scoped by both address id and user id, so another user's
address behaves exactly like a missing one (404). A user has at most one
default address: before an address becomes default, the flag is cleared on
all of the user's addresses.
"""
import logging
from datetime import datetime
from typing import Dict, List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.models.delivery_address import DeliveryAddress
from app.schemas.address import AddressCreate, AddressResponse, AddressUpdate
from app.services import geocoding_service

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("full_name", "address_line1", "city", "state", "postal_code")
ADDRESS_LINE_FIELDS = ("address_line1", "address_line2", "city", "state", "postal_code")


def format_full_address(
    address_line1: str,
    address_line2: Optional[str],
    city: str,
    state: str,
    postal_code: str,
) -> str:
    line2 = f"{address_line2}, " if address_line2 else ""
    return f"{address_line1}, {line2}{city}, {state}, {postal_code}"


def _geocode(fields: Dict[str, Optional[str]]) -> Optional[Dict[str, float]]:
    full_address = format_full_address(
        fields["address_line1"],
        fields.get("address_line2"),
        fields["city"],
        fields["state"],
        fields["postal_code"],
    )
    result = geocoding_service.geocode_address(full_address)
    if result is None:
        logger.warning("Could not geocode address %r, saving without coordinates", full_address)
    return result


def _clear_default(db: Session, user_id: str) -> None:
    db.query(DeliveryAddress).filter(
        DeliveryAddress.user_id == user_id
    ).update({"is_default": False}, synchronize_session="fetch")


def list_addresses(db: Session, user_id: str) -> List[DeliveryAddress]:
    """Default address first, then newest first"""
    return db.query(DeliveryAddress).filter(
        DeliveryAddress.user_id == user_id
    ).order_by(DeliveryAddress.is_default.desc(), DeliveryAddress.created_at.desc()).all()


def get_address(db: Session, user_id: str, address_id: str) -> DeliveryAddress:
    address = db.query(DeliveryAddress).filter(
        DeliveryAddress.id == address_id,
        DeliveryAddress.user_id == user_id
    ).first()
    if not address:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Address not found")
    return address


def clean_new_address(data: AddressCreate) -> Dict[str, Optional[str]]:
    """Trimmed field values of a new address; 400 when a required one is blank"""
    fields = data.model_dump()
    for name in REQUIRED_FIELDS + ("address_line2", "phone_number", "label"):
        if isinstance(fields.get(name), str):
            fields[name] = fields[name].strip() or None

    if any(not fields.get(name) for name in REQUIRED_FIELDS):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing required address fields.")
    return fields


def add_address(db: Session, user_id: str, fields: Dict[str, Optional[str]]) -> DeliveryAddress:
    """Geocode and stage a cleaned address; the caller commits"""
    coordinates = _geocode(fields)

    if fields["is_default"]:
        _clear_default(db, user_id)

    address = DeliveryAddress(
        user_id=user_id,
        full_name=fields["full_name"],
        phone_number=fields["phone_number"],
        address_line1=fields["address_line1"],
        address_line2=fields["address_line2"],
        city=fields["city"],
        state=fields["state"],
        postal_code=fields["postal_code"],
        label=fields["label"],
        latitude=coordinates["latitude"] if coordinates else None,
        longitude=coordinates["longitude"] if coordinates else None,
        is_default=bool(fields["is_default"]),
    )
    db.add(address)
    db.flush()
    return address


def create_address(db: Session, user_id: str, data: AddressCreate) -> DeliveryAddress:
    address = add_address(db, user_id, clean_new_address(data))
    db.commit()
    db.refresh(address)
    logger.info("Created address %s for user %s", address.id, user_id)
    return address


def update_address(db: Session, user_id: str, address_id: str, data: AddressUpdate) -> DeliveryAddress:
    """
    Apply the fields present in the request.

    Coordinates are recomputed only when an address-line field actually
    changes; a failed lookup clears them rather than keeping stale ones.
    is_default=True makes this the user's only default, False clears it and
    an omitted flag leaves it alone.
    """
    address = get_address(db, user_id, address_id)

    changes = data.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No update data provided.")

    for name, value in changes.items():
        if isinstance(value, str):
            changes[name] = value.strip() or None
    if any(name in changes and not changes[name] for name in REQUIRED_FIELDS):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing required address fields.")

    make_default = changes.pop("is_default", None)

    address_changed = any(
        name in changes and changes[name] != getattr(address, name)
        for name in ADDRESS_LINE_FIELDS
    )

    for name, value in changes.items():
        setattr(address, name, value)

    if address_changed:
        merged = {name: getattr(address, name) for name in ADDRESS_LINE_FIELDS}
        coordinates = _geocode(merged)
        address.latitude = coordinates["latitude"] if coordinates else None
        address.longitude = coordinates["longitude"] if coordinates else None

    # An omitted flag keeps the current value; only an explicit false un-defaults
    if make_default:
        _clear_default(db, user_id)
        address.is_default = True
    elif make_default is False:
        address.is_default = False

    address.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(address)
    return address


def set_default_address(db: Session, user_id: str, address_id: str) -> DeliveryAddress:
    address = get_address(db, user_id, address_id)

    # Two sequential writes: clear every default of the user, then mark this one
    _clear_default(db, user_id)
    address.is_default = True
    address.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(address)
    return address


def delete_address(db: Session, user_id: str, address_id: str) -> AddressResponse:
    """Delete an address. Removing the default leaves the user with no default."""
    address = get_address(db, user_id, address_id)
    deleted = AddressResponse.model_validate(address)
    db.delete(address)
    db.commit()
    logger.info("Deleted address %s for user %s", address_id, user_id)
    return deleted
