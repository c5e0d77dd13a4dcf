import logging
from datetime import datetime
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.models.seller import Seller, ApprovalStatus
from app.models.user import User, UserRole
from app.schemas.seller import SellerApply
from app.services import geocoding_service

logger = logging.getLogger(__name__)


def apply_as_seller(db: Session, user: User, data: SellerApply) -> Seller:
    """Create a pending seller profile for a customer account"""
    if user.seller is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Seller application already exists")
    if user.role != UserRole.CUSTOMER.value:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Only customer accounts can apply as sellers")

    seller = Seller(user_id=user.id, **data.model_dump())
    coordinates = geocoding_service.geocode_address(f"{data.business_address}, {data.city}, {data.pincode}")
    if coordinates:
        seller.latitude = coordinates["latitude"]
        seller.longitude = coordinates["longitude"]

    db.add(seller)
    db.commit()
    db.refresh(seller)
    logger.info("Seller application %s submitted by user %s", seller.id, user.id)
    return seller


def get_seller(db: Session, seller_id: str) -> Seller:
    seller = db.query(Seller).filter(Seller.id == seller_id).first()
    if not seller:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Vendor not found")
    return seller


def review_seller(db: Session, seller_id: str, approve: bool, reason: Optional[str] = None) -> Seller:
    seller = get_seller(db, seller_id)
    if approve:
        seller.approval_status = ApprovalStatus.APPROVED.value
        seller.approved_at = datetime.utcnow()
        seller.rejection_reason = None
        seller.user.role = UserRole.SELLER.value
    else:
        seller.approval_status = ApprovalStatus.REJECTED.value
        seller.rejection_reason = reason
    db.commit()
    db.refresh(seller)
    logger.info("Vendor %s %s", seller.id, seller.approval_status)
    return seller
