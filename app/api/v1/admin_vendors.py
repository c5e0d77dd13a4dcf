from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from app.database import get_db
from app.api.deps import get_current_admin
from app.models.seller import Seller, ApprovalStatus
from app.schemas.common import ResponseModel
from app.schemas.product import RejectRequest
from app.schemas.seller import SellerResponse
from app.services import seller_service
from app.services.realtime_service import realtime_manager, user_channel
from app.utils.pagination import paginate_query

router = APIRouter()


@router.get("", response_model=ResponseModel)
def list_vendors(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status_filter: Optional[ApprovalStatus] = Query(None, alias="status"),
    admin=Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """All vendors, or only pending/approved/rejected ones"""
    query = db.query(Seller)
    if status_filter:
        query = query.filter(Seller.approval_status == status_filter.value)
    sellers, pagination = paginate_query(query.order_by(Seller.created_at.desc()), page, limit)
    return ResponseModel(
        success=True,
        data={"items": [SellerResponse.model_validate(s) for s in sellers], "pagination": pagination}
    )


@router.get("/{seller_id}", response_model=ResponseModel)
def get_vendor(seller_id: str, admin=Depends(get_current_admin), db: Session = Depends(get_db)):
    return ResponseModel(success=True, data=SellerResponse.model_validate(seller_service.get_seller(db, seller_id)))


@router.patch("/{seller_id}/approve", response_model=ResponseModel)
async def approve_vendor(seller_id: str, admin=Depends(get_current_admin), db: Session = Depends(get_db)):
    seller = seller_service.review_seller(db, seller_id, approve=True)
    await realtime_manager.broadcast(user_channel(seller.user_id), "vendor:reviewed", {
        "seller_id": seller.id,
        "approval_status": seller.approval_status
    })
    return ResponseModel(success=True, data=SellerResponse.model_validate(seller), message="Vendor approved")


@router.patch("/{seller_id}/reject", response_model=ResponseModel)
async def reject_vendor(
    seller_id: str,
    body: RejectRequest,
    admin=Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    seller = seller_service.review_seller(db, seller_id, approve=False, reason=body.reason)
    await realtime_manager.broadcast(user_channel(seller.user_id), "vendor:reviewed", {
        "seller_id": seller.id,
        "approval_status": seller.approval_status,
        "reason": seller.rejection_reason
    })
    return ResponseModel(success=True, data=SellerResponse.model_validate(seller), message="Vendor rejected")
