from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from app.database import get_db
from app.api.deps import get_current_admin
from app.models.product import Product
from app.models.seller import ApprovalStatus
from app.schemas.common import ResponseModel
from app.schemas.product import ProductResponse, RejectRequest
from app.services import product_service
from app.utils.pagination import paginate_query

router = APIRouter()


@router.get("/pending", response_model=ResponseModel)
def pending_products(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    admin=Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    query = db.query(Product).filter(
        Product.approval_status == ApprovalStatus.PENDING.value
    ).order_by(Product.created_at.asc())
    products, pagination = paginate_query(query, page, limit)
    return ResponseModel(
        success=True,
        data={"items": [ProductResponse.model_validate(p) for p in products], "pagination": pagination}
    )


@router.put("/{product_id}/approve", response_model=ResponseModel)
def approve_product(product_id: str, admin=Depends(get_current_admin), db: Session = Depends(get_db)):
    product = product_service.review_product(db, product_id, approve=True)
    return ResponseModel(success=True, data=ProductResponse.model_validate(product), message="Product approved")


@router.put("/{product_id}/reject", response_model=ResponseModel)
def reject_product(
    product_id: str,
    body: RejectRequest,
    admin=Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    product = product_service.review_product(db, product_id, approve=False, reason=body.reason)
    return ResponseModel(success=True, data=ProductResponse.model_validate(product), message="Product rejected")
