from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.api.deps import get_current_user, get_current_seller
from app.models.order import SubOrder
from app.models.product import Product
from app.models.seller import Seller
from app.models.user import User
from app.schemas.common import ResponseModel
from app.schemas.order import SubOrderResponse, SubOrderStatusUpdate
from app.schemas.product import ProductCreate, ProductUpdate, ProductResponse
from app.schemas.seller import SellerApply, SellerResponse
from app.services import order_service, product_service, seller_service
from app.services.realtime_service import realtime_manager, ADMIN_CHANNEL
from app.utils.notification_helper import notify_order_status
from app.utils.pagination import paginate_query

router = APIRouter()


@router.post("/apply", response_model=ResponseModel, status_code=status.HTTP_201_CREATED)
async def apply(
    data: SellerApply,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Submit a vendor application for admin review"""
    seller = seller_service.apply_as_seller(db, current_user, data)
    await realtime_manager.broadcast(ADMIN_CHANNEL, "vendor:applied", {
        "seller_id": seller.id,
        "business_name": seller.business_name,
        "city": seller.city
    })
    return ResponseModel(
        success=True,
        data=SellerResponse.model_validate(seller),
        message="Application submitted. You will be notified once it is reviewed."
    )


@router.get("/me", response_model=ResponseModel)
def my_seller_profile(current_user: User = Depends(get_current_user)):
    if current_user.seller is None:
        return ResponseModel(success=True, data=None, message="No seller application found")
    return ResponseModel(success=True, data=SellerResponse.model_validate(current_user.seller))


@router.get("/products", response_model=ResponseModel)
def list_my_products(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    seller: Seller = Depends(get_current_seller),
    db: Session = Depends(get_db)
):
    query = db.query(Product).filter(Product.seller_id == seller.id).order_by(Product.created_at.desc())
    products, pagination = paginate_query(query, page, limit)
    return ResponseModel(
        success=True,
        data={"items": [ProductResponse.model_validate(p) for p in products], "pagination": pagination}
    )


@router.post("/products", response_model=ResponseModel, status_code=status.HTTP_201_CREATED)
def create_product(
    data: ProductCreate,
    seller: Seller = Depends(get_current_seller),
    db: Session = Depends(get_db)
):
    product = product_service.create_product(db, seller, data)
    return ResponseModel(
        success=True,
        data=ProductResponse.model_validate(product),
        message="Product submitted for approval"
    )


@router.put("/products/{product_id}", response_model=ResponseModel)
def update_product(
    product_id: str,
    data: ProductUpdate,
    seller: Seller = Depends(get_current_seller),
    db: Session = Depends(get_db)
):
    product = product_service.update_product(db, seller, product_id, data)
    return ResponseModel(success=True, data=ProductResponse.model_validate(product), message="Product updated")


@router.delete("/products/{product_id}", response_model=ResponseModel)
def delete_product(
    product_id: str,
    seller: Seller = Depends(get_current_seller),
    db: Session = Depends(get_db)
):
    product_service.delete_product(db, seller, product_id)
    return ResponseModel(success=True, message="Product deleted")


@router.get("/orders", response_model=ResponseModel)
def list_my_sub_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status_filter: Optional[str] = Query(None, alias="status"),
    seller: Seller = Depends(get_current_seller),
    db: Session = Depends(get_db)
):
    """Sub-orders addressed to this seller, newest first"""
    query = db.query(SubOrder).filter(SubOrder.seller_id == seller.id)
    if status_filter:
        query = query.filter(SubOrder.status == status_filter)
    sub_orders, pagination = paginate_query(query.order_by(SubOrder.created_at.desc()), page, limit)
    return ResponseModel(
        success=True,
        data={"items": [SubOrderResponse.model_validate(s) for s in sub_orders], "pagination": pagination}
    )


@router.patch("/sub-orders/{sub_order_id}/status", response_model=ResponseModel)
async def update_sub_order_status(
    sub_order_id: str,
    body: SubOrderStatusUpdate,
    seller: Seller = Depends(get_current_seller),
    db: Session = Depends(get_db)
):
    sub_order = order_service.update_sub_order_status(db, seller, seller.user_id, sub_order_id, body.status)
    await notify_order_status(sub_order.order, sub_order)
    return ResponseModel(
        success=True,
        data=SubOrderResponse.model_validate(sub_order),
        message=f"Sub-order status updated to {sub_order.status}"
    )
