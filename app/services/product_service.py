from datetime import datetime
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy import or_
from sqlalchemy.orm import Session, Query

from app.models.product import Product
from app.models.seller import Seller, ApprovalStatus
from app.schemas.product import ProductCreate, ProductUpdate


def _check_quantity_limits(min_qty: int, max_qty: Optional[int]) -> None:
    if max_qty is not None and max_qty < min_qty:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Maximum order quantity cannot be less than minimum order quantity"
        )


def public_products_query(
    db: Session,
    seller_id: Optional[str] = None,
    category: Optional[str] = None,
    search: Optional[str] = None,
) -> Query:
    """Approved, active products of approved sellers"""
    query = db.query(Product).join(Seller, Product.seller_id == Seller.id).filter(
        Product.is_active == True,  # noqa: E712
        Product.approval_status == ApprovalStatus.APPROVED.value,
        Seller.approval_status == ApprovalStatus.APPROVED.value
    )
    if seller_id:
        query = query.filter(Product.seller_id == seller_id)
    if category:
        query = query.filter(Product.category == category)
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(Product.name.ilike(pattern), Product.description.ilike(pattern)))
    return query.order_by(Product.created_at.desc())


def get_seller_product(db: Session, seller: Seller, product_id: str) -> Product:
    product = db.query(Product).filter(Product.id == product_id, Product.seller_id == seller.id).first()
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return product


def create_product(db: Session, seller: Seller, data: ProductCreate) -> Product:
    _check_quantity_limits(data.min_order_qty, data.max_order_qty)
    product = Product(seller_id=seller.id, approval_status=ApprovalStatus.PENDING.value, **data.model_dump())
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


def update_product(db: Session, seller: Seller, product_id: str, data: ProductUpdate) -> Product:
    """Apply seller edits; any edit sends the product back for approval"""
    product = get_seller_product(db, seller, product_id)
    changes = data.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No update data provided")

    _check_quantity_limits(
        changes.get("min_order_qty", product.min_order_qty),
        changes.get("max_order_qty", product.max_order_qty),
    )
    for name, value in changes.items():
        setattr(product, name, value)
    if set(changes) - {"stock", "is_active"}:
        product.approval_status = ApprovalStatus.PENDING.value
        product.approved_at = None
    db.commit()
    db.refresh(product)
    return product


def delete_product(db: Session, seller: Seller, product_id: str) -> None:
    product = get_seller_product(db, seller, product_id)
    db.delete(product)
    db.commit()


def review_product(db: Session, product_id: str, approve: bool, reason: Optional[str] = None) -> Product:
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    if approve:
        product.approval_status = ApprovalStatus.APPROVED.value
        product.approved_at = datetime.utcnow()
        product.rejection_reason = None
    else:
        product.approval_status = ApprovalStatus.REJECTED.value
        product.rejection_reason = reason
    db.commit()
    db.refresh(product)
    return product
