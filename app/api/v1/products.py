from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.product import Product
from app.schemas.common import ResponseModel
from app.schemas.product import ProductResponse
from app.services.product_service import public_products_query
from app.utils.pagination import paginate_query

router = APIRouter()


@router.get("", response_model=ResponseModel)
def list_products(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    seller_id: Optional[str] = None,
    category: Optional[str] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """Browse orderable products"""
    query = public_products_query(db, seller_id=seller_id, category=category, search=search)
    products, pagination = paginate_query(query, page, limit)
    return ResponseModel(
        success=True,
        data={
            "items": [ProductResponse.model_validate(p) for p in products],
            "pagination": pagination
        }
    )


@router.get("/{product_id}", response_model=ResponseModel)
def get_product(product_id: str, db: Session = Depends(get_db)):
    product = public_products_query(db).filter(Product.id == product_id).first()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return ResponseModel(success=True, data=ProductResponse.model_validate(product))
