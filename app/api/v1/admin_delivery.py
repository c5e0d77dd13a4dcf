from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from app.database import get_db
from app.api.deps import get_current_admin
from app.models.delivery_person import DeliveryPerson
from app.models.seller import ApprovalStatus
from app.schemas.common import ResponseModel
from app.schemas.delivery import DeliveryPersonResponse
from app.services import delivery_service

router = APIRouter()


@router.get("", response_model=ResponseModel)
def list_delivery_persons(
    status_filter: Optional[ApprovalStatus] = Query(None, alias="status"),
    available: Optional[bool] = None,
    admin=Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    query = db.query(DeliveryPerson)
    if status_filter:
        query = query.filter(DeliveryPerson.approval_status == status_filter.value)
    if available is not None:
        query = query.filter(DeliveryPerson.is_available == available)
    persons = query.order_by(DeliveryPerson.created_at.desc()).all()
    return ResponseModel(success=True, data=[DeliveryPersonResponse.model_validate(p) for p in persons])


@router.patch("/{person_id}/approve", response_model=ResponseModel)
def approve_delivery_person(person_id: str, admin=Depends(get_current_admin), db: Session = Depends(get_db)):
    person = delivery_service.review_delivery_person(db, person_id, approve=True)
    return ResponseModel(success=True, data=DeliveryPersonResponse.model_validate(person), message="Delivery partner approved")


@router.patch("/{person_id}/reject", response_model=ResponseModel)
def reject_delivery_person(person_id: str, admin=Depends(get_current_admin), db: Session = Depends(get_db)):
    person = delivery_service.review_delivery_person(db, person_id, approve=False)
    return ResponseModel(success=True, data=DeliveryPersonResponse.model_validate(person), message="Delivery partner rejected")
