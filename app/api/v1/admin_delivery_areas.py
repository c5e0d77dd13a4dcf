from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.api.deps import get_current_admin
from app.models.delivery_area import DeliveryArea
from app.schemas.common import ResponseModel
from app.schemas.delivery_area import DeliveryAreaCreate, DeliveryAreaUpdate, DeliveryAreaResponse

router = APIRouter()


def _get_area(db: Session, area_id: str) -> DeliveryArea:
    area = db.query(DeliveryArea).filter(DeliveryArea.id == area_id).first()
    if not area:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Delivery area not found")
    return area


@router.get("", response_model=ResponseModel)
def list_areas(admin=Depends(get_current_admin), db: Session = Depends(get_db)):
    areas = db.query(DeliveryArea).order_by(DeliveryArea.city, DeliveryArea.pincode).all()
    return ResponseModel(success=True, data=[DeliveryAreaResponse.model_validate(a) for a in areas])


@router.post("", response_model=ResponseModel, status_code=status.HTTP_201_CREATED)
def create_area(data: DeliveryAreaCreate, admin=Depends(get_current_admin), db: Session = Depends(get_db)):
    if db.query(DeliveryArea).filter(DeliveryArea.pincode == data.pincode).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Delivery area for this pincode already exists")
    area = DeliveryArea(**data.model_dump())
    db.add(area)
    db.commit()
    db.refresh(area)
    return ResponseModel(success=True, data=DeliveryAreaResponse.model_validate(area), message="Delivery area created")


@router.put("/{area_id}", response_model=ResponseModel)
def update_area(area_id: str, data: DeliveryAreaUpdate, admin=Depends(get_current_admin), db: Session = Depends(get_db)):
    area = _get_area(db, area_id)
    for name, value in data.model_dump(exclude_unset=True).items():
        setattr(area, name, value)
    db.commit()
    db.refresh(area)
    return ResponseModel(success=True, data=DeliveryAreaResponse.model_validate(area), message="Delivery area updated")


@router.delete("/{area_id}", response_model=ResponseModel)
def delete_area(area_id: str, admin=Depends(get_current_admin), db: Session = Depends(get_db)):
    area = _get_area(db, area_id)
    db.delete(area)
    db.commit()
    return ResponseModel(success=True, message="Delivery area deleted")
