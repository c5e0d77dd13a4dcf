from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from app.database import get_db
from app.api.deps import get_current_user
from app.schemas.address import CurrentLocationRequest
from app.schemas.common import ResponseModel
from app.services import geocoding_service, location_service

router = APIRouter()


@router.post("/process-current-location", response_model=ResponseModel)
def process_current_location(
    body: CurrentLocationRequest,
    current_user=Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Turn device coordinates into an address prefill plus serviceability"""
    location = geocoding_service.reverse_geocode(body.latitude, body.longitude)
    if location is None:
        raise HTTPException(status_code=404, detail="Could not determine address for this location")

    return ResponseModel(
        success=True,
        data=location_service.describe_location(db, location),
        message="Location processed successfully"
    )


@router.get("/check-service-area/{pincode}", response_model=ResponseModel)
def check_service_area(pincode: str, db: Session = Depends(get_db)):
    serviceable = location_service.is_within_service_area(db, pincode)
    return ResponseModel(
        success=True,
        data={
            "pincode": pincode,
            "is_serviceable": serviceable,
            "delivery_charge": location_service.calculate_delivery_charge(db, pincode) if serviceable else None
        }
    )
