from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.api.deps import get_current_user
from app.models.user import User
from app.schemas.address import AddressCreate, AddressUpdate, AddressResponse
from app.schemas.common import ResponseModel
from app.services import address_service

router = APIRouter()


@router.get("", response_model=ResponseModel)
def list_addresses(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """User's addresses, default first then newest"""
    addresses = address_service.list_addresses(db, current_user.id)
    return ResponseModel(
        success=True,
        data=[AddressResponse.model_validate(address) for address in addresses],
        message="Addresses fetched successfully"
    )


@router.post("", response_model=ResponseModel, status_code=201)
def create_address(
    address_data: AddressCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    address = address_service.create_address(db, current_user.id, address_data)
    return ResponseModel(
        success=True,
        data=AddressResponse.model_validate(address),
        message="Address added successfully"
    )


@router.put("/{address_id}", response_model=ResponseModel)
def update_address(
    address_id: str,
    address_data: AddressUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    address = address_service.update_address(db, current_user.id, address_id, address_data)
    return ResponseModel(
        success=True,
        data=AddressResponse.model_validate(address),
        message="Address updated successfully"
    )


@router.patch("/{address_id}/set-default", response_model=ResponseModel)
def set_default_address(
    address_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    address = address_service.set_default_address(db, current_user.id, address_id)
    return ResponseModel(
        success=True,
        data=AddressResponse.model_validate(address),
        message="Default address updated"
    )


@router.delete("/{address_id}", response_model=ResponseModel)
def delete_address(
    address_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    deleted = address_service.delete_address(db, current_user.id, address_id)
    return ResponseModel(success=True, data=deleted, message="Address deleted successfully")
