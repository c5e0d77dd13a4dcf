from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.user import UserCreate, UserLogin, UserResponse, RefreshTokenRequest
from app.schemas.common import ResponseModel
from app.services.auth_service import register_user, authenticate_user, create_tokens, refresh_access_token
from app.models.user import User
from app.api.deps import get_current_user

router = APIRouter()


def _session_payload(user: User) -> dict:
    tokens = create_tokens(user)
    return {
        "user": UserResponse.model_validate(user),
        "token": tokens["token"],
        "refresh_token": tokens["refresh_token"]
    }


@router.post("/register", response_model=ResponseModel, status_code=status.HTTP_201_CREATED)
def register(user_data: UserCreate, db: Session = Depends(get_db)):
    """Register a new customer account"""
    user = register_user(db, user_data)
    return ResponseModel(success=True, data=_session_payload(user), message="Registration successful")


@router.post("/login", response_model=ResponseModel)
def login(credentials: UserLogin, db: Session = Depends(get_db)):
    user = authenticate_user(db, email=credentials.email, password=credentials.password)
    return ResponseModel(success=True, data=_session_payload(user), message="Login successful")


@router.post("/refresh", response_model=ResponseModel)
def refresh(body: RefreshTokenRequest, db: Session = Depends(get_db)):
    """Exchange a refresh token for a new token pair"""
    tokens = refresh_access_token(db, body.refresh_token)
    return ResponseModel(success=True, data=tokens, message="Token refreshed")


@router.get("/me", response_model=ResponseModel)
def me(current_user: User = Depends(get_current_user)):
    return ResponseModel(success=True, data=UserResponse.model_validate(current_user))
