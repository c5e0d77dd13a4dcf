from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from app.models.user import User, UserRole
from app.schemas.user import UserCreate
from app.utils.security import (
    get_password_hash, verify_password, create_access_token, create_refresh_token,
    decode_token, REFRESH_TOKEN_TYPE
)


def register_user(db: Session, user_data: UserCreate) -> User:
    """Register a new customer account"""
    email = user_data.email.lower()
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered"
        )

    user = User(
        first_name=user_data.first_name.strip(),
        last_name=user_data.last_name,
        email=email,
        phone=user_data.phone,
        password_hash=get_password_hash(user_data.password),
        role=UserRole.CUSTOMER.value
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def authenticate_user(db: Session, email: str, password: str) -> User:
    user = db.query(User).filter(User.email == email.lower()).first()
    if not user or not verify_password(password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password"
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive"
        )
    return user


def create_tokens(user: User) -> dict:
    claims = {"sub": str(user.id), "email": user.email, "role": user.role}
    return {
        "token": create_access_token(claims),
        "refresh_token": create_refresh_token({"sub": str(user.id)})
    }


def refresh_access_token(db: Session, refresh_token: str) -> dict:
    payload = decode_token(refresh_token, expected_type=REFRESH_TOKEN_TYPE)
    user = None
    if payload and payload.get("sub"):
        user = db.query(User).filter(User.id == payload["sub"]).first()
    if user is None or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid refresh token"
        )
    return create_tokens(user)
