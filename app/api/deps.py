from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from app.database import get_db
from app.utils.security import verify_token
from app.models.user import User, UserRole
from app.models.seller import Seller
from app.models.delivery_person import DeliveryPerson

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")


def resolve_user(db: Session, token: Optional[str]) -> Optional[User]:
    """Active user behind an access token, or None"""
    user_id = verify_token(token) if token else None
    if user_id is None:
        return None
    user = db.query(User).filter(User.id == user_id).first()
    if user is None or not user.is_active:
        return None
    return user


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> User:
    """Get current authenticated user"""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    user_id = verify_token(token)
    if user_id is None:
        raise credentials_exception

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise credentials_exception

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive"
        )

    return user


def require_roles(*roles: UserRole):
    """Dependency factory restricting an endpoint to the given roles"""
    allowed = {role.value for role in roles}

    async def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required role: {', '.join(sorted(allowed))}"
            )
        return current_user

    return role_checker


get_current_admin = require_roles(UserRole.ADMIN)


async def get_current_seller(current_user: User = Depends(get_current_user)) -> Seller:
    """Approved seller profile of the current user"""
    seller = current_user.seller
    if current_user.role != UserRole.SELLER.value or seller is None or not seller.is_approved:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. Approved seller account required"
        )
    return seller


async def get_current_delivery_person(current_user: User = Depends(get_current_user)) -> DeliveryPerson:
    """Approved delivery profile of the current user"""
    person = current_user.delivery_person
    if current_user.role != UserRole.DELIVERY_BOY.value or person is None or not person.is_approved:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. Approved delivery partner account required"
        )
    return person
