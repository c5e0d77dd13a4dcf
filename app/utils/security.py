from datetime import datetime, timedelta
from typing import Optional, Dict, Any
import secrets
from jose import JWTError, jwt
import bcrypt
from app.config import settings

BCRYPT_ROUNDS = 12

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a plain password against a stored bcrypt hash"""
    if not plain_password or not hashed_password:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8")[:72], hashed_password.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def get_password_hash(password: str) -> str:
    if not password:
        raise ValueError("Password cannot be empty")
    # bcrypt only looks at the first 72 bytes
    password_bytes = password.encode("utf-8")[:72]
    return bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def _encode(data: Dict[str, Any], token_type: str, expires_delta: timedelta) -> str:
    now = datetime.utcnow()
    payload = dict(data)
    payload.update({"exp": now + expires_delta, "iat": now, "type": token_type})
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return _encode(data, ACCESS_TOKEN_TYPE, expires_delta)


def create_refresh_token(data: Dict[str, Any]) -> str:
    return _encode(data, REFRESH_TOKEN_TYPE, timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS))


def decode_token(token: str, expected_type: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """Decode a JWT; returns None when it is invalid, expired or of the wrong type"""
    if not token:
        return None
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    if expected_type and payload.get("type") != expected_type:
        return None
    return payload


def verify_token(token: str) -> Optional[str]:
    """Return the user id carried by an access token"""
    payload = decode_token(token, expected_type=ACCESS_TOKEN_TYPE)
    if payload:
        return payload.get("sub")
    return None


def generate_otp(length: int) -> str:
    return "".join(secrets.choice("0123456789") for _ in range(length))
