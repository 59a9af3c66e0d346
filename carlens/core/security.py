from datetime import datetime, timedelta
from typing import Optional

from jose import jwt
from jose.exceptions import JWTError
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from passlib.context import CryptContext
from pydantic import BaseModel

from carlens.core.config import Settings
from carlens.core.errors import ForbiddenError, UnauthenticatedError

# Security scheme for Swagger UI; missing credentials are reported by get_current_user
security = HTTPBearer(auto_error=False)

# Salted, slow one-way hash for stored passwords
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

class TokenPayload(BaseModel):
    """Model representing JWT token payload."""
    sub: Optional[str] = None
    id: Optional[int] = None
    exp: Optional[int] = None

class TokenData(BaseModel):
    """Model representing extracted token data."""
    user_id: int

def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)

def dummy_verify() -> None:
    """Spend the same time as a real verification when the user is unknown."""
    pwd_context.dummy_verify()

def issue_token(user_id: int, settings: Settings, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed JWT carrying the user id, valid for ACCESS_TOKEN_EXPIRE_MINUTES."""
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = {
        "sub": str(user_id),
        "id": user_id,
        "exp": datetime.utcnow() + expires_delta,
    }
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)

def verify_token(token: str, settings: Settings) -> TokenPayload:
    """Verify and decode JWT token. Expired or tampered tokens raise ForbiddenError."""
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM]
        )
    except JWTError:
        raise ForbiddenError("Invalid or expired token")
    return TokenPayload(**payload)

def authenticate(token: Optional[str], settings: Settings) -> TokenData:
    """Resolve a bearer token to the identity it carries."""
    if not token:
        raise UnauthenticatedError("Missing bearer token")

    payload = verify_token(token, settings)
    if payload.sub is None or not payload.sub.isdigit():
        raise ForbiddenError("Could not validate credentials")

    return TokenData(user_id=int(payload.sub))

def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> TokenData:
    """Dependency to get current user from token."""
    token = credentials.credentials if credentials else None
    return authenticate(token, request.app.state.settings)
