from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi.security import HTTPBearer
from pydantic import BaseModel
import hashlib
import time
import uuid
from enum import Enum

from .config import settings

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# JWT Security; a missing header is reported by get_current_user_token as a 401
security = HTTPBearer(auto_error=False)

class UserRole(str, Enum):
    ADMIN = "admin"
    DOCTOR = "doctor"
    PATIENT = "patient"

class Token(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int

class TokenPayload(BaseModel):
    sub: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    exp: Optional[int] = None
    jti: Optional[str] = None
    token_type: Optional[str] = None  # "access" or "refresh"

    @property
    def user_id(self) -> Optional[int]:
        try:
            return int(self.sub)
        except (TypeError, ValueError):
            return None

# Password utilities
def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    """Generate password hash."""
    return pwd_context.hash(password)

def hash_token(token: str) -> str:
    """Digest stored in place of a raw refresh token."""
    return hashlib.sha256(token.encode()).hexdigest()

# JWT utilities
ACCESS = "access"
REFRESH = "refresh"

def _claims(user_id: int, email: str, role: UserRole) -> dict:
    # python-jose rejects a non-string subject on decode
    return {"sub": str(user_id), "email": email, "role": UserRole(role).value}

def _encode(claims: dict, token_type: str, lifetime: timedelta) -> str:
    payload = dict(
        claims,
        exp=datetime.utcnow() + lifetime,
        jti=uuid.uuid4().hex,
        token_type=token_type,
    )
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

def create_access_token(user_id: int, email: str, role: UserRole) -> str:
    lifetime = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return _encode(_claims(user_id, email, role), ACCESS, lifetime)

def create_token_pair(user_id: int, email: str, role: UserRole) -> Token:
    """Access token plus a refresh token carrying the same identity claims."""
    claims = _claims(user_id, email, role)

    return Token(
        access_token=_encode(claims, ACCESS, timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)),
        refresh_token=_encode(claims, REFRESH, timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)),
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60
    )

def verify_token(token: str) -> Optional[TokenPayload]:
    """Decode a token; None when the signature or expiry check fails."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None

    return TokenPayload(**payload)

# Access token revocation (logout)
def _revoked_key(jti: str) -> str:
    return f"revoked_token:{jti}"

def revoke_access_token(redis_client, token_payload: TokenPayload) -> None:
    """Blacklist an access token until it would have expired anyway."""
    if not token_payload.jti or not token_payload.exp:
        return

    remaining = int(token_payload.exp - time.time())
    if remaining > 0:
        redis_client.setex(_revoked_key(token_payload.jti), remaining, 1)

def is_access_token_revoked(redis_client, token_payload: TokenPayload) -> bool:
    if not token_payload.jti:
        return False
    return redis_client.get(_revoked_key(token_payload.jti)) is not None
