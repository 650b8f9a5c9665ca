from fastapi import Depends, HTTPException, status, Request
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import datetime

from ..core.config import settings
from ..core.database import get_db, get_redis
from ..core.errors import AuthenticationError, AuthorizationError
from ..core.security import (
    ACCESS, security, verify_token, is_access_token_revoked, UserRole, TokenPayload
)
from ..domain.policy import Action, NO_OWNERS, Principal, can_access
from ..models.user import User

async def get_current_user_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    redis_client = Depends(get_redis)
) -> TokenPayload:
    """Extract and verify JWT token from Authorization header."""
    if credentials is None:
        raise AuthenticationError("Authentication required. No token provided.")

    token_payload = verify_token(credentials.credentials)
    if not token_payload:
        raise AuthenticationError("Invalid or expired token")

    # Check if token is access token
    if token_payload.token_type != ACCESS:
        raise AuthenticationError("Invalid token type")

    if is_access_token_revoked(redis_client, token_payload):
        raise AuthenticationError("Token has been revoked")

    return token_payload

async def get_current_user(
    token_payload: TokenPayload = Depends(get_current_user_token),
    db: Session = Depends(get_db)
) -> User:
    """Get current authenticated user from database."""
    if token_payload.user_id is None:
        raise AuthenticationError("Invalid token payload")

    user = db.query(User).filter(User.id == token_payload.user_id).first()
    if not user:
        raise AuthenticationError("User not found")

    if not user.is_active:
        raise AuthenticationError("User account is deactivated")

    user.last_login = datetime.utcnow()
    db.commit()

    return user

async def get_current_principal(
    current_user: User = Depends(get_current_user)
) -> Principal:
    """Identity and role of the caller, fixed for the rest of the request."""
    return Principal.from_user(current_user)

# Role-based access control dependencies
def require_role(allowed_roles: List[UserRole]):
    """Create a dependency that requires specific user roles."""
    async def role_checker(
        principal: Principal = Depends(get_current_principal)
    ) -> Principal:
        if principal.role not in allowed_roles:
            raise AuthorizationError("Not authorized to access this resource")
        return principal

    return role_checker

def require_permission(action: Action):
    """Create a dependency for actions that do not target an existing resource."""
    async def permission_checker(
        principal: Principal = Depends(get_current_principal)
    ) -> Principal:
        if not can_access(principal, NO_OWNERS, action):
            raise AuthorizationError("Not authorized to access this resource")
        return principal

    return permission_checker

get_admin = require_role([UserRole.ADMIN])
get_clinician = require_role([UserRole.DOCTOR, UserRole.ADMIN])

# Rate limiting dependency
async def rate_limit_check(
    request: Request,
    redis_client = Depends(get_redis)
) -> None:
    """Fixed-window rate limit per client address."""
    client_ip = request.client.host if request.client else "unknown"
    key = f"rate_limit:{client_ip}"

    current_requests = redis_client.get(key)
    if current_requests is None:
        redis_client.setex(key, settings.RATE_LIMIT_WINDOW_SECONDS, 1)
    else:
        if int(current_requests) >= settings.RATE_LIMIT_REQUESTS:
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail="Too many requests. Please try again later."
            )
        redis_client.incr(key)
