from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Optional

from ...core.database import get_db, get_redis
from ...core.security import ACCESS, security, verify_token, revoke_access_token
from ...api.deps import get_current_user, rate_limit_check
from ...services.auth_service import AuthService
from ...schemas.auth import (
    UserLogin, UserRegister, UserResponse, UserEnvelope,
    RefreshTokenRequest, LogoutRequest, RegisterResponse, TokenResponse
)
from ...schemas.common import MessageResponse
from ...models.user import User

router = APIRouter(prefix="/auth", tags=["Authentication"])

@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserRegister,
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit_check)
):
    """Register a new user."""
    auth_service = AuthService(db)
    user = auth_service.register_user(user_data)

    return RegisterResponse(
        message="User registered successfully",
        user=UserResponse.from_orm(user),
        token=auth_service.issue_access_token(user),
    )

@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: UserLogin,
    db: Session = Depends(get_db),
):
    """Authenticate user and return access tokens."""
    user, tokens = AuthService(db).authenticate_user(login_data)

    return TokenResponse(
        message="Login successful",
        user=UserResponse.from_orm(user),
        token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        token_type=tokens.token_type,
        expires_in=tokens.expires_in,
    )

@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(
    refresh_data: RefreshTokenRequest,
    db: Session = Depends(get_db)
):
    """Refresh access token using refresh token."""
    user, tokens = AuthService(db).refresh_access_token(refresh_data.refresh_token)

    return TokenResponse(
        message="Token refreshed",
        user=UserResponse.from_orm(user),
        token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        token_type=tokens.token_type,
        expires_in=tokens.expires_in,
    )

@router.post("/logout", response_model=MessageResponse)
async def logout(
    refresh_data: Optional[LogoutRequest] = None,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
    redis_client = Depends(get_redis)
):
    """Revoke the presented refresh token and access token. Always succeeds."""
    AuthService(db).logout_user(refresh_data.refresh_token if refresh_data else None)

    if credentials is not None:
        token_payload = verify_token(credentials.credentials)
        if token_payload and token_payload.token_type == ACCESS:
            revoke_access_token(redis_client, token_payload)

    return MessageResponse(message="Logged out successfully")

@router.get("/me", response_model=UserEnvelope)
async def get_current_user_info(
    current_user: User = Depends(get_current_user)
):
    """Get current user information."""
    return UserEnvelope(user=UserResponse.from_orm(current_user))
