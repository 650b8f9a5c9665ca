from sqlalchemy.orm import Session
from datetime import datetime, timedelta
from typing import Optional, Tuple
import logging

from ..models.user import User, RefreshToken
from ..core.config import settings
from ..core.errors import AuthenticationError, ValidationError
from ..core.security import (
    REFRESH, verify_password, get_password_hash, create_access_token, create_token_pair,
    verify_token, hash_token, Token, UserRole
)
from ..schemas.auth import UserLogin, UserRegister

logger = logging.getLogger(__name__)

class AuthService:
    def __init__(self, db: Session):
        self.db = db

    def register_user(self, user_data: UserRegister) -> User:
        """Register a new user."""
        if user_data.role == UserRole.ADMIN and not settings.ALLOW_ADMIN_REGISTRATION:
            raise ValidationError("Admin accounts cannot be self-registered")

        if self._find_by_email(user_data.email):
            raise ValidationError("User with this email already registered")

        new_user = User(
            first_name=user_data.first_name,
            last_name=user_data.last_name,
            email=user_data.email,
            password_hash=get_password_hash(user_data.password),
            role=user_data.role,
            is_active=True,
        )

        self.db.add(new_user)
        self.db.commit()
        self.db.refresh(new_user)

        logger.info(f"Registered {new_user.role.value} user {new_user.id}")
        return new_user

    def issue_access_token(self, user: User) -> str:
        """Access token handed out right after registration."""
        return create_access_token(user.id, user.email, user.role)

    def authenticate_user(self, login_data: UserLogin) -> Tuple[User, Token]:
        """Check credentials, enforcing the lockout, and open a session."""
        user = self._find_by_email(login_data.email)
        if not user:
            raise AuthenticationError("Invalid email or password")

        if user.locked_until and user.locked_until > datetime.utcnow():
            raise AuthenticationError("Account is temporarily locked")

        if not verify_password(login_data.password, user.password_hash):
            self._handle_failed_login(user)
            raise AuthenticationError("Invalid email or password")

        if not user.is_active:
            raise AuthenticationError("Account is deactivated")

        user.failed_login_attempts = 0
        user.locked_until = None
        user.last_login = datetime.utcnow()

        tokens = self._issue_tokens(user)
        self.db.commit()
        self.db.refresh(user)

        logger.info(f"User {user.id} logged in")
        return user, tokens

    def refresh_access_token(self, refresh_token: str) -> Tuple[User, Token]:
        """Exchange a live refresh token for a new pair; the old one is spent."""
        token_payload = verify_token(refresh_token)
        if not token_payload or token_payload.token_type != REFRESH:
            raise AuthenticationError("Invalid refresh token")

        stored_token = self.db.query(RefreshToken).filter(
            RefreshToken.token_hash == hash_token(refresh_token),
            RefreshToken.is_revoked == False,  # noqa: E712
            RefreshToken.expires_at > datetime.utcnow()
        ).first()
        if not stored_token:
            raise AuthenticationError("Invalid or expired refresh token")

        user = stored_token.user
        if not user or not user.is_active:
            raise AuthenticationError("User not found or inactive")

        tokens = self._issue_tokens(user)
        self.db.commit()

        return user, tokens

    def logout_user(self, refresh_token: Optional[str]) -> None:
        """Revoke the refresh token, if one was presented."""
        if not refresh_token:
            return

        stored_token = self.db.query(RefreshToken).filter(
            RefreshToken.token_hash == hash_token(refresh_token)
        ).first()

        if stored_token:
            stored_token.is_revoked = True
            self.db.commit()

    def change_password(self, user: User, current_password: str, new_password: str) -> None:
        if not verify_password(current_password, user.password_hash):
            raise ValidationError("Current password is incorrect")

        user.password_hash = get_password_hash(new_password)
        self._revoke_refresh_tokens(user.id)
        self.db.commit()

        logger.info(f"Password changed for user {user.id}")

    def _handle_failed_login(self, user: User):
        """Count a failed attempt and lock the account once the limit is hit."""
        user.failed_login_attempts = (user.failed_login_attempts or 0) + 1

        if user.failed_login_attempts >= settings.MAX_FAILED_LOGINS:
            user.locked_until = datetime.utcnow() + timedelta(minutes=settings.LOCKOUT_MINUTES)
            logger.warning(f"User {user.id} locked after {user.failed_login_attempts} failed logins")

        self.db.commit()

    def _revoke_refresh_tokens(self, user_id: int):
        self.db.query(RefreshToken).filter(
            RefreshToken.user_id == user_id
        ).update({"is_revoked": True})

    def _find_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def _issue_tokens(self, user: User) -> Token:
        """New token pair; the refresh token replaces any the user still holds."""
        tokens = create_token_pair(user.id, user.email, user.role)

        token_payload = verify_token(tokens.refresh_token)
        expires_at = datetime.utcfromtimestamp(token_payload.exp)

        self._revoke_refresh_tokens(user.id)
        self.db.add(RefreshToken(
            user_id=user.id,
            token_hash=hash_token(tokens.refresh_token),
            expires_at=expires_at
        ))
        return tokens
