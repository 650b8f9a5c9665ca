from sqlalchemy.orm import Session
from typing import List
import logging

from ..core.errors import NotFoundError
from ..core.security import UserRole
from ..models.user import User
from ..schemas.auth import ProfileUpdate

logger = logging.getLogger(__name__)

class UserService:
    def __init__(self, db: Session):
        self.db = db

    def update_profile(self, user: User, data: ProfileUpdate) -> User:
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(user, field, value)

        self.db.commit()
        self.db.refresh(user)
        return user

    def list_doctors(self) -> List[User]:
        """Active doctors patients can book with."""
        return self.db.query(User).filter(
            User.role == UserRole.DOCTOR,
            User.is_active == True  # noqa: E712
        ).order_by(User.last_name, User.first_name).all()

    def list_users(self, skip: int = 0, limit: int = 10) -> List[User]:
        return self.db.query(User).order_by(User.id).offset(skip).limit(limit).all()

    def set_active(self, user_id: int, is_active: bool) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError("User not found")

        user.is_active = is_active
        self.db.commit()

        logger.info(f"User {user_id} {'activated' if is_active else 'deactivated'}")
        return user
