from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...api.deps import get_admin, get_current_user
from ...domain.policy import Principal
from ...models.user import User
from ...services.auth_service import AuthService
from ...services.user_service import UserService
from ...schemas.auth import (
    ChangePassword, ProfileUpdate, UserResponse, UserSummary,
    UserEnvelope, UserListResponse, DoctorListResponse
)
from ...schemas.common import MessageResponse

router = APIRouter(prefix="/users", tags=["Users"])

@router.get("/profile", response_model=UserEnvelope)
async def get_profile(
    current_user: User = Depends(get_current_user)
):
    return UserEnvelope(user=UserResponse.from_orm(current_user))

@router.put("/profile", response_model=UserEnvelope)
async def update_profile(
    profile_data: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    user = UserService(db).update_profile(current_user, profile_data)

    return UserEnvelope(
        message="User profile updated successfully",
        user=UserResponse.from_orm(user),
    )

@router.put("/change-password", response_model=MessageResponse)
async def change_password(
    password_data: ChangePassword,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Change the caller's password and sign out their other sessions."""
    AuthService(db).change_password(
        current_user, password_data.current_password, password_data.new_password
    )
    return MessageResponse(message="Password changed successfully")

@router.get("/doctors", response_model=DoctorListResponse)
async def list_doctors(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Doctors available for appointment scheduling."""
    doctors = UserService(db).list_doctors()

    return DoctorListResponse(
        count=len(doctors),
        doctors=[UserSummary.from_orm(doctor) for doctor in doctors],
    )

# Admin routes
@router.get("/all", response_model=UserListResponse)
async def list_users(
    skip: int = Query(0, ge=0),
    limit: int = Query(10, ge=1, le=100),
    _: Principal = Depends(get_admin),
    db: Session = Depends(get_db)
):
    """List all users (admin only)."""
    users = UserService(db).list_users(skip, limit)

    return UserListResponse(
        count=len(users),
        users=[UserResponse.from_orm(user) for user in users],
    )

@router.patch("/{user_id}/status", response_model=MessageResponse)
async def update_user_status(
    user_id: int,
    is_active: bool,
    _: Principal = Depends(get_admin),
    db: Session = Depends(get_db)
):
    """Update user active status (admin only)."""
    UserService(db).set_active(user_id, is_active)

    return MessageResponse(
        message=f"User {'activated' if is_active else 'deactivated'} successfully"
    )
