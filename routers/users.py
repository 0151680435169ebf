from fastapi import APIRouter, Response, BackgroundTasks
from starlette import status
from schemas.auth_schemas import (UserResponse, UpdateProfileRequest, ChangePasswordRequest,
                                  AdminUpdateUserRequest, MessageResponse)
from core.exceptions import ValidationError
from services.auth_service import AuthService
from services.session_service import SessionService
from services.user_service import UserService
from utils.deps import db_dependency, auth_dependency, admin_dependency, mailer_dependency
from utils.logger import get_logger

# Setup logger
logger = get_logger(__name__)


router = APIRouter(
    prefix="/api/user",
    tags=["user"]
)

admin_router = APIRouter(
    prefix="/api/users",
    tags=["admin"]
)


@router.get("", response_model=UserResponse)
def get_user_info(auth: auth_dependency, db: db_dependency):
    """
    Get current user info (protected endpoint).
    """
    return UserService.get_user(auth.user_id, db)


@router.put("", response_model=UserResponse)
def update_user_info(body: UpdateProfileRequest, auth: auth_dependency, db: db_dependency):
    return UserService.update_profile(auth.user_id, body, db)


@router.delete("", response_model=MessageResponse)
def delete_account(response: Response, auth: auth_dependency, db: db_dependency):
    UserService.delete_user(auth.user_id, db)
    SessionService.clear_session_cookie(response)

    return {"message": "Account deleted successfully"}


@router.post("/change-password", response_model=MessageResponse)
def change_password(response: Response, body: ChangePasswordRequest, auth: auth_dependency,
                    db: db_dependency, bg: BackgroundTasks, mailer: mailer_dependency):
    """
    Changes the password and signs out every other device.

    The caller keeps working: a fresh session replaces the revoked one.
    """
    user = AuthService.change_password(auth.user_id, body.current_password, body.new_password, db)

    token = SessionService.create_session(user, db)
    SessionService.set_session_cookie(response, token)

    bg.add_task(mailer.send_password_changed_email, user.email, user.username)

    return {"message": "Password changed successfully"}


@admin_router.get("", response_model=list[UserResponse])
def list_users(admin: admin_dependency, db: db_dependency):
    return UserService.list_users(db)


@admin_router.put("/{user_id}", response_model=UserResponse)
def update_user(user_id: int, body: AdminUpdateUserRequest, admin: admin_dependency, db: db_dependency):
    return UserService.admin_update_user(user_id, body, db)


@admin_router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: int, admin: admin_dependency, db: db_dependency):
    if user_id == admin.user_id:
        raise ValidationError("You cannot delete your own account from the admin panel")

    UserService.delete_user(user_id, db)
    logger.info("User deleted by admin", extra={"user_id": user_id, "admin_id": admin.user_id})
