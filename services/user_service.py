from sqlalchemy.orm import Session
from core.exceptions import ConflictError, NotFoundError, ValidationError
from models.users import User
from schemas.auth_schemas import UpdateProfileRequest, AdminUpdateUserRequest
from utils.logger import get_logger

logger = get_logger(__name__)


class UserService:

    @staticmethod
    def get_user(user_id: int, db: Session) -> User:
        model = db.query(User).filter(User.id == user_id).one_or_none()
        if not model:
            raise NotFoundError("User not found")
        return model

    @staticmethod
    def list_users(db: Session) -> list[User]:
        return db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()

    @staticmethod
    def _apply_changes(user: User, changes: dict, db: Session) -> User:
        new_username = changes.get("username")
        if new_username and new_username != user.username:
            if db.query(User).filter(User.username == new_username).first():
                raise ConflictError("Username already taken")

        new_email = changes.get("email")
        if new_email and new_email != user.email:
            if db.query(User).filter(User.email == new_email).first():
                raise ConflictError("Email already in use")

        for field, value in changes.items():
            setattr(user, field, value)

        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def update_profile(user_id: int, body: UpdateProfileRequest, db: Session) -> User:
        """
        Updates the caller's own profile. Email, admin flag and password are
        not part of ``UpdateProfileRequest`` and cannot change here.
        """
        user = UserService.get_user(user_id, db)
        changes = body.model_dump(exclude_unset=True)

        # username and notifications_enabled are not nullable
        for field in ("username", "notifications_enabled"):
            if field in changes and changes[field] is None:
                raise ValidationError(f"{field} cannot be null")

        user = UserService._apply_changes(user, changes, db)
        logger.info("Profile updated", extra={"user_id": user.id, "fields": sorted(changes)})
        return user

    @staticmethod
    def admin_update_user(user_id: int, body: AdminUpdateUserRequest, db: Session) -> User:
        user = UserService.get_user(user_id, db)
        changes = body.model_dump(exclude_unset=True)

        for field in ("username", "email", "notifications_enabled", "is_admin", "is_verified"):
            if field in changes and changes[field] is None:
                raise ValidationError(f"{field} cannot be null")

        if changes.get("is_verified"):
            changes["verification_code"] = None
            changes["verification_expiry"] = None

        user = UserService._apply_changes(user, changes, db)
        logger.info("User updated by admin", extra={"user_id": user.id, "fields": sorted(changes)})
        return user

    @staticmethod
    def delete_user(user_id: int, db: Session):
        """
        Deletes the account. Sessions and subscriptions go with it; orders
        stay on record with their owner cleared.
        """
        user = UserService.get_user(user_id, db)
        db.delete(user)
        db.commit()
        logger.info("User deleted", extra={"user_id": user_id})
