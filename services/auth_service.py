import re
import secrets
from fastapi import BackgroundTasks
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from core.config import settings
from core.exceptions import (ValidationError, AuthenticationError, ConflictError,
                             NotFoundError, ExpiredError)
from models.users import User
from schemas.auth_schemas import CreateUserRequest
from services.email_service import EmailService
from services.session_service import SessionService
from utils.hashing import verify_password, get_password_hash, hash_token
from utils.logger import get_logger
from utils.time_utils import is_expired
from utils.verification import (generate_verification_code, get_code_expiry_time,
                                generate_reset_token, get_reset_token_expiry_time)

logger = get_logger(__name__)

REGISTRATION_FAILED = "Registration failed. Please check your details and try again."
INVALID_CREDENTIALS = "Invalid username or password"
INVALID_RESET_TOKEN = "Invalid or expired password reset token."


class AuthService:

    @staticmethod
    def register(body: CreateUserRequest, db: Session, mailer: EmailService) -> tuple[User, bool]:
        """
        Creates an unverified user and emails the verification code.

        Flow:
        1. Check the admin code when an admin account is requested
        2. Check username and email are free
        3. Create user with a fresh 30-minute verification code
        4. Send verification email (a failed send does not undo the account)

        Returns:
            (user, email_sent)
        """
        if body.is_admin:
            if not body.admin_code or not secrets.compare_digest(body.admin_code.encode(),
                                                             settings.ADMIN_REGISTRATION_CODE.encode()):
                logger.warning(
                    "Admin registration with invalid admin code",
                    extra={"username": body.username}
                )
                raise ValidationError("Invalid admin code")

        username_taken = db.query(User).filter(User.username == body.username).first() is not None
        email_taken = db.query(User).filter(User.email == body.email).first() is not None

        if username_taken:
            logger.warning(
                "Registration attempt with existing username",
                extra={"username": body.username}
            )
        if email_taken:
            logger.warning(
                "Registration attempt with existing email",
                extra={"email": body.email}
            )
        if username_taken or email_taken:
            raise ConflictError(REGISTRATION_FAILED)

        code = generate_verification_code()

        model = User(
            username=body.username,
            email=body.email,
            password=get_password_hash(body.password),
            full_name=body.full_name,
            phone=body.phone,
            address=body.address,
            is_admin=body.is_admin,
            is_verified=False,
            verification_code=code,
            verification_expiry=get_code_expiry_time()
        )

        db.add(model)
        try:
            db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration for the same username/email
            db.rollback()
            logger.warning(
                "Registration hit a unique constraint",
                extra={"username": body.username, "email": body.email}
            )
            raise ConflictError(REGISTRATION_FAILED)

        db.refresh(model)

        email_sent = mailer.send_verification_email(model.email, model.username, code)
        if not email_sent:
            logger.warning(
                "Verification email could not be sent after registration",
                extra={"user_id": model.id, "email": model.email}
            )

        return model, email_sent

    @staticmethod
    def authenticate(username: str, password: str, db: Session) -> User:
        user = db.query(User).filter(User.username == username.strip()).first()

        if not user:
            logger.warning(
                "Login failed - user not found",
                extra={"username": username}
            )
            raise AuthenticationError(INVALID_CREDENTIALS)

        if not verify_password(password, user.password):
            logger.warning(
                "Login failed - invalid password",
                extra={"user_id": user.id, "username": username}
            )
            raise AuthenticationError(INVALID_CREDENTIALS)

        logger.debug(
            "User authenticated successfully",
            extra={"user_id": user.id}
        )

        return user

    @staticmethod
    def issue_verification_code(user: User, db: Session) -> str:
        """Replaces any previous code with a fresh one."""
        code = generate_verification_code()
        user.verification_code = code
        user.verification_expiry = get_code_expiry_time()
        db.commit()
        return code

    @staticmethod
    def verify_email(user_id: int, code: str, db: Session) -> User:
        user = AuthService.get_user_by_id(user_id, db)

        if user.is_verified:
            raise ValidationError("Email already verified")

        if not user.verification_code:
            raise ValidationError("No verification code found. Please request a new code.")

        if not secrets.compare_digest(code.encode(), user.verification_code.encode()):
            logger.warning("Email verification failed - wrong code", extra={"user_id": user.id})
            raise ValidationError("Invalid verification code")

        if is_expired(user.verification_expiry):
            logger.info("Email verification failed - code expired", extra={"user_id": user.id})
            raise ExpiredError("Verification code expired. Please request a new code.")

        user.is_verified = True
        user.verification_code = user.verification_expiry = None
        db.commit()

        return user

    @staticmethod
    def resend_verification(user_id: int, db: Session, mailer: EmailService) -> bool:
        user = AuthService.get_user_by_id(user_id, db)

        if user.is_verified:
            raise ValidationError("Email already verified")

        code = AuthService.issue_verification_code(user, db)
        return mailer.send_verification_email(user.email, user.username, code)

    @staticmethod
    def request_password_reset(email: str, db: Session, bg: BackgroundTasks, mailer: EmailService):
        """
        Issues a one-hour reset token and queues the email carrying it.

        Silent when no account has this email; the caller answers the same
        way in both cases.
        """
        user = db.query(User).filter(User.email == email).first()

        if not user:
            logger.info("Password reset requested for non-existent email",
                        extra={"email": email})
            return

        raw_token, token_hash = generate_reset_token()

        # Supersedes any earlier token
        user.password_reset_token = token_hash
        user.password_reset_token_expiry = get_reset_token_expiry_time()
        db.commit()

        bg.add_task(mailer.send_password_reset_email, user.email, user.username, raw_token)

        logger.info(
            "Password reset email queued",
            extra={"user_id": user.id}
        )

    @staticmethod
    def consume_reset_token(raw_token: str, db: Session) -> User:
        """
        Looks up the user owning ``raw_token``.

        The caller must clear the token pair in the same commit as the
        password update so the token cannot be used twice.

        Raises:
            NotFoundError: No user holds this token
            ExpiredError: The token is past its expiry (it is cleared)
        """
        user = db.query(User).filter(User.password_reset_token == hash_token(raw_token)).first()

        if not user:
            raise NotFoundError("Password reset token not found")

        if is_expired(user.password_reset_token_expiry):
            user.password_reset_token = user.password_reset_token_expiry = None
            db.commit()
            raise ExpiredError("Password reset token expired")

        return user

    @staticmethod
    def reset_password(raw_token: str, new_password: str, db: Session) -> User:
        try:
            user = AuthService.consume_reset_token(raw_token, db)
        except (NotFoundError, ExpiredError) as e:
            logger.warning("Password reset failed", extra={"reason": e.detail})
            raise ValidationError(INVALID_RESET_TOKEN) from e

        user.password = get_password_hash(new_password)
        user.password_reset_token = user.password_reset_token_expiry = None

        # Force re-login everywhere, in the same transaction
        SessionService.revoke_all_user_sessions(user.id, db, commit=False)
        db.commit()

        logger.info("Password reset successfully", extra={"user_id": user.id})

        return user

    @staticmethod
    def change_password(user_id: int, current_password: str, new_password: str, db: Session) -> User:
        user = AuthService.get_user_by_id(user_id, db)

        if not verify_password(current_password, user.password):
            logger.warning("Password change failed - wrong current password", extra={"user_id": user.id})
            raise ValidationError("Current password is incorrect.")

        if verify_password(new_password, user.password):
            raise ValidationError("New password cannot be the same as the old password.")

        user.password = get_password_hash(new_password)
        SessionService.revoke_all_user_sessions(user.id, db, commit=False)
        db.commit()

        logger.info("Password changed", extra={"user_id": user.id})

        return user

    @staticmethod
    def find_or_create_oauth_user(email: str, display_name: str | None, db: Session) -> User:
        """
        Returns the account for an email an external identity provider has
        vouched for, creating it on first sign-in.

        New accounts have no usable password until the owner goes through
        the password reset flow.
        """
        email = email.strip().lower()
        user = db.query(User).filter(User.email == email).first()
        if user:
            return user

        base = re.sub(r"[^a-z0-9_]+", "", (display_name or email.split("@")[0]).lower().replace(" ", "_"))
        base = (base or "user")[:90]
        username = base
        while db.query(User).filter(User.username == username).first():
            username = f"{base}_{secrets.randbelow(1_000_000):06d}"

        user = User(
            username=username,
            email=email,
            password="",
            full_name=display_name,
            is_verified=False
        )
        db.add(user)
        db.commit()
        db.refresh(user)

        logger.info("Account created from external identity", extra={"user_id": user.id})

        return user

    @staticmethod
    def get_user_by_id(user_id: int, db: Session) -> User:
        model = db.query(User).filter(User.id == user_id).one_or_none()
        if not model:
            raise NotFoundError("User not found")
        return model
