from fastapi import APIRouter, Request, Response, BackgroundTasks
from slowapi.util import get_remote_address
from starlette import status
from core.config import settings
from middleware.rate_limiter import limiter
from schemas.auth_schemas import (CreateUserRequest, LoginRequest, VerifyEmailRequest, ForgotPasswordRequest,
                                  ResetPasswordRequest, UserResponse, RegisterResponse, MessageResponse,
                                  VerifyEmailResponse, EmailDispatchResponse)
from services.auth_service import AuthService
from services.session_service import SessionService
from utils.deps import db_dependency, auth_dependency, mailer_dependency, session_token_dependency
from utils.logger import get_logger

# Setup logger
logger = get_logger(__name__)


router = APIRouter(
    prefix="/api",
    tags=["auth"]
)

# login, register and forgot-password draw from one per-IP budget
auth_rate_limit = limiter.shared_limit(settings.AUTH_RATE_LIMIT, scope="auth", key_func=get_remote_address)


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=RegisterResponse)
@auth_rate_limit
def register(request: Request, response: Response, body: CreateUserRequest, db: db_dependency,
             mailer: mailer_dependency):
    """
    Creates an unverified account, emails the verification code and signs
    the new user in.

    The account is kept even when the email cannot be sent; ``email_sent``
    tells the client to offer a resend.
    """
    user, email_sent = AuthService.register(body, db, mailer)

    token = SessionService.create_session(user, db)
    SessionService.set_session_cookie(response, token)

    logger.info(
        "User registered successfully",
        extra={"user_id": user.id, "email_sent": email_sent}
    )

    if email_sent:
        message = "Registration successful. Please check your email for the verification code."
    else:
        message = ("Registration successful, but we could not send the verification email. "
                   "Please request a new code.")

    return RegisterResponse(
        **UserResponse.model_validate(user).model_dump(),
        message=message,
        email_sent=email_sent
    )


@router.post("/login", response_model=UserResponse)
@auth_rate_limit
def login(request: Request, response: Response, body: LoginRequest, db: db_dependency,
          bg: BackgroundTasks, mailer: mailer_dependency):
    user = AuthService.authenticate(body.username, body.password, db)

    token = SessionService.create_session(user, db)
    SessionService.set_session_cookie(response, token)

    if not user.is_verified:
        # Unverified users are signed in but get a fresh code to finish verification
        code = AuthService.issue_verification_code(user, db)
        bg.add_task(mailer.send_verification_email, user.email, user.username, code)
        logger.info("Verification code re-issued on login", extra={"user_id": user.id})

    logger.info(
        "User logged in successfully",
        extra={"user_id": user.id}
    )

    return user


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response, token: session_token_dependency, db: db_dependency):
    """
    Ends the current session. Safe to call without a session or twice.
    """
    SessionService.revoke_session(token, db)
    SessionService.clear_session_cookie(response)

    logger.info("User logged out")

    return {"message": "Logged out successfully"}


@router.post("/verify-email", response_model=VerifyEmailResponse)
def verify_email(body: VerifyEmailRequest, auth: auth_dependency, db: db_dependency):
    """
    Verifies the signed-in user's email with the emailed code.

    Checks:
    - Not already verified
    - A code was issued
    - Code matches
    - Code not expired
    """
    user = AuthService.verify_email(auth.user_id, body.code, db)

    logger.info(
        "Email verified successfully",
        extra={"user_id": user.id}
    )

    return {"message": "Email verified successfully", "user": user}


@router.post("/resend-verification", response_model=EmailDispatchResponse)
def resend_verification(auth: auth_dependency, db: db_dependency, mailer: mailer_dependency):
    email_sent = AuthService.resend_verification(auth.user_id, db, mailer)

    if not email_sent:
        logger.warning("Verification code re-issued but email not sent", extra={"user_id": auth.user_id})
        return {
            "message": "A new code was generated but the email could not be sent. Please try again later.",
            "email_sent": False
        }

    return {"message": "Verification code sent to your email", "email_sent": True}


@router.post("/forgot-password", response_model=MessageResponse)
@auth_rate_limit
def forgot_password(request: Request, body: ForgotPasswordRequest, db: db_dependency,
                    bg: BackgroundTasks, mailer: mailer_dependency):
    """
    Request password reset via email. The answer never reveals whether the
    address has an account.
    """
    AuthService.request_password_reset(body.email, db, bg, mailer)

    return {"message": "If that email exists, a password reset link has been sent."}


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(body: ResetPasswordRequest, db: db_dependency, bg: BackgroundTasks,
                   mailer: mailer_dependency):
    user = AuthService.reset_password(body.token, body.new_password, db)

    bg.add_task(mailer.send_password_changed_email, user.email, user.username)

    return {"message": "Password has been reset successfully. Please log in with your new password."}
