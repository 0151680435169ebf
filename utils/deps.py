from core.database import SessionLocal
from typing import Annotated
from fastapi import Depends, Request
from sqlalchemy.orm import Session
from core.config import settings
from core.exceptions import AuthenticationError, AuthorizationError
from services.email_service import EmailService
from services.session_service import AuthContext, SessionService


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

db_dependency = Annotated[Session, Depends(get_db)]


def get_session_token(request: Request) -> str | None:
    return request.cookies.get(settings.SESSION_COOKIE_NAME)

session_token_dependency = Annotated[str | None, Depends(get_session_token)]


def get_current_auth(token: session_token_dependency, db: db_dependency) -> AuthContext:
    if not token:
        raise AuthenticationError()
    return SessionService.resolve_session(token, db)

auth_dependency = Annotated[AuthContext, Depends(get_current_auth)]


def get_admin_auth(auth: auth_dependency) -> AuthContext:
    if not auth.is_admin:
        raise AuthorizationError("Admin access required")
    return auth

admin_dependency = Annotated[AuthContext, Depends(get_admin_auth)]


def get_email_service(request: Request) -> EmailService:
    # Created once in the application lifespan
    service = getattr(request.app.state, "email_service", None)
    if service is None:
        service = EmailService()
        request.app.state.email_service = service
    return service

mailer_dependency = Annotated[EmailService, Depends(get_email_service)]
