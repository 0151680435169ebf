import secrets
from dataclasses import dataclass
from datetime import timedelta
from fastapi import Response
from jose import jwt, JWTError
from sqlalchemy.orm import Session
from core.config import settings
from core.exceptions import AuthenticationError
from models.user_sessions import UserSession
from models.users import User
from utils.hashing import hash_token
from utils.logger import get_logger
from utils.time_utils import utcnow, is_expired

logger = get_logger(__name__)


@dataclass(frozen=True)
class AuthContext:
    """Who is making the current request, resolved once from the session cookie."""
    user_id: int
    is_admin: bool
    is_verified: bool


class SessionService:
    """
    Handles session operations: creation, resolution and revocation.

    The cookie value is a signed JWT carrying a random session id (``jti``).
    The database keeps only the SHA-256 of the jti, so a leaked table row
    cannot be turned back into a working cookie.
    """

    @staticmethod
    def create_session(user: User, db: Session) -> str:
        """
        Creates a session for ``user`` and returns the cookie value.

        Args:
            user: The authenticated user
            db: Database session

        Returns:
            Signed session token string
        """
        jti = secrets.token_urlsafe(32)
        expires_at = utcnow() + timedelta(days=settings.SESSION_EXPIRE_DAYS)

        payload = {
            "sub": user.username,
            "id": user.id,
            "jti": jti,
            "type": "session",
            "exp": expires_at
        }
        token = jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

        db.add(UserSession(
            user_id=user.id,
            token_hash=hash_token(jti),
            expires_at=expires_at
        ))
        db.commit()

        return token

    @staticmethod
    def _decode(token: str) -> dict | None:
        try:
            payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        except JWTError:
            return None

        if payload.get("type") != "session" or not payload.get("jti") or not payload.get("id"):
            return None
        return payload

    @staticmethod
    def resolve_session(token: str, db: Session) -> AuthContext:
        """
        Turns a cookie value into an AuthContext.

        Raises:
            AuthenticationError: If the token is malformed, expired, revoked,
            or its user no longer exists
        """
        payload = SessionService._decode(token)
        if payload is None:
            raise AuthenticationError()

        db_session = db.query(UserSession).filter(
            UserSession.token_hash == hash_token(payload["jti"]),
            UserSession.revoked == False
        ).first()

        if not db_session or db_session.user_id != payload["id"]:
            logger.debug("Session not found or revoked", extra={"user_id": payload["id"]})
            raise AuthenticationError()

        if is_expired(db_session.expires_at):
            raise AuthenticationError()

        user = db.query(User).filter(User.id == db_session.user_id).one_or_none()
        if not user:
            raise AuthenticationError()

        # Role and verification state come from the row, not the token
        return AuthContext(user_id=user.id, is_admin=user.is_admin, is_verified=user.is_verified)

    @staticmethod
    def revoke_session(token: str | None, db: Session):
        """
        Revokes the session behind ``token``. Unknown, malformed or already
        revoked tokens are ignored.
        """
        if not token:
            return

        payload = SessionService._decode(token)
        if payload is None:
            return

        db_session = db.query(UserSession).filter(
            UserSession.token_hash == hash_token(payload["jti"])
        ).first()

        if db_session and not db_session.revoked:
            db_session.revoked = True
            db.commit()

    @staticmethod
    def revoke_all_user_sessions(user_id: int, db: Session, commit: bool = True):
        """
        Revokes every session of a user (logout from all devices).

        Pass ``commit=False`` to make the revocation part of the caller's
        transaction.
        """
        db.query(UserSession).filter(
            UserSession.user_id == user_id,
            UserSession.revoked == False
        ).update({"revoked": True}, synchronize_session=False)
        if commit:
            db.commit()

    @staticmethod
    def set_session_cookie(response: Response, token: str):
        response.set_cookie(
            key=settings.SESSION_COOKIE_NAME,
            value=token,
            max_age=settings.SESSION_EXPIRE_DAYS * 24 * 60 * 60,
            httponly=True,
            samesite="lax",
            secure=settings.SESSION_COOKIE_SECURE
        )

    @staticmethod
    def clear_session_cookie(response: Response):
        response.delete_cookie(
            key=settings.SESSION_COOKIE_NAME,
            httponly=True,
            samesite="lax",
            secure=settings.SESSION_COOKIE_SECURE
        )
