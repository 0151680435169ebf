from core.database import Base
from sqlalchemy import Column, Boolean, DateTime, String, Integer, ForeignKey
from sqlalchemy.orm import relationship
from models.mixins import CreatedAtMixin

class UserSession(Base, CreatedAtMixin):
    """
    Server-side record of a login session.

    The browser holds a signed cookie carrying a random session id (jti);
    only its SHA-256 hash is stored here. Revoking the row ends the session
    even though the cookie itself is still validly signed.
    """
    __tablename__ = "user_sessions"

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #fk
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    #relationships
    user = relationship("User", back_populates="sessions")

    token_hash = Column(String(64), nullable=False, unique=True, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    revoked = Column(Boolean, default=False, nullable=False)
