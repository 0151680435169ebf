from core.database import Base
from sqlalchemy import (Column, Integer, String, Boolean, DateTime, Text)
from sqlalchemy.orm import relationship
from .mixins import CreatedAtMixin

class User(Base, CreatedAtMixin):
    __tablename__ = "users"

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #relationships
    orders = relationship("Order", back_populates="user")
    sessions = relationship("UserSession", back_populates="user", cascade="all, delete-orphan")
    subscriptions = relationship("Subscription", back_populates="user", cascade="all, delete-orphan")

    username = Column(String(100), unique=True, nullable=False, index=True)
    email = Column(String(100), unique=True, nullable=False, index=True)
    # scrypt hash; empty for accounts created through an external identity provider
    password = Column(String(255), nullable=False, default="")
    full_name = Column(String(150))
    phone = Column(String(20))
    address = Column(Text)
    is_admin = Column(Boolean, default=False, nullable=False)
    notifications_enabled = Column(Boolean, default=True, nullable=False)
    # Email verification fields
    is_verified = Column(Boolean, default=False, nullable=False)
    verification_code = Column(String(6), nullable=True)
    verification_expiry = Column(DateTime(timezone=True), nullable=True)
    # Password reset fields
    password_reset_token = Column(String(64), nullable=True, unique=True, index=True)
    password_reset_token_expiry = Column(DateTime(timezone=True), nullable=True)
