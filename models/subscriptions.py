from core.database import Base
from sqlalchemy import (Column, Integer, String, DateTime, ForeignKey)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from .mixins import CreatedAtMixin

class Subscription(Base, CreatedAtMixin):
    __tablename__ = "subscriptions"

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #fk
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    #relationships
    user = relationship("User", back_populates="subscriptions")

    plan = Column(String(100), nullable=False)
    status = Column(String(20), nullable=False, default="active")
    start_date = Column(DateTime(timezone=True), default=func.now())
    end_date = Column(DateTime(timezone=True), nullable=True)


class NewsletterSubscription(Base, CreatedAtMixin):
    __tablename__ = "newsletter_subscriptions"

    #pk
    id = Column(Integer, primary_key=True, index=True)

    email = Column(String(100), unique=True, nullable=False, index=True)
    status = Column(String(20), nullable=False, default="active")
