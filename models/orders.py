from core.database import Base
from sqlalchemy.orm import relationship
from sqlalchemy import (Column, Integer, ForeignKey, String, Text, DateTime, JSON)
from .mixins import CreatedAtMixin, UpdatedAtMixin

# Owners can no longer edit an order once it reaches one of these
TERMINAL_STATUSES = frozenset({"completed", "cancelled", "delivered"})


class Order(Base, CreatedAtMixin, UpdatedAtMixin):
    __tablename__ = "orders"

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #fk
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    #relationships
    user = relationship("User", back_populates="orders")

    customer_name = Column(String(150), nullable=False)
    email = Column(String(100), nullable=False)
    phone = Column(String(20), nullable=False)
    address = Column(Text, nullable=False)

    # [{product_id, product_name, price, quantity}] copied at order time
    items = Column(JSON, nullable=False, default=list)
    total = Column(Integer, nullable=False)

    status = Column(String(20), nullable=False, default="pending")
    # [{status, timestamp, tracking_number?, estimated_delivery?, notes?}], append-only
    status_history = Column(JSON, nullable=False, default=list)
    tracking_number = Column(String(100), nullable=True)
    estimated_delivery = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)

    # Optimistic lock: UPDATEs are issued with WHERE version_id = <value read>
    version_id = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version_id}
