from core.database import Base
from sqlalchemy import (Column, Integer, String, Text, Boolean, ForeignKey)
from sqlalchemy.orm import relationship
from .mixins import CreatedAtMixin, UpdatedAtMixin

class Product(Base, CreatedAtMixin, UpdatedAtMixin):
    __tablename__ = "products"

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #fk
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)

    #relationships
    category = relationship("Category", back_populates="products")
    cart_items = relationship("CartItem", back_populates="product", cascade="all, delete-orphan", passive_deletes=True)

    name = Column(String(150), nullable=False)
    slug = Column(String(150), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=False)
    price = Column(Integer, nullable=False)  # minor currency units
    image_url = Column(String(500), nullable=False)
    featured = Column(Boolean, default=False, nullable=False)
    rating = Column(Integer, default=0, nullable=False)
    review_count = Column(Integer, default=0, nullable=False)
