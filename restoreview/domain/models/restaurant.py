"""Restaurant domain model: maps to the 'restaurants' table."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, JSON
from sqlalchemy.sql import func

from restoreview.infrastructure.database import Base


class Restaurant(Base):
    __tablename__ = "restaurants"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False, index=True)
    slug = Column(String(150), unique=True, nullable=False, index=True)
    category = Column(String(50), nullable=True, index=True)
    description = Column(Text, nullable=True)
    address = Column(String(255), nullable=True)
    image_url = Column(String(500), nullable=True)
    website = Column(String(255), nullable=True)
    contact_phone = Column(String(30), nullable=True)
    hours = Column(String(100), nullable=True)
    price_range = Column(String(10), nullable=True)  # "₽", "₽₽", "₽₽₽"
    min_price = Column(Integer, nullable=True)
    delivery_time = Column(String(20), nullable=True)  # "30-60" minutes
    criteria = Column(JSON, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<Restaurant {self.slug}>"
