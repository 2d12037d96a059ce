from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text

from app.models.base import Base, utcnow


class Product(Base):
    """Catalogue entry a quote is priced against (signs, logos, websites)."""

    __tablename__ = "products"
    id = Column(Integer, primary_key=True, autoincrement=True)
    category = Column(String(50), nullable=False)
    name = Column(String(255), nullable=False)
    base_price = Column(Integer, nullable=False)
    description_es = Column(Text)
    description_en = Column(Text)
    image_url = Column(Text)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
