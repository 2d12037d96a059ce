from sqlalchemy import (
    Column,
    String,
    Integer,
    DateTime,
    CheckConstraint,
    ForeignKey,
    Index,
)

from app.models.base import Base, utcnow


class Quote(Base):
    """Priced proposal for one product, tied to one lead."""

    __tablename__ = "quotes"
    id = Column(Integer, primary_key=True, autoincrement=True)
    lead_id = Column(Integer, ForeignKey("leads.id"), nullable=False)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    size = Column(String(100))
    budget_range = Column(String(100))
    artwork_preference = Column(String(255))
    estimated_price = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False, default="draft")
    valid_until = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        Index("idx_quotes_lead_id", "lead_id"),
        CheckConstraint("quantity >= 1", name="ck_quote_quantity"),
        CheckConstraint("estimated_price > 0", name="ck_quote_estimated_price"),
        CheckConstraint(
            "status IN ('draft', 'sent', 'accepted', 'rejected')",
            name="ck_quote_status",
        ),
    )
