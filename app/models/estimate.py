from sqlalchemy import (
    Column,
    String,
    Integer,
    Numeric,
    Text,
    DateTime,
    CheckConstraint,
    Index,
)

from app.models.base import Base, utcnow


class Estimate(Base):
    """Itemised client-facing price document owned by one authenticated user.

    ``items`` holds the JSON-encoded line items; the estimate service
    encodes on write and decodes on read.  ``user_id`` is the auth identity
    of the owner and scopes every read and write.
    """

    __tablename__ = "estimates"
    id = Column(Integer, primary_key=True, autoincrement=True)
    quote_number = Column(String(20), nullable=False, unique=True)
    client_name = Column(String(255), nullable=False)
    client_email = Column(String(255), nullable=False)
    client_phone = Column(String(50))
    client_address = Column(Text)
    items = Column(Text, nullable=False)
    subtotal = Column(Numeric(12, 2, asdecimal=False), nullable=False)
    tax_rate = Column(Numeric(6, 3, asdecimal=False), nullable=False, default=0)
    tax_amount = Column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    shipping_cost = Column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    total = Column(Numeric(12, 2, asdecimal=False), nullable=False)
    notes = Column(Text)
    valid_until = Column(DateTime(timezone=True))
    status = Column(String(20), nullable=False, default="draft")
    pdf_file = Column(Text)
    user_id = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        Index("idx_estimates_user_id", "user_id"),
        CheckConstraint(
            "status IN ('draft', 'sent', 'accepted', 'rejected')",
            name="ck_estimate_status",
        ),
    )
