from sqlalchemy import (
    Column,
    String,
    Integer,
    Text,
    DateTime,
    CheckConstraint,
    ForeignKey,
    Index,
)

from app.models.base import Base, utcnow


class Lead(Base):
    """Prospective customer captured from the chat assistant, the quote
    funnel or the contact form.

    ``source`` is fixed at creation.  ``status`` may move freely between
    the six pipeline values; every write stamps ``updated_at``.  Lead is
    the aggregate root for quotes, files and chat sessions, which are not
    removed by the database when a lead goes away (the service decides
    between refusing and cascading).
    """

    __tablename__ = "leads"
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50))
    source = Column(String(20), nullable=False)
    status = Column(String(20), nullable=False, default="new")
    assigned_to = Column(
        Integer, ForeignKey("crm_users.id", ondelete="SET NULL"), nullable=True
    )
    notes = Column(Text)
    ticket_number = Column(String(100))
    cover_image = Column(Text)
    preferred_contact = Column(String(50))
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        Index("idx_leads_created_at", "created_at"),
        Index("idx_leads_status", "status"),
        Index("idx_leads_assigned_to", "assigned_to"),
        CheckConstraint(
            "status IN ('new', 'contacted', 'qualified', 'proposal', 'won', 'lost')",
            name="ck_lead_status",
        ),
        CheckConstraint(
            "source IN ('chat', 'wizard', 'contact')",
            name="ck_lead_source",
        ),
    )
