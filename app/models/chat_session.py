from sqlalchemy import (
    JSON,
    Column,
    String,
    Integer,
    DateTime,
    CheckConstraint,
    ForeignKey,
)

from app.models.base import Base, utcnow


class ChatSession(Base):
    """Chat transcript, optionally linked to a lead.

    ``messages`` only ever grows: updates append to it.
    """

    __tablename__ = "chat_sessions"
    id = Column(Integer, primary_key=True, autoincrement=True)
    lead_id = Column(Integer, ForeignKey("leads.id"), nullable=True)
    messages = Column(JSON, nullable=False, default=list)
    context_captured = Column(JSON)
    status = Column(String(20), nullable=False, default="active")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        CheckConstraint(
            "status IN ('active', 'closed')", name="ck_chat_session_status"
        ),
    )
