from sqlalchemy import (
    Boolean,
    Column,
    String,
    Integer,
    Text,
    DateTime,
    CheckConstraint,
    Index,
)

from app.models.base import Base, utcnow


class Note(Base):
    """Personal note, task or reminder owned by one auth identity.

    Unrelated to ``Lead.notes``.
    """

    __tablename__ = "notes"
    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(255), nullable=False)
    title = Column(String(255), nullable=False)
    content = Column(Text)
    category = Column(String(20), nullable=False, default="nota")
    completed = Column(Boolean, nullable=False, default=False)
    due_date = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        Index("idx_notes_user_id", "user_id"),
        CheckConstraint(
            "category IN ('nota', 'tarea', 'recordatorio')", name="ck_note_category"
        ),
    )
