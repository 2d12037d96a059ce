from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, Index

from app.models.base import Base, utcnow


class LeadFile(Base):
    """Attachment uploaded against a lead (and optionally one of its quotes).

    ``file_url`` is a self-contained ``data:`` URL.
    """

    __tablename__ = "files"
    id = Column(Integer, primary_key=True, autoincrement=True)
    lead_id = Column(Integer, ForeignKey("leads.id"), nullable=False)
    quote_id = Column(Integer, ForeignKey("quotes.id"), nullable=True)
    filename = Column(String(255), nullable=False)
    file_url = Column(Text, nullable=False)
    file_type = Column(String(100), nullable=False)
    file_size = Column(Integer, nullable=False)
    uploaded_by = Column(String(255))
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (Index("idx_files_lead_id", "lead_id"),)
