from sqlalchemy import (
    Column,
    String,
    Integer,
    DateTime,
    CheckConstraint,
    ForeignKey,
)

from app.models.base import Base, utcnow


class CrmUser(Base):
    """Internal operator account, linked one-to-one to an auth identity.

    ``role`` gates every admin-only operation.
    """

    __tablename__ = "crm_users"
    id = Column(Integer, primary_key=True, autoincrement=True)
    auth_user_id = Column(
        String(255), ForeignKey("user.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    email = Column(String(255), nullable=False, unique=True)
    name = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="agent")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        CheckConstraint("role IN ('admin', 'agent')", name="ck_crm_user_role"),
    )
