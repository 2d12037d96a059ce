from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text

from app.models.base import Base, utcnow


class AuthUser(Base):
    """Identity owned by the authentication provider.

    Only the columns the CRM reads are mapped.
    """

    __tablename__ = "user"
    id = Column(String(255), primary_key=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    email_verified = Column(Boolean, nullable=False, default=False)
    image = Column(Text)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


class AuthSession(Base):
    """Session row issued by the authentication provider at sign-in."""

    __tablename__ = "session"
    id = Column(String(255), primary_key=True)
    token = Column(String(255), nullable=False, unique=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    user_id = Column(
        String(255), ForeignKey("user.id", ondelete="CASCADE"), nullable=False
    )
    ip_address = Column(String(64))
    user_agent = Column(Text)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
