from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


def utcnow() -> datetime:
    """Timezone-aware "now" used for every server-assigned timestamp."""
    return datetime.now(timezone.utc)
