from typing import FrozenSet, Tuple

from app.schemas.common import (
    ChatSessionStatus,
    CrmRole,
    LeadSource,
    LeadStatus,
    NoteCategory,
    QuoteStatus,
)

LEAD_SOURCES: FrozenSet[str] = frozenset(s.value for s in LeadSource)
LEAD_STATUSES: FrozenSet[str] = frozenset(s.value for s in LeadStatus)
QUOTE_STATUSES: FrozenSet[str] = frozenset(s.value for s in QuoteStatus)
ESTIMATE_STATUSES: FrozenSet[str] = QUOTE_STATUSES
CHAT_SESSION_STATUSES: FrozenSet[str] = frozenset(s.value for s in ChatSessionStatus)
CRM_ROLES: FrozenSet[str] = frozenset(r.value for r in CrmRole)
NOTE_CATEGORIES: FrozenSet[str] = frozenset(c.value for c in NoteCategory)

# Dashboard per-status breakdown. ``proposal`` is a valid lead status but is
# not part of this breakdown (see DESIGN.md, open questions).
DASHBOARD_STATUS_BREAKDOWN: Tuple[str, ...] = (
    "new",
    "contacted",
    "qualified",
    "won",
    "lost",
)

# Quotes still in play on the dashboard
ACTIVE_QUOTE_STATUSES: FrozenSet[str] = frozenset({"draft", "sent"})

RECENT_LEADS_LIMIT: int = 5

DEFAULT_PAGE_SIZE: int = 10
MAX_PAGE_SIZE: int = 100

# Width of the name/email/title columns
MAX_TEXT_LENGTH: int = 255

TICKET_PREFIX: str = "EG"
QUOTE_NUMBER_PREFIX: str = "EG-"

UNKNOWN_SOURCE: str = "unknown"
