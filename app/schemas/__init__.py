"""Pydantic schemas package – re-exports for convenience."""

# Common enums and envelopes
from app.schemas.common import (
    CamelModel as CamelModel,
    ChatSessionStatus as ChatSessionStatus,
    CrmRole as CrmRole,
    ErrorResponse as ErrorResponse,
    LeadSource as LeadSource,
    LeadStatus as LeadStatus,
    NoteCategory as NoteCategory,
    QuoteStatus as QuoteStatus,
)

# Lead schemas
from app.schemas.lead import (
    LeadCreate as LeadCreate,
    LeadUpdate as LeadUpdate,
    LeadOut as LeadOut,
    LeadDetailOut as LeadDetailOut,
    LeadListResponse as LeadListResponse,
)

# Quote and estimate schemas
from app.schemas.quote import (
    QuoteCreate as QuoteCreate,
    QuoteUpdate as QuoteUpdate,
    QuoteOut as QuoteOut,
)
from app.schemas.estimate import (
    EstimateWrite as EstimateWrite,
    EstimateOut as EstimateOut,
)

# Intake schemas
from app.schemas.ticket import TicketCreate as TicketCreate
from app.schemas.intake import (
    ChatState as ChatState,
    ChatTurnRequest as ChatTurnRequest,
    ChatTurnResponse as ChatTurnResponse,
    QuoteFunnelAnswers as QuoteFunnelAnswers,
    QuoteFunnelResponse as QuoteFunnelResponse,
)

# Dashboard schemas
from app.schemas.dashboard import DashboardStats as DashboardStats
