"""API-layer dependency functions.

Re-exports all dependency factories from ``app.dependencies`` so that
endpoint modules only need to import from ``app.api.deps``.
"""

from app.dependencies import (
    # Authentication
    get_current_identity,
    require_identity,
    require_admin,
    # Service factories
    get_lead_service,
    get_dashboard_service,
    get_product_service,
    get_quote_service,
    get_estimate_service,
    get_chat_session_service,
    get_file_service,
    get_crm_user_service,
    get_note_service,
    get_ticket_service,
    get_intake_service,
)

__all__ = [
    "get_current_identity",
    "require_identity",
    "require_admin",
    "get_lead_service",
    "get_dashboard_service",
    "get_product_service",
    "get_quote_service",
    "get_estimate_service",
    "get_chat_session_service",
    "get_file_service",
    "get_crm_user_service",
    "get_note_service",
    "get_ticket_service",
    "get_intake_service",
]
