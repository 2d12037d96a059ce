"""Lead-specific Pydantic schemas (create, update, response)."""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import Field

from app.schemas.common import CamelModel


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class LeadCreate(CamelModel):
    """Body of ``POST /leads``.

    Fields are loosely typed on purpose: presence, blankness, email format
    and enum membership are checked by the lead service so each failure
    carries its own error code.
    """

    name: Optional[str] = None
    email: Optional[str] = None
    source: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None
    ticket_number: Optional[str] = None
    cover_image: Optional[str] = None
    preferred_contact: Optional[str] = None


class LeadUpdate(CamelModel):
    """Body of ``PATCH /leads``.

    Partial update: only fields present in the payload are applied
    (``model_fields_set``).  An explicit ``null`` clears nullable fields.
    """

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    source: Optional[str] = None
    status: Optional[str] = None
    notes: Optional[str] = None
    assigned_to: Optional[int] = None
    ticket_number: Optional[str] = None
    cover_image: Optional[str] = None
    preferred_contact: Optional[str] = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class LeadOut(CamelModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    source: str
    status: str
    assigned_to: Optional[int] = None
    notes: Optional[str] = None
    ticket_number: Optional[str] = None
    cover_image: Optional[str] = None
    preferred_contact: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class AssignedUserOut(CamelModel):
    id: int
    name: str
    email: str


class LeadDetailOut(LeadOut):
    """Single lead plus the CRM user it is assigned to, if any."""

    assigned_user: Optional[AssignedUserOut] = None


class LeadListResponse(CamelModel):
    leads: List[LeadOut] = Field(default_factory=list)
    total: int
    page: int
    total_pages: int


class LeadDeleteResponse(CamelModel):
    message: str
    lead: LeadOut
    removed: Dict[str, int] = Field(
        default_factory=dict,
        description="Dependents removed or detached by a cascading delete",
    )
