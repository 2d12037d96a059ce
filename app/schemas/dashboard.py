from datetime import datetime
from typing import Dict, List, Optional

from pydantic import Field

from app.schemas.common import CamelModel


class DashboardRecentLead(CamelModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    source: Optional[str] = None
    status: str
    created_at: datetime


class DashboardStats(CamelModel):
    """Point-in-time dashboard figures, computed from a full scan."""

    total_leads: int
    new_leads: int
    contacted_leads: int
    qualified_leads: int
    won_leads: int
    lost_leads: int
    total_quotes: int
    active_quotes: int
    accepted_quotes: int
    conversion_rate: float = Field(..., description="wonLeads / totalLeads * 100")
    leads_by_status: Dict[str, int]
    leads_by_source: Dict[str, int]
    recent_leads: List[DashboardRecentLead]
