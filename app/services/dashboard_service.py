import logging
from collections import Counter
from typing import Iterable, List

from app.core.constants import (
    ACTIVE_QUOTE_STATUSES,
    DASHBOARD_STATUS_BREAKDOWN,
    RECENT_LEADS_LIMIT,
    UNKNOWN_SOURCE,
)
from app.models.lead import Lead
from app.repositories.dashboard_repository import DashboardRepository
from app.schemas.common import LeadStatus, QuoteStatus
from app.schemas.dashboard import DashboardRecentLead, DashboardStats

logger = logging.getLogger(__name__)


def conversion_rate(won: int, total: int) -> float:
    """``won / total * 100``; zero when there are no leads."""
    if total == 0:
        return 0
    return won / total * 100


def compute_stats(leads: List[Lead], quote_statuses: Iterable[str]) -> DashboardStats:
    """Aggregate a full lead scan (newest first) and quote statuses.

    ``proposal`` is not part of the per-status breakdown.
    """
    quote_statuses = list(quote_statuses)
    by_status = Counter(lead.status for lead in leads)
    by_source = Counter((lead.source or UNKNOWN_SOURCE) for lead in leads)

    total = len(leads)
    won = by_status[LeadStatus.won.value]
    newest_first = sorted(
        leads, key=lambda lead: (lead.created_at, lead.id), reverse=True
    )
    recent = newest_first[:RECENT_LEADS_LIMIT]

    return DashboardStats(
        total_leads=total,
        new_leads=by_status[LeadStatus.new.value],
        contacted_leads=by_status[LeadStatus.contacted.value],
        qualified_leads=by_status[LeadStatus.qualified.value],
        won_leads=won,
        lost_leads=by_status[LeadStatus.lost.value],
        total_quotes=len(quote_statuses),
        active_quotes=sum(1 for s in quote_statuses if s in ACTIVE_QUOTE_STATUSES),
        accepted_quotes=sum(1 for s in quote_statuses if s == QuoteStatus.accepted.value),
        conversion_rate=conversion_rate(won, total),
        leads_by_status={s: by_status[s] for s in DASHBOARD_STATUS_BREAKDOWN},
        leads_by_source=dict(by_source),
        recent_leads=[DashboardRecentLead.model_validate(lead) for lead in recent],
    )


class DashboardService:
    """Point-in-time dashboard statistics from a full scan of leads and quotes."""

    def __init__(self, repo: DashboardRepository) -> None:
        self._repo = repo

    async def compute_dashboard_stats(self) -> DashboardStats:
        leads, quote_statuses = await self._repo.fetch_all()
        stats = compute_stats(leads, quote_statuses)
        logger.debug(
            "Dashboard stats computed over %d leads and %d quotes",
            stats.total_leads,
            stats.total_quotes,
        )
        return stats
