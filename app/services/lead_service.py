import logging
from typing import Dict, List, Optional, Tuple

from app.core.constants import LEAD_SOURCES, LEAD_STATUSES
from app.core.exceptions import (
    ConflictError,
    InvalidInputError,
    LeadNotFoundError,
    ReferenceNotFoundError,
)
from app.core.validation import (
    clamp_pagination,
    normalize_email,
    optional_text,
    require_choice,
    require_non_blank,
    total_pages,
)
from app.models.base import utcnow
from app.models.crm_user import CrmUser
from app.models.lead import Lead
from app.repositories.crm_user_repository import CrmUserRepository
from app.repositories.lead_repository import LeadRepository
from app.schemas.common import LeadStatus
from app.schemas.lead import LeadCreate, LeadUpdate

logger = logging.getLogger(__name__)

# Free-text columns and their widths: trimmed, blank stored as NULL
_TEXT_FIELDS = {
    "phone": 50,
    "notes": None,
    "ticket_number": 100,
    "cover_image": None,
    "preferred_contact": 50,
}


class LeadService:
    """Owns every read and write of lead records.

    ``update_lead`` is a blind write of the supplied fields: it never
    compares against the status the caller believes the lead has, so
    repeating the same update is harmless and two racing updates simply
    leave the later one in place.  Each update stamps ``updated_at``.
    """

    def __init__(
        self, lead_repo: LeadRepository, crm_user_repo: CrmUserRepository
    ) -> None:
        self._leads = lead_repo
        self._crm_users = crm_user_repo

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    async def create_lead(self, data: LeadCreate) -> Lead:
        """Validate and insert a lead with ``status = new``.

        Public: no identity is required.  Nothing is written when any
        check fails.
        """
        if data.name is None or data.email is None or data.source is None:
            raise InvalidInputError(
                "Missing required fields: name, email, and source are required",
                "MISSING_REQUIRED_FIELDS",
            )
        name = require_non_blank(data.name, "name")
        email = normalize_email(data.email, "email")
        source = require_choice(data.source, LEAD_SOURCES, "source")

        values = {
            field: optional_text(getattr(data, field), field, limit)
            for field, limit in _TEXT_FIELDS.items()
        }
        lead = await self._leads.create(
            name=name,
            email=email,
            source=source,
            status=LeadStatus.new.value,
            **values,
        )
        await self._leads.commit()
        logger.info("Lead %s created from %s", lead.id, source)
        return lead

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    async def list_leads(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        status: Optional[str] = None,
        assigned_to: Optional[int] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[Lead], int, int, int]:
        """Return ``(leads, total, page, total_pages)``, newest first.

        A page past the end is an empty list, not an error.
        """
        page, limit = clamp_pagination(page, limit)
        filters = self._leads.build_filters(
            status=status, assigned_to=assigned_to, search=search
        )
        leads, total = await self._leads.list_page(
            filters, offset=(page - 1) * limit, limit=limit
        )
        return leads, total, page, total_pages(total, limit)

    async def get_lead(self, lead_id: int) -> Tuple[Lead, Optional[CrmUser]]:
        """The lead and the CRM user it is assigned to (or ``None``)."""
        row = await self._leads.get_with_assignee(lead_id)
        if row is None:
            raise LeadNotFoundError()
        return row

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    async def update_lead(self, lead_id: int, data: LeadUpdate) -> Lead:
        """Apply the fields present in *data*; absent fields stay untouched.

        Every provided field is validated before anything is written.
        """
        lead = await self._leads.get_by_id(lead_id)
        if lead is None:
            raise LeadNotFoundError()

        changes = await self._validate_changes(data)
        previous_status = lead.status
        for field, value in changes.items():
            setattr(lead, field, value)
        lead.updated_at = utcnow()
        await self._leads.commit()

        if "status" in changes and changes["status"] != previous_status:
            logger.info(
                "Lead %s status changed: %s -> %s",
                lead.id,
                previous_status,
                changes["status"],
            )
        return lead

    async def _validate_changes(self, data: LeadUpdate) -> Dict[str, object]:
        provided = data.model_fields_set
        changes: Dict[str, object] = {}

        if "name" in provided:
            if data.name is None:
                raise InvalidInputError("Name cannot be empty", "INVALID_NAME")
            changes["name"] = require_non_blank(data.name, "name")
        if "email" in provided:
            if data.email is None:
                raise InvalidInputError("Email cannot be empty", "INVALID_EMAIL")
            changes["email"] = normalize_email(data.email, "email")
        if "source" in provided:
            changes["source"] = require_choice(data.source, LEAD_SOURCES, "source")
        if "status" in provided:
            changes["status"] = require_choice(data.status, LEAD_STATUSES, "status")
        if "assigned_to" in provided:
            changes["assigned_to"] = await self._resolve_assignee(data.assigned_to)
        for field, limit in _TEXT_FIELDS.items():
            if field in provided:
                changes[field] = optional_text(getattr(data, field), field, limit)
        return changes

    async def _resolve_assignee(self, assigned_to: Optional[int]) -> Optional[int]:
        if assigned_to is None:
            return None
        if assigned_to < 1:
            raise InvalidInputError(
                "assignedTo must be a valid user ID or null", "INVALID_ASSIGNED_TO"
            )
        if await self._crm_users.get_by_id(assigned_to) is None:
            raise ReferenceNotFoundError("Assigned user not found", "USER_NOT_FOUND")
        return assigned_to

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    async def delete_lead(
        self, lead_id: int, cascade: bool = False
    ) -> Tuple[Lead, Dict[str, int]]:
        """Hard-delete a lead.

        Refused with ``LEAD_HAS_DEPENDENTS`` while quotes, files or chat
        sessions still reference it, unless *cascade* is set: then files
        and quotes are deleted and chat sessions detached in the same
        transaction.  Returns the deleted lead and the dependents handled.
        """
        lead = await self._leads.get_by_id(lead_id)
        if lead is None:
            raise LeadNotFoundError()

        dependents = await self._leads.count_dependents(lead_id)
        if any(dependents.values()):
            if not cascade:
                summary = ", ".join(f"{n} {k}" for k, n in dependents.items() if n)
                raise ConflictError(
                    f"Lead still has dependent records ({summary}); "
                    "retry with cascade=true to remove them",
                    "LEAD_HAS_DEPENDENTS",
                )
            await self._leads.remove_dependents(lead_id)

        await self._leads.delete(lead)
        await self._leads.commit()
        logger.info("Lead %s deleted (dependents: %s)", lead_id, dependents)
        return lead, {k: n for k, n in dependents.items() if n}
