import json
import logging
from typing import Any, Dict, List, Optional, Tuple

from app.core.config import settings
from app.core.constants import ESTIMATE_STATUSES
from app.core.exceptions import (
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    NumberGenerationError,
)
from app.core.numbering import generate_quote_number
from app.core.validation import (
    clamp_pagination,
    normalize_email,
    optional_text,
    require_choice,
    require_non_blank,
    total_pages,
    validate_estimate_items,
)
from app.models.base import utcnow
from app.models.estimate import Estimate
from app.repositories.estimate_repository import EstimateRepository
from app.schemas.common import QuoteStatus
from app.schemas.estimate import EstimateOut, EstimateWrite

logger = logging.getLogger(__name__)

_AMOUNT_FIELDS = ("tax_rate", "tax_amount", "shipping_cost")
_TEXT_FIELDS = {
    "client_phone": 50,
    "client_address": None,
    "notes": None,
    "pdf_file": None,
}


def _require_amount(value: Optional[float], field: str, code: str) -> float:
    if value is None or value < 0:
        raise InvalidInputError(f"{field} must be a positive number", code)
    return value


def to_estimate_out(estimate: Estimate) -> EstimateOut:
    """Decode the stored item blob into the wire shape."""
    data = {
        column.key: getattr(estimate, column.key)
        for column in Estimate.__table__.columns
    }
    data["items"] = json.loads(estimate.items or "[]")
    return EstimateOut.model_validate(data)


class EstimateService:
    """Itemised estimates, visible and mutable only by their owner.

    An estimate that exists but belongs to another user raises
    ``FORBIDDEN``; one that does not exist raises ``ESTIMATE_NOT_FOUND``.
    """

    def __init__(self, repo: EstimateRepository) -> None:
        self._repo = repo

    async def create_estimate(self, user_id: str, data: EstimateWrite) -> Estimate:
        self._reject_owner_field(data)
        if data.client_name is None:
            raise InvalidInputError("Client name is required", "MISSING_CLIENT_NAME")
        if data.client_email is None:
            raise InvalidInputError("Client email is required", "MISSING_CLIENT_EMAIL")
        client_name = require_non_blank(data.client_name, "clientName")
        client_email = normalize_email(data.client_email, "email")
        items = validate_estimate_items(data.items)
        subtotal = _require_amount(data.subtotal, "Subtotal", "INVALID_SUBTOTAL")
        total = _require_amount(data.total, "Total", "INVALID_TOTAL")
        status = QuoteStatus.draft.value
        if data.status is not None:
            status = require_choice(data.status, ESTIMATE_STATUSES, "status")

        values: Dict[str, Any] = {
            field: _require_amount(
                getattr(data, field) or 0, field, f"INVALID_{field.upper()}"
            )
            for field in _AMOUNT_FIELDS
        }
        values.update(
            {
                field: optional_text(getattr(data, field), field, limit)
                for field, limit in _TEXT_FIELDS.items()
            }
        )

        estimate = await self._repo.create(
            quote_number=await self._unique_quote_number(),
            client_name=client_name,
            client_email=client_email,
            items=json.dumps(items),
            subtotal=subtotal,
            total=total,
            valid_until=data.valid_until,
            status=status,
            user_id=user_id,
            **values,
        )
        await self._repo.commit()
        logger.info("Estimate %s (%s) created", estimate.id, estimate.quote_number)
        return estimate

    async def list_estimates(
        self,
        user_id: str,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[Estimate], int, int, int]:
        page, limit = clamp_pagination(page, limit)
        filters = self._repo.build_filters(user_id, status=status, search=search)
        estimates, total = await self._repo.list_page(
            filters, offset=(page - 1) * limit, limit=limit
        )
        return estimates, total, page, total_pages(total, limit)

    async def get_estimate(self, user_id: str, estimate_id: int) -> Estimate:
        estimate = await self._repo.get_by_id(estimate_id)
        if estimate is None:
            raise NotFoundError("Estimate not found", "ESTIMATE_NOT_FOUND")
        if estimate.user_id != user_id:
            raise ForbiddenError("Forbidden: You do not have access to this estimate")
        return estimate

    async def update_estimate(
        self, user_id: str, estimate_id: int, data: EstimateWrite
    ) -> Estimate:
        self._reject_owner_field(data)
        estimate = await self.get_estimate(user_id, estimate_id)

        provided = data.model_fields_set
        changes: Dict[str, Any] = {}
        if "status" in provided:
            changes["status"] = require_choice(data.status, ESTIMATE_STATUSES, "status")
        if "client_name" in provided:
            if data.client_name is None:
                raise InvalidInputError(
                    "Client name cannot be empty", "INVALID_CLIENT_NAME"
                )
            changes["client_name"] = require_non_blank(data.client_name, "clientName")
        if "client_email" in provided:
            changes["client_email"] = normalize_email(data.client_email or "", "email")
        if "items" in provided:
            changes["items"] = json.dumps(validate_estimate_items(data.items))
        if "subtotal" in provided:
            changes["subtotal"] = _require_amount(
                data.subtotal, "Subtotal", "INVALID_SUBTOTAL"
            )
        if "total" in provided:
            changes["total"] = _require_amount(data.total, "Total", "INVALID_TOTAL")
        for field in _AMOUNT_FIELDS:
            if field in provided:
                changes[field] = _require_amount(
                    getattr(data, field), field, f"INVALID_{field.upper()}"
                )
        for field, limit in _TEXT_FIELDS.items():
            if field in provided:
                changes[field] = optional_text(getattr(data, field), field, limit)
        if "valid_until" in provided:
            changes["valid_until"] = data.valid_until

        for field, value in changes.items():
            setattr(estimate, field, value)
        estimate.updated_at = utcnow()
        await self._repo.commit()
        return estimate

    async def delete_estimate(self, user_id: str, estimate_id: int) -> Estimate:
        estimate = await self.get_estimate(user_id, estimate_id)
        await self._repo.delete(estimate)
        await self._repo.commit()
        logger.info("Estimate %s deleted", estimate_id)
        return estimate

    async def _unique_quote_number(self) -> str:
        """Random ``EG-######`` not yet used, retried a bounded number of times."""
        for _ in range(settings.QUOTE_NUMBER_MAX_ATTEMPTS):
            candidate = generate_quote_number()
            if not await self._repo.quote_number_exists(candidate):
                return candidate
        logger.error(
            "No free quote number after %d attempts",
            settings.QUOTE_NUMBER_MAX_ATTEMPTS,
        )
        raise NumberGenerationError()

    @staticmethod
    def _reject_owner_field(data: EstimateWrite) -> None:
        if "user_id" in data.model_fields_set:
            raise InvalidInputError(
                "User ID cannot be provided in request body", "USER_ID_NOT_ALLOWED"
            )
