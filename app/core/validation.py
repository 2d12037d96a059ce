"""Validation layer.

Pure functions that check the shape and range of inbound values and
either return the normalised value or raise :class:`InvalidInputError`
with a machine-readable code.  Nothing here touches the database;
existence checks for references belong to the services.
"""

import math
import re
from typing import Any, Iterable, List, Optional, Tuple

from email_validator import EmailNotValidError, validate_email

from app.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, MAX_TEXT_LENGTH
from app.core.exceptions import InvalidInputError

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def error_code(prefix: str, field: str) -> str:
    """Build ``PREFIX_FIELD`` from a camelCase or snake_case field name.

    >>> error_code("INVALID", "assignedTo")
    'INVALID_ASSIGNED_TO'
    """
    return f"{prefix}_{_CAMEL_BOUNDARY.sub('_', field).upper()}"


def require_non_blank(
    value: Optional[str], field: str, max_length: int = MAX_TEXT_LENGTH
) -> str:
    """Return *value* stripped; reject ``None``, blank and overlong values."""
    if value is None:
        raise InvalidInputError(f"{field} is required", error_code("MISSING", field))
    if not isinstance(value, str) or not value.strip():
        raise InvalidInputError(
            f"{field} cannot be empty", error_code("INVALID", field)
        )
    return check_length(value.strip(), field, max_length)


def normalize_email(
    value: Optional[str], field: str = "email", max_length: int = MAX_TEXT_LENGTH
) -> str:
    """Trim, syntax-check and lower-case an email address."""
    if value is None:
        raise InvalidInputError(f"{field} is required", error_code("MISSING", field))
    candidate = value.strip() if isinstance(value, str) else ""
    if not candidate:
        raise InvalidInputError(
            f"{field} cannot be empty", error_code("INVALID", field)
        )
    try:
        validate_email(candidate, check_deliverability=False)
    except EmailNotValidError as exc:
        raise InvalidInputError(
            f"Invalid email format: {exc}", error_code("INVALID", field)
        ) from exc
    return check_length(candidate.lower(), field, max_length)


def require_choice(value: Any, allowed: Iterable[str], field: str) -> str:
    """Reject values outside the enumerated set."""
    options = sorted(allowed)
    if value not in options:
        raise InvalidInputError(
            f"Invalid {field}. Must be one of: {', '.join(options)}",
            error_code("INVALID", field),
        )
    return value


def optional_text(
    value: Optional[str], field: str = "text", max_length: Optional[int] = None
) -> Optional[str]:
    """Trim free text; empty strings collapse to ``None``."""
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    return check_length(value, field, max_length)


def check_length(value: str, field: str, max_length: Optional[int]) -> str:
    """Reject values longer than the column holding them."""
    if max_length is not None and len(value) > max_length:
        raise InvalidInputError(
            f"{field} must be at most {max_length} characters",
            error_code("INVALID", field),
        )
    return value


def require_positive(value: Any, field: str) -> Any:
    """Strictly greater than zero."""
    if value is None:
        raise InvalidInputError(f"{field} is required", error_code("MISSING", field))
    if value <= 0:
        raise InvalidInputError(
            f"{field} must be greater than 0", error_code("INVALID", field)
        )
    return value


def require_at_least(value: Any, minimum: int, field: str) -> Any:
    if value is None or value < minimum:
        raise InvalidInputError(
            f"{field} must be at least {minimum}", error_code("INVALID", field)
        )
    return value


def parse_id(raw: Any, field: str = "id") -> int:
    """Parse a path/query identifier; anything non-numeric is ``INVALID_<FIELD>``."""
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        raise InvalidInputError(
            "Valid ID is required", error_code("INVALID", field)
        ) from None
    if value < 1:
        raise InvalidInputError("Valid ID is required", error_code("INVALID", field))
    return value


def clamp_pagination(page: Optional[int], limit: Optional[int]) -> Tuple[int, int]:
    """Normalise pagination: ``page >= 1`` and ``limit`` within ``[1, 100]``."""
    page = max(page or 1, 1)
    if limit is None:
        limit = DEFAULT_PAGE_SIZE
    limit = min(max(limit, 1), MAX_PAGE_SIZE)
    return page, limit


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if total else 0


def validate_estimate_items(items: Any) -> List[dict]:
    """Items must be a non-empty list of ``{description, quantity, unitPrice, total}``.

    No cross-check that ``quantity * unitPrice == total`` is performed.
    """
    if items is None:
        raise InvalidInputError("Items are required", "MISSING_ITEMS")
    message = (
        "Items must be a non-empty array with valid structure "
        "(description, quantity, unitPrice, total)"
    )
    if not isinstance(items, list) or not items:
        raise InvalidInputError(message, "INVALID_ITEMS")

    cleaned: List[dict] = []
    for item in items:
        if not isinstance(item, dict):
            raise InvalidInputError(message, "INVALID_ITEMS")
        description = item.get("description")
        quantity = item.get("quantity")
        unit_price = item.get("unitPrice", item.get("unit_price"))
        line_total = item.get("total")
        if not isinstance(description, str) or not description.strip():
            raise InvalidInputError(message, "INVALID_ITEMS")
        if not _is_number(quantity) or quantity <= 0:
            raise InvalidInputError(message, "INVALID_ITEMS")
        if not _is_number(unit_price) or unit_price < 0:
            raise InvalidInputError(message, "INVALID_ITEMS")
        if not _is_number(line_total) or line_total < 0:
            raise InvalidInputError(message, "INVALID_ITEMS")
        cleaned.append(
            {
                "description": description.strip(),
                "quantity": quantity,
                "unitPrice": unit_price,
                "total": line_total,
            }
        )
    return cleaned


def validate_chat_messages(messages: Any) -> List[dict]:
    """Messages must be a non-empty list of ``{role, content}`` with both set."""
    if not isinstance(messages, list) or not messages:
        raise InvalidInputError(
            "Messages must be a non-empty array", "INVALID_MESSAGES"
        )
    cleaned: List[dict] = []
    for message in messages:
        if (
            not isinstance(message, dict)
            or not message.get("role")
            or not message.get("content")
        ):
            raise InvalidInputError(
                "Each message must have role and content",
                "INVALID_MESSAGE_STRUCTURE",
            )
        cleaned.append({"role": message["role"], "content": message["content"]})
    return cleaned


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
