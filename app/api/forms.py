"""Helpers for the multipart endpoints (file upload, quote funnel)."""

from fastapi import Request

from app.core.exceptions import InvalidInputError

MULTIPART = "multipart/form-data"


def require_multipart(request: Request) -> None:
    if not request.headers.get("content-type", "").startswith(MULTIPART):
        raise InvalidInputError(
            "Content-Type must be multipart/form-data", "INVALID_CONTENT_TYPE"
        )
