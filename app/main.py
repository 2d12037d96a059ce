import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from app.api.v1.endpoints import health
from app.api.v1.router import router as api_v1_router
from app.core.config import settings as app_settings
from app.core.exceptions import LeadPipelineError
from app.core.rate_limit import limiter
from app.core.validation import error_code

# Configure logging
logging.basicConfig(level=app_settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

# Location segments that name where a field came from, not the field itself
_LOCATION_PARTS = {"body", "query", "path", "header", "cookie"}


app = FastAPI(
    title="Lead Pipeline Engine",
    description="Leads, quotes, estimates and public intake for a small-business CRM",
    version="0.1.0",
)

# Attach rate limiter state so slowapi can find it
app.state.limiter = limiter

# CORS middleware: restricted to configured origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        o.strip() for o in app_settings.CORS_ORIGINS.split(",") if o.strip()
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_v1_router)
app.include_router(health.router)


def error_body(message: str, code: str) -> dict:
    return {"error": message, "code": code}


def validation_error_code(errors: list) -> str:
    """Map the first pydantic error to ``MISSING_<FIELD>`` / ``INVALID_<FIELD>``."""
    if not errors:
        return "INVALID_BODY"
    first = errors[0]
    if first.get("type") == "json_invalid":
        return "INVALID_BODY"
    names = [
        part
        for part in first.get("loc", ())
        if isinstance(part, str) and part not in _LOCATION_PARTS
    ]
    if not names:
        return "INVALID_BODY"
    prefix = "MISSING" if first.get("type") == "missing" else "INVALID"
    return error_code(prefix, names[-1])


@app.exception_handler(LeadPipelineError)
async def lead_pipeline_error_handler(request: Request, exc: LeadPipelineError):
    if exc.status_code >= 500:
        logger.error("%s on %s: %s", exc.code, request.url.path, exc.detail)
    else:
        logger.warning("%s on %s: %s", exc.code, request.url.path, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.detail, exc.code),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    code = validation_error_code(errors)
    logger.warning("Request validation error (%s): %s", code, errors)
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return JSONResponse(status_code=400, content=error_body(message, code))


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    logger.warning("Rate limit exceeded on %s: %s", request.url.path, exc.detail)
    return JSONResponse(
        status_code=429,
        content=error_body(f"Rate limit exceeded: {exc.detail}", "RATE_LIMITED"),
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    """Catch-all handler for unexpected/unhandled exceptions.

    Returns a generic 500 response so that internal details are never
    leaked to the client.
    """
    logger.error(
        "Unhandled exception on %s %s: %s",
        request.method,
        request.url.path,
        exc,
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content=error_body("Internal server error", "INTERNAL_ERROR"),
    )
