class LeadPipelineError(Exception):
    """Base class for all domain exceptions.

    Every error carries a human-readable ``detail`` and a machine-readable
    ``code`` so the HTTP boundary can render ``{"error", "code"}`` without
    knowing anything about the individual failure.  Subclasses pin the
    HTTP status via ``status_code``.
    """

    status_code: int = 500
    default_code: str = "INTERNAL_ERROR"

    def __init__(self, detail: str = "An error occurred", code: str | None = None):
        self.detail = detail
        self.code = code or self.default_code
        super().__init__(detail)


class InvalidInputError(LeadPipelineError):
    """Raised when a payload field is malformed, missing, or out of range.

    Always raised before any store mutation, so no partial write exists.
    """

    status_code = 400
    default_code = "INVALID_INPUT"

    def __init__(self, detail: str = "Invalid input", code: str | None = None):
        super().__init__(detail, code)


class ReferenceNotFoundError(LeadPipelineError):
    """Raised when a foreign key supplied in a create payload does not resolve."""

    status_code = 400
    default_code = "REFERENCE_NOT_FOUND"

    def __init__(self, detail: str = "Referenced record not found", code: str | None = None):
        super().__init__(detail, code)


class NotFoundError(LeadPipelineError):
    """Raised when the addressed resource does not exist."""

    status_code = 404
    default_code = "NOT_FOUND"

    def __init__(self, detail: str = "Resource not found", code: str | None = None):
        super().__init__(detail, code)


class LeadNotFoundError(NotFoundError):
    """Raised when a requested lead does not exist."""

    def __init__(self, detail: str = "Lead not found"):
        super().__init__(detail, "LEAD_NOT_FOUND")


class UnauthorizedError(LeadPipelineError):
    """Raised when an auth-required operation has no valid identity."""

    status_code = 401
    default_code = "UNAUTHORIZED"

    def __init__(self, detail: str = "Authentication required"):
        super().__init__(detail)


class ForbiddenError(LeadPipelineError):
    """Raised when the caller lacks the admin role or does not own the record."""

    status_code = 403
    default_code = "FORBIDDEN"

    def __init__(self, detail: str = "Forbidden"):
        super().__init__(detail)


class ConflictError(LeadPipelineError):
    """Raised when an operation would break a relationship it must not break."""

    status_code = 409
    default_code = "CONFLICT"

    def __init__(self, detail: str = "Conflict", code: str | None = None):
        super().__init__(detail, code)


class IntakeStepError(InvalidInputError):
    """Raised when a funnel step is left incomplete."""

    def __init__(self, detail: str = "Step is incomplete"):
        super().__init__(detail, "STEP_INCOMPLETE")


class NumberGenerationError(LeadPipelineError):
    """Raised when a unique document number cannot be found within the retry budget."""

    status_code = 500
    default_code = "QUOTE_NUMBER_GENERATION_FAILED"

    def __init__(self, detail: str = "Failed to generate unique quote number"):
        super().__init__(detail)
