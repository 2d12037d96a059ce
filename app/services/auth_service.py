import logging
from dataclasses import dataclass
from typing import Optional

from app.core.exceptions import ForbiddenError, UnauthorizedError
from app.models.base import utcnow
from app.repositories.auth_repository import AuthRepository
from app.repositories.crm_user_repository import CrmUserRepository
from app.schemas.common import CrmRole

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "


@dataclass(frozen=True)
class Identity:
    """Authenticated caller as resolved from a session token."""

    user_id: str
    email: str
    name: str


def extract_token(
    authorization: Optional[str], cookie_token: Optional[str]
) -> Optional[str]:
    """Bearer token from the ``Authorization`` header, else the session cookie."""
    if authorization and authorization.lower().startswith(BEARER_PREFIX):
        token = authorization[len(BEARER_PREFIX):].strip()
        if token:
            return token
    if cookie_token and cookie_token.strip():
        return cookie_token.strip()
    return None


class AuthService:
    """Read-only bridge to the authentication provider's session store.

    Sign-in and token issuance happen elsewhere; this only answers
    "who is calling" and "may they administer".
    """

    def __init__(
        self, auth_repo: AuthRepository, crm_user_repo: CrmUserRepository
    ) -> None:
        self._auth = auth_repo
        self._crm_users = crm_user_repo

    async def resolve_identity(
        self, authorization: Optional[str], cookie_token: Optional[str]
    ) -> Optional[Identity]:
        token = extract_token(authorization, cookie_token)
        if token is None:
            return None
        user = await self._auth.get_user_for_token(token, utcnow())
        if user is None:
            logger.debug("Session token rejected: unknown or expired")
            return None
        return Identity(user_id=user.id, email=user.email, name=user.name)

    @staticmethod
    def require(identity: Optional[Identity]) -> Identity:
        if identity is None:
            raise UnauthorizedError()
        return identity

    async def require_admin(self, identity: Optional[Identity]) -> Identity:
        identity = self.require(identity)
        crm_user = await self._crm_users.get_by_auth_user_id(identity.user_id)
        if crm_user is None or crm_user.role != CrmRole.admin.value:
            logger.warning("Admin operation refused for user %s", identity.user_id)
            raise ForbiddenError("Forbidden: admin role required")
        return identity
