import logging
from typing import List, Optional, Tuple

from app.core.constants import CRM_ROLES
from app.core.exceptions import InvalidInputError, NotFoundError, ReferenceNotFoundError
from app.core.validation import (
    clamp_pagination,
    normalize_email,
    require_choice,
    require_non_blank,
    total_pages,
)
from app.models.base import utcnow
from app.models.crm_user import CrmUser
from app.repositories.auth_repository import AuthRepository
from app.repositories.crm_user_repository import CrmUserRepository
from app.repositories.lead_repository import LeadRepository
from app.schemas.common import CrmRole
from app.schemas.crm_user import CrmUserCreate, CrmUserUpdate

logger = logging.getLogger(__name__)


def _user_not_found() -> NotFoundError:
    return NotFoundError("User not found", "USER_NOT_FOUND")


class CrmUserService:
    """Operator accounts.  Each one links exactly one auth identity."""

    def __init__(
        self,
        crm_user_repo: CrmUserRepository,
        auth_repo: AuthRepository,
        lead_repo: LeadRepository,
    ) -> None:
        self._users = crm_user_repo
        self._auth = auth_repo
        self._leads = lead_repo

    async def list_users(
        self, page: Optional[int] = None, limit: Optional[int] = None
    ) -> Tuple[List[CrmUser], int, int, int]:
        page, limit = clamp_pagination(page, limit)
        users, total = await self._users.list_page(
            offset=(page - 1) * limit, limit=limit
        )
        return users, total, page, total_pages(total, limit)

    async def get_user(self, user_id: int) -> CrmUser:
        crm_user = await self._users.get_by_id(user_id)
        if crm_user is None:
            raise _user_not_found()
        return crm_user

    async def get_profile(self, auth_user_id: str) -> CrmUser:
        """The CRM profile of the calling identity."""
        crm_user = await self._users.get_by_auth_user_id(auth_user_id)
        if crm_user is None:
            raise _user_not_found()
        return crm_user

    async def create_user(self, data: CrmUserCreate) -> CrmUser:
        if data.auth_user_id is None:
            raise InvalidInputError("Auth user ID is required", "MISSING_AUTH_USER_ID")
        if data.email is None:
            raise InvalidInputError("Email is required", "MISSING_EMAIL")
        if data.name is None:
            raise InvalidInputError("Name is required", "MISSING_NAME")
        auth_user_id = require_non_blank(data.auth_user_id, "authUserId")
        email = normalize_email(data.email, "email")
        name = require_non_blank(data.name, "name")
        role = CrmRole.agent.value
        if data.role is not None:
            role = require_choice(data.role, CRM_ROLES, "role")

        if await self._auth.get_user(auth_user_id) is None:
            raise ReferenceNotFoundError(
                "Auth user not found", "AUTH_USER_NOT_FOUND"
            )
        if await self._users.get_by_email(email) is not None:
            raise InvalidInputError(
                "A CRM user with this email already exists", "EMAIL_EXISTS"
            )
        if await self._users.get_by_auth_user_id(auth_user_id) is not None:
            raise InvalidInputError(
                "This auth user is already linked to a CRM user", "AUTH_USER_LINKED"
            )

        crm_user = await self._users.create(
            auth_user_id=auth_user_id, email=email, name=name, role=role
        )
        await self._users.commit()
        logger.info("CRM user %s created with role %s", crm_user.id, role)
        return crm_user

    async def update_user(self, user_id: int, data: CrmUserUpdate) -> CrmUser:
        provided = data.model_fields_set & {"role", "name"}
        if not provided:
            raise InvalidInputError(
                "At least one of role or name is required", "NO_UPDATE_FIELDS"
            )
        changes = {}
        if "role" in provided:
            changes["role"] = require_choice(data.role, CRM_ROLES, "role")
        if "name" in provided:
            changes["name"] = require_non_blank(data.name, "name")

        crm_user = await self.get_user(user_id)
        for field, value in changes.items():
            setattr(crm_user, field, value)
        crm_user.updated_at = utcnow()
        await self._users.commit()
        return crm_user

    async def delete_user(self, user_id: int) -> CrmUser:
        """Remove the account; leads assigned to it become unassigned."""
        crm_user = await self.get_user(user_id)
        await self._leads.unassign_user(user_id)
        await self._users.delete(crm_user)
        await self._users.commit()
        logger.info("CRM user %s deleted", user_id)
        return crm_user
