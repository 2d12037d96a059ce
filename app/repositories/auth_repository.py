from datetime import datetime
from typing import Any, Optional

from sqlalchemy import select

from app.models.auth import AuthSession, AuthUser
from app.repositories.base import BaseRepository


class AuthRepository(BaseRepository):
    """Read access to the authentication provider's ``user`` and ``session`` tables."""

    async def get_user(self, user_id: str) -> Optional[AuthUser]:
        result = await self._db.execute(select(AuthUser).where(AuthUser.id == user_id))
        return result.scalar_one_or_none()

    async def get_user_by_email(self, email: str) -> Optional[AuthUser]:
        result = await self._db.execute(
            select(AuthUser).where(AuthUser.email == email)
        )
        return result.scalar_one_or_none()

    async def get_user_for_token(
        self, token: str, now: datetime
    ) -> Optional[AuthUser]:
        """Return the user owning an unexpired session *token*, or ``None``."""
        result = await self._db.execute(
            select(AuthUser)
            .join(AuthSession, AuthSession.user_id == AuthUser.id)
            .where(AuthSession.token == token, AuthSession.expires_at > now)
        )
        return result.scalar_one_or_none()

    async def create_user(self, **kwargs: Any) -> AuthUser:
        user = AuthUser(**kwargs)
        self._db.add(user)
        await self._db.flush()
        return user

    async def create_session(self, **kwargs: Any) -> AuthSession:
        auth_session = AuthSession(**kwargs)
        self._db.add(auth_session)
        await self._db.flush()
        return auth_session
