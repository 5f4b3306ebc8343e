"""Caller identity supplied by the upstream identity provider."""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import get_settings
from src.db.repositories import UserUpsert
from src.db.session import get_db_session
from src.errors import AuthenticationRequired
from src.models.user import User
from src.services.agent_service import AgentService


def _header(request: Request, name: str) -> str | None:
    value = request.headers.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def get_identity_claims(request: Request) -> UserUpsert:
    """Read the authenticated caller from gateway headers."""

    settings = get_settings()
    user_id = _header(request, settings.auth_user_header)
    if user_id is None:
        raise AuthenticationRequired()

    return UserUpsert(
        id=user_id,
        email=_header(request, settings.auth_email_header),
        first_name=_header(request, settings.auth_first_name_header),
        last_name=_header(request, settings.auth_last_name_header),
    )


async def get_current_agent(
    claims: UserUpsert = Depends(get_identity_claims),
    session: AsyncSession = Depends(get_db_session),
) -> User:
    """FastAPI dependency returning the caller's agent record."""

    return await AgentService(session).ensure_agent(claims)
