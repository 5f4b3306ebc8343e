"""Business logic for agent records sourced from the identity provider."""

from sqlalchemy.ext.asyncio import AsyncSession

from src.db.repositories import UserUpsert, upsert_user
from src.models.user import User
from src.schemas.user import AgentAccountOut
from src.services.base import storage_guard


class AgentService:
    """Keep the local agent record in step with identity claims."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @storage_guard
    async def ensure_agent(self, claims: UserUpsert) -> User:
        return await upsert_user(self._session, claims)

    @staticmethod
    def account(user: User) -> AgentAccountOut:
        return AgentAccountOut.model_validate(user)
