"""Helpers shared by service classes."""

import functools
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from src.errors import StorageFailure

logger = logging.getLogger(__name__)

T = TypeVar("T")


def storage_guard(
    method: Callable[..., Awaitable[T]],
) -> Callable[..., Awaitable[T]]:
    """Roll back and raise StorageFailure when the store errors out."""

    @functools.wraps(method)
    async def wrapper(self: Any, *args: Any, **kwargs: Any) -> T:
        try:
            return await method(self, *args, **kwargs)
        except SQLAlchemyError as exc:
            logger.error("%s failed", method.__qualname__, exc_info=True)
            await self._session.rollback()
            raise StorageFailure() from exc

    return wrapper
