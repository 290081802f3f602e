"""Best-effort execution of cache maintenance inside a savepoint."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from knockwise.application.ports.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def best_effort(
    uow: UnitOfWork,
    description: str,
    operation: Callable[[], Awaitable[T]],
) -> T | None:
    """Run *operation* in a savepoint; log and return None if it fails.

    Failures roll back only the savepoint, so the caller's writes (the
    assignment record itself) still commit.
    """
    try:
        async with uow.savepoint():
            return await operation()
    except Exception:
        logger.exception("%s failed", description)
        return None
