from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from scope_guard._internal.unwind import catch_unwind

R = TypeVar("R")
A = TypeVar("A")

logger = logging.getLogger(__name__)


async def async_scope(
    cleanup: Callable[[A], Awaitable[object]],
    args: A,
    primary: Awaitable[R],
) -> R:
    """Await ``primary``, then always await ``cleanup(args)`` before returning.

    ``primary`` runs under ``catch_unwind``, so an exception it raises while
    suspended is held back until the cleanup has completed and is then
    re-raised unchanged. Exceptions raised by the cleanup itself are not
    captured: they propagate at once and replace a held-back exception.

    Cleanup is not guaranteed when the calling coroutine is abandoned (closed
    without being driven to completion) before this call returns.

    Args:
        cleanup: Callable building the cleanup awaitable from ``args``.
        args: Single argument passed as-is to ``cleanup``.
        primary: Awaitable to run before the cleanup.

    Returns:
        The result of ``primary``.

    Examples:
        .. code-block:: python

            async def release(conn: Connection) -> None:
                await conn.close()

            rows = await async_scope(release, conn, conn.fetch(query))

    """
    outcome = await catch_unwind(primary)
    if outcome.is_unwound:
        logger.debug("Primary awaitable raised; running cleanup %r before re-raising", cleanup)
    await cleanup(args)
    return outcome.unwrap()
