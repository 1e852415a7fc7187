"""Asynchronous cleanup with ``async_scope`` and ``catch_unwind``.

``async_scope`` awaits the primary coroutine, always awaits the cleanup, and
only then returns the result or re-raises the primary's exception.
"""

from __future__ import annotations

import asyncio

from scope_guard import async_scope, catch_unwind


async def release(events: list[str]) -> None:
    await asyncio.sleep(0)
    events.append("released")


async def fetch() -> str:
    await asyncio.sleep(0)
    return "rows"


async def fail() -> str:
    await asyncio.sleep(0)
    raise RuntimeError("FAIL")


async def main() -> None:
    events: list[str] = []
    result = await async_scope(release, events, fetch())
    print(f"result={result} events={events}")  # => result=rows events=['released']

    events.clear()
    try:
        await async_scope(release, events, fail())
    except RuntimeError as error:
        reraised = str(error)
    print(f"reraised={reraised} events={events}")  # => reraised=FAIL events=['released']

    outcome = await catch_unwind(fail())
    print(f"captured={type(outcome).__name__}:{outcome.is_unwound}")  # => captured=Unwound:True


if __name__ == "__main__":
    asyncio.run(main())
