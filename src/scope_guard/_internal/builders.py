from __future__ import annotations

from collections.abc import Callable
from typing import Any, overload

from scope_guard._internal.guard import Guard
from scope_guard._internal.policies import CollectPolicy


def _noop(_value: object) -> None:
    return None


@overload
def make_guard(*, on_collect: CollectPolicy = ...) -> Guard[None]: ...


@overload
def make_guard(
    cleanup: Callable[[], object],
    *,
    on_collect: CollectPolicy = ...,
) -> Guard[tuple[()]]: ...


@overload
def make_guard(
    cleanup: Callable[[Any], object],
    value: Any,
    /,
    *values: Any,
    on_collect: CollectPolicy = ...,
) -> Guard[Any]: ...


def make_guard(
    cleanup: Callable[..., object] | None = None,
    *values: Any,
    on_collect: CollectPolicy = CollectPolicy.RUN,
) -> Guard[Any]:
    """Build a guard from a cleanup callable and zero or more values.

    ``make_guard()`` returns a guard with nothing to clean up.
    ``make_guard(cleanup)`` calls ``cleanup()`` without arguments.
    ``make_guard(cleanup, value)`` guards ``value`` itself, and
    ``make_guard(cleanup, v1, v2, ...)`` guards the tuple ``(v1, v2, ...)``,
    which is what the cleanup receives.

    Args:
        cleanup: Cleanup callable, or ``None`` for a no-op guard.
        *values: Values owned by the guard.
        on_collect: Forwarded to ``Guard``.

    Returns:
        An armed guard.

    Examples:
        .. code-block:: python

            with make_guard(lambda pair: pair[0].clear(), buffer, flag) as guard:
                buffer, flag = guard.value

    """
    if cleanup is None:
        if values:
            msg = "make_guard() needs a cleanup callable when values are given."
            raise TypeError(msg)
        return Guard(None, _noop, on_collect=on_collect)

    if not values:
        no_arg_cleanup = cleanup
        return Guard((), lambda _unit: no_arg_cleanup(), on_collect=on_collect)

    if len(values) == 1:
        return Guard(values[0], cleanup, on_collect=on_collect)

    return Guard(values, cleanup, on_collect=on_collect)
