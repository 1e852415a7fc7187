from __future__ import annotations

import logging
from collections.abc import Awaitable, Generator
from dataclasses import dataclass
from typing import Any, Generic, NoReturn, TypeAlias, TypeVar, Union

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Completed(Generic[T]):
    """Outcome of an awaitable that returned normally."""

    value: T

    @property
    def is_unwound(self) -> bool:
        """Return ``False``: the awaitable did not raise."""
        return False

    def unwrap(self) -> T:
        """Return the awaitable's result."""
        return self.value


@dataclass(frozen=True, slots=True)
class Unwound:
    """Outcome of an awaitable that raised.

    The exception is kept as an opaque token: ``unwrap()`` re-raises the very
    same object, traceback included.
    """

    exception: BaseException

    @property
    def is_unwound(self) -> bool:
        """Return ``True``: the awaitable raised."""
        return True

    def unwrap(self) -> NoReturn:
        """Re-raise the captured exception."""
        raise self.exception


Outcome: TypeAlias = Union[Completed[T], Unwound]
"""Normal-or-raised result of an awaitable driven by ``catch_unwind``."""


class CatchUnwind(Generic[T]):
    """Awaitable that turns an exception raised by another awaitable into a value.

    Every resumption of the inner awaitable is delegated step by step: a step
    that suspends is passed through to the scheduler untouched, a step that
    returns yields ``Completed``, and a step that raises yields ``Unwound``
    instead of propagating. Whatever the scheduler sends or throws back while
    the inner awaitable is suspended is forwarded to it.

    ``GeneratorExit`` is not captured: when the wrapper is closed without being
    driven to completion the inner awaitable is closed too and nothing is
    recorded.

    The inner awaitable must be safe to abandon once it raised; this is not
    checked. A ``CatchUnwind`` can be awaited only once.
    """

    __slots__ = ("_awaitable", "_started")

    def __init__(self, awaitable: Awaitable[T]) -> None:
        self._awaitable = awaitable
        self._started = False

    def __await__(self) -> Generator[Any, Any, Outcome[T]]:
        if self._started:
            msg = "CatchUnwind object can only be awaited once."
            raise RuntimeError(msg)
        self._started = True
        return self._drive()

    def _drive(self) -> Generator[Any, Any, Outcome[T]]:
        iterator = self._awaitable.__await__()
        to_send: Any = None
        to_throw: BaseException | None = None
        while True:
            try:
                if to_throw is not None:
                    yielded = _throw_into(iterator, to_throw)
                elif to_send is None:
                    yielded = next(iterator)
                else:
                    yielded = iterator.send(to_send)
            except StopIteration as stop:
                return Completed(stop.value)
            except GeneratorExit:
                raise
            except BaseException as error:  # noqa: BLE001
                logger.debug("Captured %r raised by %r", error, self._awaitable)
                return Unwound(error)

            to_send, to_throw = None, None
            try:
                to_send = yield yielded
            except GeneratorExit:
                _close(iterator)
                raise
            except BaseException as error:  # noqa: BLE001
                to_throw = error

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._awaitable!r})"


def _throw_into(iterator: Generator[Any, Any, Any], error: BaseException) -> Any:
    throw = getattr(iterator, "throw", None)
    if throw is None:
        raise error
    return throw(error)


def _close(iterator: Generator[Any, Any, Any]) -> None:
    close = getattr(iterator, "close", None)
    if close is not None:
        close()


def catch_unwind(awaitable: Awaitable[T]) -> CatchUnwind[T]:
    """Wrap ``awaitable`` so that awaiting it never raises.

    Args:
        awaitable: Coroutine, task, future or any other awaitable.

    Returns:
        Awaitable producing ``Completed(result)`` or ``Unwound(exception)``.

    Examples:
        .. code-block:: python

            outcome = await catch_unwind(fetch())
            if outcome.is_unwound:
                log_failure(outcome.exception)
            return outcome.unwrap()

    """
    return CatchUnwind(awaitable)
