from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from types import TracebackType
from typing import Any, Generic, NoReturn, TypeVar

from typing_extensions import Self

from scope_guard._internal.policies import CollectPolicy
from scope_guard.exceptions import GuardConsumedError, GuardNotCopyableError

T = TypeVar("T")

Cleanup = Callable[[T], object]
"""Callable receiving the guarded value when the guard's scope ends."""

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _Armed(Generic[T]):
    """Live state of a guard: the owned value and its pending cleanup."""

    value: T
    cleanup: Cleanup[T]


class ValueRef(Generic[T]):
    """Borrowed read/write handle to a guarded value inside a stacked step.

    Steps registered with ``Guard.stack`` receive a ``ValueRef`` instead of the
    value itself: they may read the value or rebind it, but ownership stays
    with the cleanup further down the chain. The reference is released when
    the step returns, after which any access raises ``GuardConsumedError``.
    """

    __slots__ = ("_released", "_value")

    def __init__(self, value: T) -> None:
        self._value = value
        self._released = False

    @property
    def value(self) -> T:
        """Return the borrowed value."""
        self._ensure_live()
        return self._value

    @value.setter
    def value(self, value: T) -> None:
        self._ensure_live()
        self._value = value

    def _release(self) -> T:
        self._released = True
        return self._value

    def _ensure_live(self) -> None:
        if self._released:
            msg = "Value reference used after its stacked cleanup step returned."
            raise GuardConsumedError(msg)

    def __repr__(self) -> str:
        if self._released:
            return "ValueRef(<released>)"
        return f"ValueRef({self._value!r})"


@dataclass(frozen=True, slots=True)
class _StackedCleanup(Generic[T]):
    """Run ``step`` against a borrowed value, then hand the value to ``inner``."""

    step: Callable[[ValueRef[T]], object]
    inner: Cleanup[T]

    def __call__(self, value: T) -> None:
        ref = ValueRef(value)
        try:
            self.step(ref)
        finally:
            self.inner(ref._release())  # noqa: SLF001


class Guard(Generic[T]):
    """Own a value and run a cleanup callable on it exactly once.

    The cleanup fires when the guard's scope ends: on leaving a ``with`` block,
    on an explicit ``close()``, or when an armed guard is garbage collected.
    It fires whether the scope ended normally or through an exception, and it
    never fires twice. ``forget()`` and ``into_inner()`` disarm the guard so
    the cleanup never runs; ``stack()`` moves the obligation into a new guard
    that runs an extra step first.

    The guard is a single-owner object: it cannot be copied or pickled and
    performs no locking.

    Examples:
        .. code-block:: python

            def bump(cell: Cell) -> None:
                old_value = cell.value
                with Guard(cell, lambda c: setattr(c, "value", old_value)) as guard:
                    guard.value.value += 1
                    if commit():
                        guard.forget()

    """

    __slots__ = ("__weakref__", "_on_collect", "_state")

    def __init__(
        self,
        value: T,
        cleanup: Cleanup[T],
        *,
        on_collect: CollectPolicy = CollectPolicy.RUN,
    ) -> None:
        """Create an armed guard; the cleanup is not invoked yet.

        Args:
            value: Value owned by the guard and passed to ``cleanup``.
            cleanup: Callable invoked with the final value when the scope ends.
            on_collect: What to do when the guard is garbage collected armed.

        """
        self._on_collect = CollectPolicy(on_collect)
        self._state: _Armed[T] | None = _Armed(value=value, cleanup=cleanup)

    @property
    def armed(self) -> bool:
        """Return whether the cleanup is still pending."""
        return self._state is not None

    @property
    def value(self) -> T:
        """Return the guarded value.

        Raises:
            GuardConsumedError: If the guard no longer owns a value.

        """
        return self._live().value

    @value.setter
    def value(self, value: T) -> None:
        self._live().value = value

    def forget(self) -> None:
        """Disarm the guard and drop the value without running the cleanup.

        Raises:
            GuardConsumedError: If the guard was already consumed.

        """
        self._take()
        logger.debug("Guard disarmed; cleanup discarded")

    def into_inner(self) -> T:
        """Disarm the guard and return the value without running the cleanup.

        Returns:
            The last value written to the guard.

        Raises:
            GuardConsumedError: If the guard was already consumed.

        """
        state = self._take()
        logger.debug("Guard unpacked; cleanup discarded")
        return state.value

    def stack(self, step: Callable[[ValueRef[T]], object]) -> Guard[T]:
        """Consume the guard and return one whose cleanup runs ``step`` first.

        ``step`` receives a ``ValueRef`` it may read or rebind, then the
        previous cleanup runs with the resulting value. Steps stacked later run
        earlier, so cleanups unwind like nested ``with`` blocks and the first
        registered cleanup always runs last.

        Args:
            step: Extra cleanup step applied to the borrowed value.

        Returns:
            A new armed guard over the same value.

        Raises:
            GuardConsumedError: If the guard was already consumed.

        """
        state = self._take()
        logger.debug("Guard cleanup stacked with %r", step)
        return Guard(
            state.value,
            _StackedCleanup(step=step, inner=state.cleanup),
            on_collect=self._on_collect,
        )

    def close(self) -> None:
        """Run the cleanup now if the guard is still armed.

        Closing an already consumed guard is a no-op. Exceptions raised by the
        cleanup propagate to the caller; the cleanup is not retried.
        """
        state = self._state
        if state is None:
            return
        self._state = None
        logger.debug("Guard scope ended; running cleanup %r", state.cleanup)
        state.cleanup(state.value)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        """Run the cleanup on scope exit without suppressing the active exception."""
        self.close()

    def __del__(self) -> None:
        if getattr(self, "_state", None) is None:
            return
        if self._on_collect is CollectPolicy.WARN:
            logger.warning("Guard %r was garbage collected while armed", self)
        self.close()

    def __copy__(self) -> NoReturn:
        msg = "Guard objects own their cleanup and cannot be copied."
        raise GuardNotCopyableError(msg)

    def __deepcopy__(self, memo: dict[int, Any]) -> NoReturn:
        self.__copy__()

    def __reduce__(self) -> NoReturn:
        msg = "Guard objects own their cleanup and cannot be pickled."
        raise GuardNotCopyableError(msg)

    def __repr__(self) -> str:
        state = self._state
        if state is None:
            return f"{type(self).__name__}(<consumed>)"
        return f"{type(self).__name__}({state.value!r}, {state.cleanup!r})"

    def _live(self) -> _Armed[T]:
        state = self._state
        if state is None:
            msg = "Guard was already closed, forgotten, unpacked or stacked."
            raise GuardConsumedError(msg)
        return state

    def _take(self) -> _Armed[T]:
        state = self._live()
        self._state = None
        return state
