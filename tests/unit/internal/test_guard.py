from __future__ import annotations

import copy
import logging
import pickle

import pytest

from scope_guard import CollectPolicy, Guard
from scope_guard.exceptions import GuardConsumedError, GuardNotCopyableError
from tests.conftest import Cell


def _bump(cell: Cell, *, commit: bool) -> None:
    old_value = cell.value
    with Guard(cell, lambda c: setattr(c, "value", old_value)) as guard:
        guard.value.value += 1
        if commit:
            guard.forget()


def test_guard_restores_value_on_scope_exit(cell: Cell) -> None:
    _bump(cell, commit=False)

    assert cell.value == 0


def test_guard_forget_keeps_mutation(cell: Cell) -> None:
    _bump(cell, commit=True)

    assert cell.value == 1


def test_guard_does_not_run_cleanup_on_construction(calls: list[object]) -> None:
    guard = Guard(1, calls.append)

    assert calls == []
    assert guard.armed

    guard.close()


def test_guard_runs_cleanup_once_with_last_written_value(calls: list[object]) -> None:
    with Guard(1, calls.append) as guard:
        guard.value = 2
        guard.value = 3

    assert calls == [3]
    assert not guard.armed


def test_guard_close_is_idempotent(calls: list[object]) -> None:
    guard = Guard("value", calls.append)

    guard.close()
    guard.close()
    del guard

    assert calls == ["value"]


def test_guard_runs_cleanup_when_body_raises(calls: list[object]) -> None:
    with pytest.raises(ValueError, match="body"), Guard("value", calls.append):
        raise ValueError("body")

    assert calls == ["value"]


def test_guard_into_inner_returns_value_without_cleanup(calls: list[object]) -> None:
    guard = Guard([1], calls.append)
    guard.value.append(2)

    value = guard.into_inner()

    assert value == [1, 2]
    assert calls == []


def test_guard_forget_inside_with_block_exits_cleanly(calls: list[object]) -> None:
    with Guard(1, calls.append) as guard:
        guard.forget()

    assert calls == []


@pytest.mark.parametrize("operation", ["forget", "into_inner", "stack"])
def test_guard_operations_on_consumed_guard_raise(operation: str) -> None:
    guard = Guard(1, lambda _value: None)
    guard.close()

    with pytest.raises(GuardConsumedError):
        if operation == "stack":
            guard.stack(lambda _ref: None)
        else:
            getattr(guard, operation)()


def test_guard_value_access_after_consumption_raises() -> None:
    guard = Guard(1, lambda _value: None)
    guard.forget()

    with pytest.raises(GuardConsumedError):
        _ = guard.value
    with pytest.raises(GuardConsumedError):
        guard.value = 2


def test_guard_cleanup_failure_propagates_and_is_not_retried(calls: list[object]) -> None:
    def cleanup(value: int) -> None:
        calls.append(value)
        raise RuntimeError("cleanup failed")

    guard = Guard(1, cleanup)
    with pytest.raises(RuntimeError, match="cleanup failed"):
        guard.close()

    guard.close()
    del guard

    assert calls == [1]


def test_guard_cleanup_is_not_reentered_when_it_closes_its_own_guard(
    calls: list[object],
) -> None:
    holder: list[Guard[int]] = []

    def cleanup(value: int) -> None:
        calls.append(value)
        holder[0].close()

    guard = Guard(1, cleanup)
    holder.append(guard)
    guard.close()

    assert calls == [1]


def test_guard_cleanup_exception_is_chained_onto_body_exception() -> None:
    def cleanup(_value: int) -> None:
        raise RuntimeError("cleanup")

    with pytest.raises(RuntimeError, match="cleanup") as exc_info, Guard(1, cleanup):
        raise ValueError("body")

    assert isinstance(exc_info.value.__context__, ValueError)


def test_guard_runs_cleanup_when_collected(calls: list[object]) -> None:
    guard = Guard(1, calls.append)
    guard.value = 5

    del guard

    assert calls == [5]


def test_guard_collect_warn_policy_logs_and_runs_cleanup(
    calls: list[object],
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level(logging.WARNING, logger="scope_guard._internal.guard")
    guard = Guard(1, calls.append, on_collect=CollectPolicy.WARN)

    del guard

    assert calls == [1]
    assert "garbage collected while armed" in caplog.text


def test_guard_collect_warn_policy_is_silent_after_close(
    calls: list[object],
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level(logging.WARNING, logger="scope_guard._internal.guard")
    guard = Guard(1, calls.append, on_collect="warn")  # type: ignore[arg-type]

    guard.close()
    del guard

    assert calls == [1]
    assert caplog.text == ""


def test_guard_rejects_unknown_collect_policy() -> None:
    with pytest.raises(ValueError, match="'ignore'"):
        Guard(1, lambda _value: None, on_collect="ignore")  # type: ignore[arg-type]


@pytest.mark.parametrize("clone", [copy.copy, copy.deepcopy, pickle.dumps])
def test_guard_cannot_be_copied(clone: object, calls: list[object]) -> None:
    guard = Guard(1, calls.append)

    with pytest.raises(GuardNotCopyableError):
        clone(guard)  # type: ignore[operator]

    guard.close()
    assert calls == [1]


def test_guard_copy_error_is_a_type_error() -> None:
    assert issubclass(GuardNotCopyableError, TypeError)


def test_guard_repr_reflects_state() -> None:
    def cleanup(_value: int) -> None:
        return None

    guard = Guard(7, cleanup)
    assert repr(guard).startswith("Guard(7, <function")

    guard.forget()
    assert repr(guard) == "Guard(<consumed>)"
