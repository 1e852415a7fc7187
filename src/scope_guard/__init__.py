from scope_guard.exceptions import (
    GuardConsumedError,
    GuardNotCopyableError,
    ScopeGuardError,
)
from scope_guard.guard import Guard, ValueRef, make_guard
from scope_guard.policies import CollectPolicy
from scope_guard.scoped import async_scope
from scope_guard.unwind import CatchUnwind, Completed, Unwound, catch_unwind

__all__ = [
    "CatchUnwind",
    "CollectPolicy",
    "Completed",
    "Guard",
    "GuardConsumedError",
    "GuardNotCopyableError",
    "ScopeGuardError",
    "Unwound",
    "ValueRef",
    "async_scope",
    "catch_unwind",
    "make_guard",
]
