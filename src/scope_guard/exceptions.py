class ScopeGuardError(Exception):
    """Represent a base class for all scope-guard specific failures.

    Catch this type when you want to handle any library misuse without
    matching each concrete exception class individually. Exceptions raised by
    your own cleanup callables or awaitables are never wrapped in it.
    """


class GuardConsumedError(ScopeGuardError):
    """Signal use of a guard whose cleanup obligation is already settled.

    Raised by ``Guard.value``, ``Guard.forget``, ``Guard.into_inner`` and
    ``Guard.stack`` after the guard was closed, forgotten, unpacked or
    stacked, and by ``ValueRef.value`` once the stacked step that received the
    reference has returned.

    Typical fixes include keeping the guard returned by ``stack`` instead of
    the original one, or reading the value before leaving the ``with`` block.
    """


class GuardNotCopyableError(ScopeGuardError, TypeError):
    """Signal an attempt to copy or pickle a guard.

    A guard is the single owner of its cleanup; a copy would run the cleanup
    twice. Raised by ``copy.copy``, ``copy.deepcopy`` and ``pickle``.

    Typical fix is passing the guard itself around, or unpacking it with
    ``into_inner`` and guarding the copy separately.
    """
