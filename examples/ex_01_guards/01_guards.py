"""Guard basics: cleanup on scope exit, disarm and unpack.

This module covers:

1. Cleanup restoring a value when the ``with`` block ends.
2. ``forget()`` keeping the change by disarming the guard.
3. ``into_inner()`` returning the value without running cleanup.
4. Cleanup still running when the block raises.
"""

from __future__ import annotations

from dataclasses import dataclass

from scope_guard import Guard


@dataclass
class Counter:
    value: int = 0


def bump(counter: Counter, *, commit: bool) -> None:
    old_value = counter.value
    with Guard(counter, lambda c: setattr(c, "value", old_value)) as guard:
        guard.value.value += 1
        if commit:
            guard.forget()


def main() -> None:
    counter = Counter()

    bump(counter, commit=False)
    print(f"rolled_back={counter.value}")  # => rolled_back=0

    bump(counter, commit=True)
    print(f"committed={counter.value}")  # => committed=1

    closed: list[str] = []
    guard = Guard(["draft"], lambda items: closed.append(",".join(items)))
    guard.value.append("final")
    items = guard.into_inner()
    print(f"into_inner={items} cleanup_runs={len(closed)}")  # => into_inner=['draft', 'final'] cleanup_runs=0

    try:
        with Guard("connection", closed.append):
            raise RuntimeError("query failed")
    except RuntimeError as error:
        failure = str(error)
    print(f"failure={failure} closed={closed}")  # => failure=query failed closed=['connection']


if __name__ == "__main__":
    main()
