"""Stacking extra cleanup steps onto a guard.

Steps added with ``stack()`` run before the cleanup they wrap, so the most
recent step runs first and the original cleanup always runs last, exactly like
nested ``with`` blocks unwinding.
"""

from __future__ import annotations

from scope_guard import Guard, ValueRef


def main() -> None:
    events: list[str] = []

    def close_file(path: str) -> None:
        events.append(f"close {path}")

    def flush(ref: ValueRef[str]) -> None:
        events.append(f"flush {ref.value}")

    def unlock(ref: ValueRef[str]) -> None:
        events.append(f"unlock {ref.value}")
        ref.value = ref.value.upper()

    guard = Guard("log.txt", close_file)
    guard = guard.stack(flush)
    guard = guard.stack(unlock)
    guard.close()

    print(" | ".join(events))  # => unlock log.txt | flush LOG.TXT | close LOG.TXT


if __name__ == "__main__":
    main()
