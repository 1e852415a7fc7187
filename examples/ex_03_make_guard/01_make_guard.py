"""Building guards from zero, one or several values with ``make_guard``."""

from __future__ import annotations

from dataclasses import dataclass

from scope_guard import make_guard


@dataclass
class Flag:
    value: bool = False


@dataclass
class Counter:
    value: int = 0


def main() -> None:
    is_run = Flag()
    with make_guard(lambda: setattr(is_run, "value", True)):
        pass
    print(f"no_argument_cleanup_ran={is_run.value}")  # => no_argument_cleanup_ran=True

    counter = Counter()
    flag = Flag()
    old_value = counter.value

    def reset(pair: tuple[Counter, Flag]) -> None:
        pair[0].value = old_value
        pair[1].value = False

    with make_guard(reset, counter, flag) as guard:
        guard.value[0].value += 1
        guard.value[1].value = True
    print(f"after_drop=({counter.value}, {flag.value})")  # => after_drop=(0, False)

    guard = make_guard(reset, counter, flag)
    guard.value[0].value += 1
    guard.value[1].value = True
    kept_counter, kept_flag = guard.into_inner()
    print(f"after_into_inner=({kept_counter.value}, {kept_flag.value})")  # => after_into_inner=(1, True)


if __name__ == "__main__":
    main()
