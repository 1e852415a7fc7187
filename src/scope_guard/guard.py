from scope_guard._internal.builders import make_guard
from scope_guard._internal.guard import Cleanup, Guard, ValueRef

__all__ = ["Cleanup", "Guard", "ValueRef", "make_guard"]
