from scope_guard._internal.unwind import CatchUnwind, Completed, Outcome, Unwound, catch_unwind

__all__ = ["CatchUnwind", "Completed", "Outcome", "Unwound", "catch_unwind"]
