from enum import Enum


class CollectPolicy(str, Enum):
    """Policy for guards that are garbage collected while still armed."""

    RUN = "run"
    """Run the cleanup, the same way leaving a ``with`` block does."""

    WARN = "warn"
    """Run the cleanup and log a warning naming the guard that was not closed."""
