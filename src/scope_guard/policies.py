from scope_guard._internal.policies import CollectPolicy

__all__ = ["CollectPolicy"]
