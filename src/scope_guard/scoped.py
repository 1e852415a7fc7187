from scope_guard._internal.scoped import async_scope

__all__ = ["async_scope"]
