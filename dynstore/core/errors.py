"""
Exception types for the dynamic store.
"""


class StoreError(Exception):
    """Base class for store contract violations."""
    pass


class DestroyedError(StoreError):
    """Raised when a store operation is invoked after destroy()."""
    pass


class InvalidActionError(StoreError):
    """Raised when an action does not carry a string type."""
    pass


class ReentrantDispatchError(StoreError):
    """Raised when dispatch is called while a dispatch is in progress."""
    pass
