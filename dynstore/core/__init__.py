"""
Core store primitives.

This module provides the building blocks of the dynamic store:
- Action: Immutable action record
- ReducerManager: Evolving key -> reducer mapping with a combined reducer
- DynamicStore: State holder with dispatch, listeners and runtime reducers
- Errors: Contract violations raised by the store
"""

from .actions import (
    Action,
    INIT_ACTION_TYPE,
    INIT_PREFIX,
    action_type,
    init_action_type,
    is_reserved,
)
from .errors import StoreError, DestroyedError, InvalidActionError, ReentrantDispatchError
from .reducer import ReducerManager, combine_reducers, create_reducer_manager
from .store import DynamicStore, create_dynamic_store

__all__ = [
    "Action",
    "INIT_ACTION_TYPE",
    "INIT_PREFIX",
    "action_type",
    "init_action_type",
    "is_reserved",
    "StoreError",
    "DestroyedError",
    "InvalidActionError",
    "ReentrantDispatchError",
    "ReducerManager",
    "combine_reducers",
    "create_reducer_manager",
    "DynamicStore",
    "create_dynamic_store",
]
