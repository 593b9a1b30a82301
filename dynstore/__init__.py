"""
Dynamic Store

In-process state container with runtime-attachable reducers, plus a
topic-based publish/subscribe bus.
"""

__version__ = "0.1.0"

from .core import (
    Action,
    DynamicStore,
    ReducerManager,
    StoreError,
    DestroyedError,
    InvalidActionError,
    ReentrantDispatchError,
    combine_reducers,
    create_dynamic_store,
    create_reducer_manager,
)
from .bus import EventBus, create_event_bus
from .namespace import namespace_actions

__all__ = [
    "Action",
    "DynamicStore",
    "ReducerManager",
    "EventBus",
    "StoreError",
    "DestroyedError",
    "InvalidActionError",
    "ReentrantDispatchError",
    "combine_reducers",
    "create_dynamic_store",
    "create_reducer_manager",
    "create_event_bus",
    "namespace_actions",
]
