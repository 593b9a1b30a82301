"""
Type aliases shared by the store, the reducer manager and the event bus.
"""

from typing import Any, Callable, Dict

# Slice key -> slice value. Replaced, never mutated, on every dispatch.
State = Dict[str, Any]

# Pure function: (previous slice value or None, action) -> next slice value
Reducer = Callable[[Any, Any], Any]

ReducerMap = Dict[str, Reducer]

Listener = Callable[[], None]

Unsubscribe = Callable[[], None]
