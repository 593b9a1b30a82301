"""
Reducer manager: runtime-editable mapping of slice reducers.

The manager owns the key -> reducer mapping and a combined reducer derived
from it. The combined reducer is rebuilt on every mapping change and is:
- Identity preserving (unchanged slices -> same state object back)
- Key preserving (slices without a reducer pass through untouched)
"""

from typing import Any, Mapping, Optional

from ..logging_config import get_logger
from .types import Reducer, ReducerMap, State

logger = get_logger(__name__)


def combine_reducers(reducers: Mapping[str, Reducer]) -> Reducer:
    """
    Merge per-slice reducers into one reducer over the whole state.

    Args:
        reducers: Slice key -> reducer. Captured as given; callers pass a
            mapping they no longer mutate.

    Returns:
        Function (state, action) -> state. Returns the input state object
        itself when no slice changed (compared by identity).
    """

    def combined(state: Optional[State], action: Any) -> State:
        if state is None:
            state = {}
        has_changed = False
        next_state: State = {}
        for key, reducer in reducers.items():
            previous = state.get(key)
            nxt = reducer(previous, action)
            next_state[key] = nxt
            has_changed = has_changed or nxt is not previous
        for key, value in state.items():
            if key not in reducers:
                next_state[key] = value
        return next_state if has_changed else state

    return combined


class ReducerManager:
    """
    Registry of slice reducers with a cached combined reducer.

    Usage:
        manager = ReducerManager({"todos": todos_reducer})
        manager.add("counter", counter_reducer)
        new_state = manager.reduce(state, action)

    Registration is first-wins: add() never overwrites an existing key.
    """

    def __init__(self, initial_reducers: Optional[Mapping[str, Reducer]] = None) -> None:
        self._reducers: ReducerMap = dict(initial_reducers or {})
        self._combined: Reducer = combine_reducers(self._reducers)

    def get_reducer_map(self) -> ReducerMap:
        """Return a copy of the current key -> reducer mapping."""
        return dict(self._reducers)

    def add(self, key: str, reducer: Reducer) -> bool:
        """
        Register reducer under key.

        No-op when key is empty or already registered.

        Returns:
            True if the mapping changed
        """
        if not key or key in self._reducers:
            return False
        reducers = dict(self._reducers)
        reducers[key] = reducer
        self._reducers = reducers
        self._combined = combine_reducers(reducers)
        logger.debug("Reducer added: %s", key)
        return True

    def remove(self, key: str) -> bool:
        """
        Deregister key.

        No-op when key is empty or not registered.

        Returns:
            True if the mapping changed
        """
        if not key or key not in self._reducers:
            return False
        reducers = {k: r for k, r in self._reducers.items() if k != key}
        self._reducers = reducers
        self._combined = combine_reducers(reducers)
        logger.debug("Reducer removed: %s", key)
        return True

    def reduce(self, state: Optional[State], action: Any) -> State:
        """Apply the combined reducer to (state, action)."""
        return self._combined(state, action)

    def __contains__(self, key: object) -> bool:
        return key in self._reducers

    def __len__(self) -> int:
        return len(self._reducers)


def create_reducer_manager(initial_reducers: Optional[Mapping[str, Reducer]] = None) -> ReducerManager:
    return ReducerManager(initial_reducers)
