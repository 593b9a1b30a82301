"""
Dynamic store: state holder whose reducers can change at runtime.

The store owns the current state, the listener set and a ReducerManager.
Every state change funnels through dispatch(), except removal of a slice,
which is structural and bypasses the reducers.

Lifecycle is one-way: Active -> Destroyed. After destroy() every operation
except destroy() itself raises DestroyedError.

Not thread-safe. Callers sharing a store across threads must lock around it.
"""

from typing import Any, Dict, List, Mapping, Optional

from ..logging_config import get_logger
from .actions import INIT_ACTION_TYPE, Action, action_type, init_action_type
from .errors import DestroyedError, InvalidActionError, ReentrantDispatchError
from .reducer import ReducerManager
from .types import Listener, Reducer, ReducerMap, State, Unsubscribe


class DynamicStore:
    """
    State container with runtime-attachable reducers.

    Usage:
        store = DynamicStore()
        store.add_reducer("counter", counter_reducer)
        store.dispatch({"type": "inc"})
        store.get_state()  # {"counter": 1}

    Reducers must be pure and must not mutate the state they receive: a
    reducer that raises leaves the previous state in place, with no rollback
    of anything it touched.
    """

    def __init__(
        self,
        preloaded_state: Optional[Mapping[str, Any]] = None,
        initial_reducers: Optional[Mapping[str, Reducer]] = None,
        *,
        name: Optional[str] = None,
    ) -> None:
        self._manager = ReducerManager(initial_reducers)
        self._state: State = dict(preloaded_state or {})
        self._is_dispatching = False
        # id(listener) -> listener: identity-deduplicated, insertion-ordered
        self._listeners: Dict[int, Listener] = {}
        self._destroyed = False
        self._logger = get_logger(__name__, trace_id=name)

        self.dispatch(Action(INIT_ACTION_TYPE))

    def _assert_not_destroyed(self) -> None:
        if self._destroyed:
            raise DestroyedError("Store has been destroyed")

    def _notify(self) -> None:
        for listener in list(self._listeners.values()):
            listener()

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    @property
    def reducer_manager(self) -> ReducerManager:
        return self._manager

    def get_state(self) -> State:
        """Return the current state object (do not mutate it)."""
        self._assert_not_destroyed()
        return self._state

    def get_reducer_map(self) -> ReducerMap:
        self._assert_not_destroyed()
        return self._manager.get_reducer_map()

    def subscribe(self, listener: Listener) -> Unsubscribe:
        """
        Register a zero-argument callback run after every dispatch.

        Subscribing the same callable object twice registers it once.

        Returns:
            Function removing this listener. Safe to call more than once.

        Raises:
            DestroyedError: If the store was destroyed
            TypeError: If listener is not callable
        """
        self._assert_not_destroyed()
        if not callable(listener):
            raise TypeError("Listener must be callable")
        self._listeners.setdefault(id(listener), listener)

        def unsubscribe() -> None:
            if self._listeners.get(id(listener)) is listener:
                del self._listeners[id(listener)]

        return unsubscribe

    def dispatch(self, action: Any) -> None:
        """
        Run action through the reducers, then notify listeners.

        Listeners are notified even when no slice changed. The listener set
        is snapshotted first, so (un)subscribing from a listener only
        affects later dispatches. A raising listener aborts the rest of the
        pass and the exception reaches the caller. Listeners run after the
        dispatch guard is released and may dispatch themselves.

        Args:
            action: Action instance or mapping with a string "type"

        Raises:
            DestroyedError: If the store was destroyed
            InvalidActionError: If the action type is not a string
            ReentrantDispatchError: If called from inside a reducer
        """
        self._assert_not_destroyed()
        if not isinstance(action_type(action), str):
            raise InvalidActionError("Action must be an object with a string type")
        if self._is_dispatching:
            raise ReentrantDispatchError("Reducers may not dispatch actions")

        try:
            self._is_dispatching = True
            self._state = self._manager.reduce(self._state, action)
        finally:
            self._is_dispatching = False

        self._notify()

    def add_reducer(self, key: Any, reducer: Reducer) -> None:
        """
        Attach reducer under key and initialize its slice.

        Dispatches "@@init/<key>" even when key was already registered, in
        which case the existing reducer is kept.

        Raises:
            DestroyedError: If the store was destroyed
            TypeError: If reducer is not callable
        """
        self._assert_not_destroyed()
        if not callable(reducer):
            raise TypeError("Reducer must be callable")
        key = str(key)
        if self._manager.add(key, reducer):
            self._logger.debug("Attached reducer %s", key)
        self.dispatch(Action(init_action_type(key)))

    def remove_reducer(self, key: str) -> None:
        """
        Detach the reducer under key and drop its slice from state.

        Listeners are notified only if a slice was actually dropped; no
        reducer runs.

        Raises:
            DestroyedError: If the store was destroyed
        """
        self._assert_not_destroyed()
        key = str(key)
        if self._manager.remove(key):
            self._logger.debug("Detached reducer %s", key)
        if key in self._state:
            self._state = {k: v for k, v in self._state.items() if k != key}
            self._notify()

    def replace_reducers(self, reducers: Mapping[str, Reducer]) -> None:
        """
        Make the registered keys match reducers.

        Keys missing from reducers are removed (dropping their slices), then
        every key in reducers is added, so keys present on both sides are
        re-initialized with an "@@init/<key>" dispatch.

        Raises:
            DestroyedError: If the store was destroyed
        """
        self._assert_not_destroyed()
        keys: List[str] = list(reducers)
        for existing in self._manager.get_reducer_map():
            if existing not in reducers:
                self.remove_reducer(existing)
        for key in keys:
            self.add_reducer(key, reducers[key])
        self._logger.debug("Replaced reducers: %s", ", ".join(map(str, keys)))

    def destroy(self) -> None:
        """Drop listeners and state. Idempotent."""
        if self._destroyed:
            return
        self._destroyed = True
        self._listeners.clear()
        self._state = {}
        self._logger.debug("Store destroyed")


def create_dynamic_store(
    preloaded_state: Optional[Mapping[str, Any]] = None,
    initial_reducers: Optional[Mapping[str, Reducer]] = None,
    *,
    name: Optional[str] = None,
) -> DynamicStore:
    return DynamicStore(preloaded_state, initial_reducers, name=name)
