"""
Tests for the dynamic store.

Critical: Dispatch guards, listener snapshots and runtime reducer changes.
"""

from dataclasses import dataclass

import pytest

from dynstore.core.actions import Action, INIT_ACTION_TYPE, action_type
from dynstore.core.errors import DestroyedError, InvalidActionError, ReentrantDispatchError
from dynstore.core.store import DynamicStore, create_dynamic_store


def counter(state, action):
    state = 0 if state is None else state
    return state + 1 if action_type(action) == "inc" else state


def recorder(seen):
    def reducer(state, action):
        seen.append(action_type(action))
        return state

    return reducer


def test_counter_scenario():
    """Attach, dispatch twice, detach."""
    store = create_dynamic_store({}, {})
    store.add_reducer("counter", counter)

    store.dispatch({"type": "inc"})
    assert store.get_state() == {"counter": 1}

    store.dispatch({"type": "inc"})
    assert store.get_state() == {"counter": 2}

    store.remove_reducer("counter")
    assert store.get_state() == {}


def test_construction_dispatches_init():
    """Initial reducers see the INIT action before any user action."""
    seen = []
    DynamicStore({}, {"rec": recorder(seen)})

    assert seen == [INIT_ACTION_TYPE]


def test_preloaded_state_is_copied_and_reduced():
    """Preloaded slices feed the reducers; the caller's dict is not kept."""
    preloaded = {"counter": 5, "extra": "kept"}
    store = DynamicStore(preloaded, {"counter": counter})

    preloaded["counter"] = 100

    assert store.get_state() == {"counter": 5, "extra": "kept"}


def test_unchanged_dispatch_keeps_state_identity():
    """Dispatch that changes nothing leaves the same state object."""
    store = DynamicStore({}, {"counter": counter})
    before = store.get_state()

    store.dispatch({"type": "noop"})

    assert store.get_state() is before


def test_dispatch_accepts_action_instances():
    """Action dataclasses work like mappings."""
    store = DynamicStore()
    store.add_reducer("last", lambda s, a: a.type if isinstance(a, Action) else s)

    store.dispatch(Action("hello", payload=1))

    assert store.get_state() == {"last": "hello"}


def test_dispatch_always_notifies():
    """Listeners run even when state did not change."""
    store = DynamicStore()
    calls = []
    store.subscribe(lambda: calls.append(1))

    store.dispatch({"type": "noop"})

    assert calls == [1]


@pytest.mark.parametrize("action", [{}, {"type": 1}, {"type": None}, None, object(), Action(type=None)])
def test_dispatch_rejects_non_string_type(action):
    """Missing or non-string type raises InvalidActionError."""
    store = DynamicStore()

    with pytest.raises(InvalidActionError):
        store.dispatch(action)


def test_invalid_action_does_not_notify():
    """Validation happens before reduction and notification."""
    store = DynamicStore()
    calls = []
    store.subscribe(lambda: calls.append(1))

    with pytest.raises(InvalidActionError):
        store.dispatch({"type": 42})

    assert calls == []


def test_reducer_dispatch_is_rejected_and_guard_restored():
    """A reducer calling dispatch fails; the next dispatch succeeds."""
    store = DynamicStore()

    def sneaky(state, action):
        if action_type(action) == "trigger":
            store.dispatch({"type": "nested"})
        return state

    store.add_reducer("sneaky", sneaky)

    with pytest.raises(ReentrantDispatchError):
        store.dispatch({"type": "trigger"})

    store.dispatch({"type": "other"})


def test_reducer_error_restores_guard_and_keeps_state():
    """A raising reducer propagates; state and guard are left consistent."""
    store = DynamicStore()
    store.add_reducer("counter", counter)
    store.dispatch({"type": "inc"})

    def boom(state, action):
        if action_type(action) == "explode":
            raise RuntimeError("boom")
        return state

    store.add_reducer("boom", boom)
    before = store.get_state()

    with pytest.raises(RuntimeError, match="boom"):
        store.dispatch({"type": "explode"})

    assert store.get_state() is before
    store.dispatch({"type": "inc"})
    assert store.get_state()["counter"] == 2


def test_listener_may_dispatch():
    """Listeners run after the guard is released."""
    store = DynamicStore({}, {"counter": counter})
    fired = []

    def listener():
        if not fired:
            fired.append(1)
            store.dispatch({"type": "inc"})

    store.subscribe(listener)
    store.dispatch({"type": "inc"})

    assert store.get_state() == {"counter": 2}


def test_listener_error_propagates():
    """A raising listener aborts the pass and reaches the caller."""
    store = DynamicStore()
    calls = []

    def bad():
        raise ValueError("listener failed")

    store.subscribe(bad)
    store.subscribe(lambda: calls.append(1))

    with pytest.raises(ValueError, match="listener failed"):
        store.dispatch({"type": "x"})

    assert calls == []


def test_unsubscribe_removes_only_that_listener():
    """Unsubscribe is per listener and idempotent."""
    store = DynamicStore()
    a, b = [], []
    off_a = store.subscribe(lambda: a.append(1))
    store.subscribe(lambda: b.append(1))

    off_a()
    off_a()
    store.dispatch({"type": "x"})

    assert a == []
    assert b == [1]


def test_duplicate_subscribe_registers_once():
    """The same callable is stored once."""
    store = DynamicStore()
    calls = []

    def listener():
        calls.append(1)

    store.subscribe(listener)
    store.subscribe(listener)
    store.dispatch({"type": "x"})

    assert calls == [1]


def test_subscribe_rejects_non_callable():
    store = DynamicStore()

    with pytest.raises(TypeError):
        store.subscribe("not callable")


def test_notification_uses_snapshot():
    """(Un)subscribing during notification only affects later passes."""
    store = DynamicStore()
    log = []

    def late():
        log.append("late")

    def second():
        log.append("second")

    def first():
        log.append("first")
        store.subscribe(late)
        off_second()

    store.subscribe(first)
    off_second = store.subscribe(second)

    store.dispatch({"type": "x"})
    assert log == ["first", "second"]

    log.clear()
    store.dispatch({"type": "y"})
    assert log == ["first", "late"]


def test_add_reducer_dispatches_init_for_key():
    """Attaching a reducer runs "@@init/<key>" and notifies listeners."""
    seen = []
    store = DynamicStore()
    calls = []
    store.subscribe(lambda: calls.append(1))

    store.add_reducer("rec", recorder(seen))

    assert seen == ["@@init/rec"]
    assert calls == [1]


def test_add_reducer_normalizes_key():
    """Non-string keys are stored as strings."""
    store = DynamicStore()

    store.add_reducer(7, counter)

    assert store.get_state() == {"7": 0}
    assert list(store.get_reducer_map()) == ["7"]


def test_add_reducer_keeps_first_registration():
    """Re-adding a key keeps the original reducer but still re-initializes."""
    store = DynamicStore()
    store.add_reducer("counter", counter)

    store.add_reducer("counter", lambda s, a: "replaced")

    assert store.get_reducer_map()["counter"] is counter
    assert store.get_state() == {"counter": 0}


def test_add_reducer_rejects_non_callable():
    store = DynamicStore()

    with pytest.raises(TypeError):
        store.add_reducer("x", None)


def test_add_then_remove_is_symmetric():
    """add_reducer + remove_reducer leaves no trace of the key."""
    store = DynamicStore()

    store.add_reducer("x", counter)
    store.remove_reducer("x")

    assert "x" not in store.get_state()
    assert "x" not in store.get_reducer_map()


def test_remove_reducer_notifies_without_reducer_pass():
    """Removal is structural: listeners run, reducers do not."""
    seen = []
    store = DynamicStore({}, {"rec": recorder(seen), "counter": counter})
    calls = []
    store.subscribe(lambda: calls.append(1))
    seen.clear()

    store.remove_reducer("counter")

    assert seen == []
    assert calls == [1]
    assert store.get_state() == {"rec": None}


def test_remove_reducer_creates_new_state_object():
    """The previous state object is not mutated."""
    store = DynamicStore({}, {"counter": counter})
    before = store.get_state()

    store.remove_reducer("counter")

    assert before == {"counter": 0}
    assert store.get_state() == {}


def test_remove_untracked_key_is_silent():
    """Unknown keys are ignored without notification."""
    store = DynamicStore()
    calls = []
    store.subscribe(lambda: calls.append(1))

    store.remove_reducer("missing")

    assert calls == []


def test_remove_reducer_drops_preloaded_orphan_slice():
    """A slice present in state is dropped even without a reducer."""
    store = DynamicStore({"legacy": 1})
    calls = []
    store.subscribe(lambda: calls.append(1))

    store.remove_reducer("legacy")

    assert store.get_state() == {}
    assert calls == [1]


def test_replace_reducers():
    """Missing keys are removed, all new keys (re-)added and initialized."""
    seen = []

    def r_a(state, action):
        seen.append(("a", action_type(action)))
        return "A" if state is None else state

    def r_b(state, action):
        return "B" if state is None else state

    def r_c(state, action):
        return "C" if state is None else state

    store = DynamicStore({}, {"a": r_a, "c": r_c})
    assert store.get_state() == {"a": "A", "c": "C"}
    seen.clear()

    store.replace_reducers({"a": r_a, "b": r_b})

    assert store.get_reducer_map() == {"a": r_a, "b": r_b}
    assert store.get_state() == {"a": "A", "b": "B"}
    assert ("a", "@@init/a") in seen
    assert ("a", "@@init/b") in seen


def test_replace_reducers_notifies_for_each_step():
    """One notification per removal and per (re-)add."""
    store = DynamicStore({}, {"a": counter, "c": counter})
    calls = []
    store.subscribe(lambda: calls.append(1))

    store.replace_reducers({"a": counter, "b": counter})

    # remove c, add a, add b
    assert len(calls) == 3


def test_destroy_is_final():
    """Every operation raises DestroyedError after destroy()."""
    store = DynamicStore({}, {"counter": counter})
    store.destroy()

    assert store.destroyed is True
    with pytest.raises(DestroyedError):
        store.get_state()
    with pytest.raises(DestroyedError):
        store.dispatch({"type": "inc"})
    with pytest.raises(DestroyedError):
        store.subscribe(lambda: None)
    with pytest.raises(DestroyedError):
        store.add_reducer("x", counter)
    with pytest.raises(DestroyedError):
        store.remove_reducer("counter")
    with pytest.raises(DestroyedError):
        store.replace_reducers({})
    with pytest.raises(DestroyedError):
        store.get_reducer_map()


def test_destroy_is_idempotent_and_drops_listeners():
    """Second destroy() is a no-op; listeners are never called again."""
    store = DynamicStore()
    calls = []
    off = store.subscribe(lambda: calls.append(1))

    store.destroy()
    store.destroy()
    off()

    assert calls == []


def test_invalid_action_checked_after_destroyed():
    """Destroyed takes precedence over validation."""
    store = DynamicStore()
    store.destroy()

    with pytest.raises(DestroyedError, match="destroyed"):
        store.dispatch({"type": 1})


def test_remove_reducer_normalizes_key():
    """Removing by the same non-string key undoes add_reducer."""
    store = DynamicStore()

    store.add_reducer(7, counter)
    store.remove_reducer(7)

    assert store.get_state() == {}
    assert store.get_reducer_map() == {}


@dataclass
class CountingListener:
    """Callable with dataclass equality, hence unhashable."""

    calls: int = 0

    def __call__(self):
        self.calls += 1


def test_unhashable_listener_is_accepted():
    """Listeners are keyed by identity, not hash or equality."""
    store = DynamicStore()
    a, b = CountingListener(), CountingListener()
    off_a = store.subscribe(a)
    store.subscribe(a)
    store.subscribe(b)

    store.dispatch({"type": "x"})
    off_a()
    store.dispatch({"type": "y"})

    assert a.calls == 1
    assert b.calls == 2
