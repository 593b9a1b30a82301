"""
Replay runner: drive a store from a recorded action log.

Action logs are JSON lines, one action object per line:
    {"type": "counter/inc", "payload": 2}
"""

import importlib
import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, Optional

from .core.actions import Action, action_type, is_reserved
from .core.errors import InvalidActionError
from .core.store import DynamicStore
from .core.types import ReducerMap, State
from .logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ReplayResult:
    """
    Result of replay operation.

    Fields:
        state: Store state after the last applied action
        applied: Number of actions dispatched
        notifications: Listener calls observed during replay
        counts: Action type -> number of dispatches
    """
    state: State
    applied: int
    notifications: int = 0
    counts: Dict[str, int] = field(default_factory=dict)


def read_actions(path: str) -> Iterator[Action]:
    """
    Yield actions from a JSONL file, skipping blank lines.

    Raises:
        FileNotFoundError: If path does not exist
        InvalidActionError: If a line is not an object with a string type
    """
    with open(path, "r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                rec = json.loads(line)
            except json.JSONDecodeError as e:
                raise InvalidActionError(f"{path}:{lineno}: invalid JSON ({e.msg})") from e
            if not isinstance(rec, dict) or not isinstance(rec.get("type"), str):
                raise InvalidActionError(f"{path}:{lineno}: expected an object with a string type")
            if is_reserved(rec["type"]):
                logger.warning("%s:%d: replaying reserved action type %s", path, lineno, rec["type"])
            yield Action.from_dict(rec)


def replay(store: DynamicStore, actions: Iterable[Any], until: Optional[int] = None) -> ReplayResult:
    """
    Dispatch actions into store in order.

    Args:
        store: Target store
        actions: Actions (or action mappings) to dispatch
        until: Stop after this many actions (None = all)

    Returns:
        ReplayResult with final state and counts
    """
    notified = []
    unsubscribe = store.subscribe(lambda: notified.append(1))
    counts: Dict[str, int] = {}
    applied = 0
    try:
        for action in actions:
            if until is not None and applied >= until:
                break
            store.dispatch(action)
            applied += 1
            type_ = action_type(action)
            counts[type_] = counts.get(type_, 0) + 1
    finally:
        unsubscribe()

    return ReplayResult(state=store.get_state(), applied=applied, notifications=len(notified), counts=counts)


def load_reducers(spec: str) -> ReducerMap:
    """
    Import a reducer mapping from "package.module:attribute".

    The attribute may be the mapping itself or a zero-argument callable
    returning one.

    Raises:
        ValueError: If spec is malformed or does not resolve to a mapping
    """
    module_name, sep, attr = spec.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"Expected 'module:attribute', got {spec!r}")
    module = importlib.import_module(module_name)
    try:
        target = getattr(module, attr)
    except AttributeError as e:
        raise ValueError(f"{module_name} has no attribute {attr!r}") from e
    if callable(target) and not isinstance(target, dict):
        target = target()
    if not isinstance(target, dict):
        raise ValueError(f"{spec} is not a reducer mapping")
    return dict(target)
