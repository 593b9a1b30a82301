"""
Action model for store dispatch.

Actions are immutable records describing a requested state change.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

# Dispatched once when a store is constructed.
INIT_ACTION_TYPE = "@@dynamic-store/INIT"

# Prefix of the action dispatched when a reducer is attached.
INIT_PREFIX = "@@init/"


@dataclass(frozen=True)
class Action:
    """
    Immutable action record.

    Fields:
        type: Action type (e.g., "counter/inc")
        payload: Action-specific data
        meta: Metadata (source, correlation ids, etc.)
        error: True when payload describes a failure
    """
    type: str
    payload: Any = None
    meta: Dict[str, Any] = field(default_factory=dict)
    error: bool = False

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"type": self.type}
        if self.payload is not None:
            out["payload"] = self.payload
        if self.meta:
            out["meta"] = dict(self.meta)
        if self.error:
            out["error"] = True
        return out

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "Action":
        return Action(
            type=data.get("type"),
            payload=data.get("payload"),
            meta=dict(data.get("meta") or {}),
            error=bool(data.get("error", False)),
        )


def action_type(action: Any) -> Optional[Any]:
    """
    Read the type of an action.

    Mappings are read by key, anything else by attribute.

    Returns:
        The raw type value or None if the action has none
    """
    if isinstance(action, Mapping):
        return action.get("type")
    return getattr(action, "type", None)


def init_action_type(key: str) -> str:
    """Type of the synthetic action dispatched when `key` is attached."""
    return f"{INIT_PREFIX}{key}"


def is_reserved(type_: Any) -> bool:
    """True for types the store dispatches itself."""
    if not isinstance(type_, str):
        return False
    return type_ == INIT_ACTION_TYPE or type_.startswith(INIT_PREFIX)
