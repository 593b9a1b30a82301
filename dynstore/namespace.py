"""
Namespaced action creators.

Prefixes the type of every action a creator returns with "<namespace>/",
so features loaded side by side cannot collide on action types.
"""

import copy
import dataclasses
import functools
from typing import Any, Callable, Dict, Mapping

from .core.actions import action_type
from .core.errors import InvalidActionError

ActionCreator = Callable[..., Any]


def _prefixed(namespace: str, action: Any) -> Any:
    type_ = action_type(action)
    if not isinstance(type_, str):
        raise InvalidActionError(f"Action creator returned {action!r}, expected an action with a string type")
    prefixed = f"{namespace}/{type_}"
    if isinstance(action, Mapping):
        out = dict(action)
        out["type"] = prefixed
        return out
    if dataclasses.is_dataclass(action):
        return dataclasses.replace(action, type=prefixed)
    out = copy.copy(action)
    out.type = prefixed
    return out


def namespace_actions(namespace: str) -> Callable[[Mapping[str, ActionCreator]], Dict[str, ActionCreator]]:
    """
    Build a wrapper that namespaces a mapping of action creators.

    Example:
        todos = namespace_actions("todos")({"add": lambda text: Action("add", text)})
        todos["add"]("milk")  # Action(type="todos/add", payload="milk")

    Args:
        namespace: Prefix placed before "/" in every produced type

    Returns:
        wrap(creators) -> new mapping with the same keys. Each wrapped
        creator takes the original's arguments and keeps every other
        action field.
    """

    def wrap(creators: Mapping[str, ActionCreator]) -> Dict[str, ActionCreator]:
        wrapped: Dict[str, ActionCreator] = {}
        for key, creator in creators.items():

            def make(orig: ActionCreator) -> ActionCreator:
                @functools.wraps(orig)
                def namespaced(*args: Any, **kwargs: Any) -> Any:
                    return _prefixed(namespace, orig(*args, **kwargs))

                return namespaced

            wrapped[key] = make(creator)
        return wrapped

    return wrap
