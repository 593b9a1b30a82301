"""
Topic-based publish/subscribe bus.

Independent of the store: topics are free-form strings unrelated to
reducer keys. Delivery is synchronous, in subscription order, over a
snapshot of the topic's listeners taken when publish() starts.
"""

from typing import Any, Callable, Dict, List

from .core.types import Unsubscribe

TopicListener = Callable[[Any], None]


class EventBus:
    """
    Usage:
        bus = EventBus()
        off = bus.subscribe("toast", lambda payload: ...)
        bus.publish("toast", {"text": "Hello"})
        off()
    """

    def __init__(self) -> None:
        self._topics: Dict[str, Dict[int, TopicListener]] = {}

    def subscribe(self, topic: str, listener: TopicListener) -> Unsubscribe:
        listeners = self._topics.setdefault(topic, {})
        listeners.setdefault(id(listener), listener)

        def unsubscribe() -> None:
            if listeners.get(id(listener)) is listener:
                del listeners[id(listener)]
            # a clear() may have detached this set already
            if not listeners and self._topics.get(topic) is listeners:
                del self._topics[topic]

        return unsubscribe

    def publish(self, topic: str, payload: Any = None) -> None:
        """Deliver payload to every listener of topic. No-op without listeners."""
        listeners = self._topics.get(topic)
        if not listeners:
            return
        for listener in list(listeners.values()):
            listener(payload)

    def clear(self) -> None:
        """Drop all topics and listeners."""
        self._topics.clear()

    def topics(self) -> List[str]:
        return list(self._topics)

    def listener_count(self, topic: str) -> int:
        return len(self._topics.get(topic, ()))


def create_event_bus() -> EventBus:
    return EventBus()
