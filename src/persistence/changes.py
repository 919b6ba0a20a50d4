"""Change feed: an opaque "something changed" signal that triggers a full snapshot reload."""

from typing import Callable

from src.utils.logger import get_logger

logger = get_logger("adherence.persistence.changes")

Listener = Callable[[], None]


class ChangeFeed:
    """Fan-out of change signals. No diff is carried; listeners reload everything."""

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, source: str = "external") -> int:
        """Notify every listener. A failing listener is logged and does not stop the others."""
        delivered = 0
        for listener in list(self._listeners):
            try:
                listener()
                delivered += 1
            except Exception:
                logger.exception("changes.listener_error", source=source)
        logger.info("changes.published", source=source, listeners=delivered)
        return delivered
