"""In-process event broker for session and instance notifications."""

from __future__ import annotations

import threading
from collections import defaultdict
from enum import Enum
from typing import Any, Callable

Handler = Callable[..., None]
"""Called as ``handler(session_id, *args)``."""

AnyHandler = Callable[..., None]
"""Called as ``handler(event_type, session_id, *args)``."""


class EventType(str, Enum):
    """Kinds of events published by the playground core."""

    INSTANCE_VIEWPORT_RESIZE = "instance viewport resize"
    INSTANCE_DELETE = "instance delete"
    INSTANCE_NEW = "instance new"
    INSTANCE_STATS = "instance stats"
    SESSION_NEW = "session new"
    SESSION_END = "session end"
    SESSION_READY = "session ready"
    SESSION_BUILDER_OUT = "session builder out"
    PLAYGROUND_NEW = "playground_new"

    def __str__(self) -> str:
        return self.value


class LocalBroker:
    """Dispatches events to registered handlers on a background thread.

    Each emitted event is delivered asynchronously: first to every handler
    registered with :meth:`on_any`, then to the handlers registered for the
    event's type, in registration order.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._handlers: dict[EventType, list[Handler]] = defaultdict(list)
        self._any_handlers: list[AnyHandler] = []

    def on(self, name: EventType | str, handler: Handler) -> None:
        """Register ``handler`` for events of type ``name``."""
        with self._lock:
            self._handlers[EventType(name)].append(handler)

    def on_any(self, handler: AnyHandler) -> None:
        """Register ``handler`` for every event type."""
        with self._lock:
            self._any_handlers.append(handler)

    def emit(self, name: EventType | str, session_id: str, *args: Any) -> None:
        """Publish an event without waiting for the handlers to run."""
        event_type = EventType(name)
        worker = threading.Thread(
            target=self._dispatch,
            args=(event_type, session_id, args),
            daemon=True,
        )
        worker.start()

    def _dispatch(self, event_type: EventType, session_id: str, args: tuple) -> None:
        with self._lock:
            for any_handler in list(self._any_handlers):
                any_handler(event_type, session_id, *args)
            for handler in list(self._handlers.get(event_type, ())):
                handler(session_id, *args)