"""Event-style messaging over a websocket connection."""

from __future__ import annotations

import json
import logging
import threading
import uuid
from collections import defaultdict
from typing import Any, Callable, Iterable

log = logging.getLogger(__name__)

Listener = Callable[..., None]
Spawner = Callable[..., None]

CLOSE_EVENT = "close"


def _spawn_thread(func: Callable[..., None], *args: Any) -> None:
    threading.Thread(target=func, args=args, daemon=True).start()


class Socket:
    """A websocket peer exchanging ``{"name": ..., "args": [...]}`` messages.

    ``send`` writes one text frame to the connection; any exception it
    raises closes the socket. Listener callbacks are run through ``spawn``,
    which by default starts a daemon thread per callback.
    """

    def __init__(
        self,
        send: Callable[[str], Any],
        request: Any = None,
        *,
        spawn: Spawner = _spawn_thread,
    ) -> None:
        self._send = send
        self._spawn = spawn
        self._lock = threading.RLock()
        self._listeners: dict[str, list[Listener]] = defaultdict(list)
        self.request = request
        self.id = str(uuid.uuid4())
        self.closed = False

    def on(self, event: str, callback: Listener) -> None:
        """Register ``callback`` to be called with the arguments of ``event``."""
        with self._lock:
            self._listeners[event].append(callback)

    def emit(self, event: str, *args: Any) -> None:
        """Send ``event`` with ``args`` to the peer, unless the socket is closed."""
        with self._lock:
            if self.closed:
                return
            try:
                text = json.dumps({"name": event, "args": list(args) if args else None})
            except (TypeError, ValueError) as exc:
                log.warning("Cannot marshal event to json. Got: %s", exc)
                return
            try:
                self._send(text)
            except Exception as exc:  # noqa: BLE001 - any write failure ends the socket
                log.warning("Cannot write event to websocket connection. Got: %s", exc)
                self.close()

    def handle_message(self, raw: str | bytes) -> bool:
        """Dispatch one received frame to its listeners.

        Returns ``False`` when the frame is not a text frame or not a valid
        message, ``True`` once it has been dispatched.
        """
        if not isinstance(raw, str):
            log.warning("Received websocket message, but it is not a text message.")
            return False
        try:
            decoded = json.loads(raw)
        except ValueError as exc:
            log.warning("Cannot unmarshal message received from websocket. Got: %s", exc)
            return False
        if not isinstance(decoded, dict):
            log.warning("Cannot unmarshal message received from websocket: not an object")
            return False
        name = decoded.get("name")
        args = decoded.get("args")
        if name is None:
            name = ""
        if args is None:
            args = []
        if not isinstance(name, str) or not isinstance(args, list):
            log.warning("Cannot unmarshal message received from websocket: bad field types")
            return False
        self._dispatch(name, args)
        return True

    def process(self, messages: Iterable[str | bytes]) -> None:
        """Handle every frame from ``messages``, then close the socket."""
        try:
            for raw in messages:
                self.handle_message(raw)
        finally:
            self.close()

    def close(self) -> None:
        """Mark the socket closed and notify the ``close`` listeners."""
        self.closed = True
        self._dispatch(CLOSE_EVENT, [])

    def _dispatch(self, name: str, args: list[Any]) -> None:
        with self._lock:
            callbacks = list(self._listeners.get(name, ()))
            for callback in callbacks:
                self._spawn(callback, *args)