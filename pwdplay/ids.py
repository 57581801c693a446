"""Globally unique, time-ordered identifiers."""

from __future__ import annotations

import base64
import hashlib
import itertools
import os
import socket
import threading
import time
from typing import Protocol


class Generator(Protocol):
    """Anything that hands out new identifiers."""

    def new_id(self) -> str: ...


def _machine_id() -> bytes:
    hostname = socket.gethostname()
    if hostname:
        return hashlib.md5(hostname.encode()).digest()[:3]
    return os.urandom(3)


_MACHINE_ID = _machine_id()
_COUNTER = itertools.count(int.from_bytes(os.urandom(3), "big") + 1)
_COUNTER_LOCK = threading.Lock()


class XIDGenerator:
    """Produces 20-character xid identifiers.

    An id packs a 4-byte big-endian Unix timestamp, a 3-byte machine id,
    a 2-byte process id and a 3-byte counter, encoded as lower-case
    base32hex without padding.
    """

    def new_id(self) -> str:
        with _COUNTER_LOCK:
            counter = next(_COUNTER) & 0xFFFFFF
        raw = (
            (int(time.time()) & 0xFFFFFFFF).to_bytes(4, "big")
            + _MACHINE_ID
            + (os.getpid() & 0xFFFF).to_bytes(2, "big")
            + counter.to_bytes(3, "big")
        )
        return base64.b32hexencode(raw).decode("ascii").rstrip("=").lower()