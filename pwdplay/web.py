"""Request helpers shared by the session, login and playground endpoints."""

from __future__ import annotations

import base64
import binascii
import posixpath
import re
from datetime import timedelta
from fractions import Fraction

DEFAULT_DOCKER_ENDPOINT = "id.docker.com"
STACK_FILE_NAME = "stack.yml"
STACKS_BASE_URL = "https://raw.githubusercontent.com/play-with-docker/stacks/master"

_BASIC_PREFIX = "basic "

_NANOSECOND = 1
_MICROSECOND = 1000 * _NANOSECOND
_MILLISECOND = 1000 * _MICROSECOND
_SECOND = 1000 * _MILLISECOND
_MINUTE = 60 * _SECOND
_HOUR = 60 * _MINUTE

_UNITS = {
    "ns": _NANOSECOND,
    "us": _MICROSECOND,
    "\u00b5s": _MICROSECOND,
    "\u03bcs": _MICROSECOND,
    "ms": _MILLISECOND,
    "s": _SECOND,
    "m": _MINUTE,
    "h": _HOUR,
}
_MAX_NANOSECONDS = (1 << 63) - 1

_NUMBER = re.compile(r"([0-9]*)(?:\.([0-9]*))?")
_UNIT = re.compile(r"[^0-9.]*")


def get_parent_domain(host: str) -> str:
    """Return the parent domain of ``host`` when it has more than two labels.

    The cookie is then valid for every subdomain and sibling of the host.
    """
    levels = host.split(".")
    if len(levels) > 2:
        return ".".join(levels[1:])
    return host


def get_docker_endpoint(docker_host: str) -> str:
    """Return the Docker ID endpoint configured for a playground, or the default."""
    return docker_host if docker_host else DEFAULT_DOCKER_ENDPOINT


def _clean_path(path: str) -> str:
    cleaned = posixpath.normpath(path) if path else "."
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


def format_stack(stack: str) -> str:
    """Turn a user-supplied stack reference into the location of a stack file.

    A reference not ending in ``.yml`` names a directory holding
    ``stack.yml``; a reference starting with ``/`` points into the shared
    stacks repository.
    """
    if not stack.endswith(".yml"):
        stack = _clean_path(posixpath.join(stack, STACK_FILE_NAME) if stack else STACK_FILE_NAME)
    if stack.startswith("/"):
        stack = STACKS_BASE_URL + stack
    return stack


def validate_token(authorization: str | None, admin_token: str) -> bool:
    """Check that a Basic ``Authorization`` header carries the admin token as password."""
    if not authorization or len(authorization) < len(_BASIC_PREFIX):
        return False
    if authorization[: len(_BASIC_PREFIX)].lower() != _BASIC_PREFIX:
        return False
    try:
        decoded = base64.b64decode(authorization[len(_BASIC_PREFIX):], validate=True)
    except (binascii.Error, ValueError):
        return False
    credentials = decoded.decode("utf-8", errors="replace")
    _user, has_colon, supplied = credentials.partition(":")
    if not has_colon:
        return False
    return supplied == admin_token


def parse_duration(text: str) -> timedelta:
    """Parse a duration such as ``"4h"``, ``"1h30m"`` or ``"-1.5s"``.

    Accepted units are ``ns``, ``us`` (or ``µs``), ``ms``, ``s``, ``m`` and
    ``h``. Raises :class:`ValueError` for malformed or out-of-range input.
    Precision below a microsecond is truncated.
    """
    rest = text
    negative = False
    if rest and rest[0] in "+-":
        negative = rest[0] == "-"
        rest = rest[1:]
    if rest == "0":
        return timedelta(0)
    if not rest:
        raise ValueError(f"invalid duration {text!r}")

    total = 0
    pos = 0
    while pos < len(rest):
        number = _NUMBER.match(rest, pos)
        whole, fraction = number.group(1), number.group(2)
        if not whole and not fraction:
            raise ValueError(f"invalid duration {text!r}")
        pos = number.end()

        unit_match = _UNIT.match(rest, pos)
        unit = unit_match.group(0)
        if not unit:
            raise ValueError(f"missing unit in duration {text!r}")
        if unit not in _UNITS:
            raise ValueError(f"unknown unit {unit!r} in duration {text!r}")
        pos = unit_match.end()

        value = Fraction(int(whole or "0"))
        if fraction:
            value += Fraction(int(fraction), 10 ** len(fraction))
        total += int(value * _UNITS[unit])
        if total > _MAX_NANOSECONDS + 1:
            raise ValueError(f"invalid duration {text!r}")

    if not negative and total > _MAX_NANOSECONDS:
        raise ValueError(f"invalid duration {text!r}")

    result = timedelta(microseconds=total // _MICROSECOND)
    return -result if negative else result