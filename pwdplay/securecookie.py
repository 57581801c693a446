"""Authenticated, optionally encrypted cookie values and the user id cookie."""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import ipaddress
import json
import os
import re
import time
from dataclasses import asdict, dataclass
from typing import Any, Callable

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

COOKIE_NAME = "id"
_AES_BLOCK = 16
_DOMAIN_RE = re.compile(r"^[A-Za-z0-9_]([A-Za-z0-9_-]*[A-Za-z0-9_])?(\.[A-Za-z0-9_]([A-Za-z0-9_-]*[A-Za-z0-9_])?)*$")


class SecureCookieError(ValueError):
    """Raised when a value cannot be encoded or fails verification."""


class MissingCookieError(LookupError):
    """Raised when the requested cookie is not in the request."""


def _b64encode(data: bytes) -> bytes:
    return base64.urlsafe_b64encode(data)


def _b64decode(data: bytes) -> bytes:
    try:
        return base64.b64decode(data, altchars=b"-_", validate=True)
    except (binascii.Error, ValueError) as exc:
        raise SecureCookieError("the value could not be decoded") from exc


class SecureCookie:
    """Encodes values as HMAC-SHA256 signed, timestamped strings.

    With a block key the serialized value is also encrypted with AES-CTR.
    Values are serialized as JSON.
    """

    def __init__(
        self,
        hash_key: bytes,
        block_key: bytes | None = None,
        *,
        max_age: int = 86400 * 30,
        min_age: int = 0,
        max_length: int = 4096,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._hash_key = bytes(hash_key)
        self._block_key = bytes(block_key or b"")
        self._max_age = max_age
        self._min_age = min_age
        self._max_length = max_length
        self._clock = clock

    def _check_keys(self) -> None:
        if not self._hash_key:
            raise SecureCookieError("hash key is not set")
        if self._block_key and len(self._block_key) not in (16, 24, 32):
            raise SecureCookieError(f"invalid AES key size {len(self._block_key)}")

    def _mac(self, message: bytes) -> bytes:
        return hmac.new(self._hash_key, message, hashlib.sha256).digest()

    def _encrypt(self, data: bytes) -> bytes:
        iv = os.urandom(_AES_BLOCK)
        encryptor = Cipher(algorithms.AES(self._block_key), modes.CTR(iv)).encryptor()
        return iv + encryptor.update(data) + encryptor.finalize()

    def _decrypt(self, data: bytes) -> bytes:
        if len(data) <= _AES_BLOCK:
            raise SecureCookieError("the value could not be decrypted")
        iv, body = data[:_AES_BLOCK], data[_AES_BLOCK:]
        decryptor = Cipher(algorithms.AES(self._block_key), modes.CTR(iv)).decryptor()
        return decryptor.update(body) + decryptor.finalize()

    def encode(self, name: str, value: Any) -> str:
        """Serialize, sign and (if configured) encrypt ``value`` under ``name``."""
        self._check_keys()
        data = json.dumps(value, separators=(",", ":")).encode()
        if self._block_key:
            data = self._encrypt(data)
        data = _b64encode(data)
        prefix = f"{name}|{int(self._clock())}|".encode()
        signed = prefix + data
        payload = signed[len(name) + 1:] + b"|" + self._mac(signed)
        encoded = _b64encode(payload).decode("ascii")
        if self._max_length and len(encoded) > self._max_length:
            raise SecureCookieError("the value is too long")
        return encoded

    def decode(self, name: str, value: str) -> Any:
        """Verify and decode a value produced by :meth:`encode`."""
        self._check_keys()
        if self._max_length and len(value) > self._max_length:
            raise SecureCookieError("the value is too long")
        try:
            raw = _b64decode(value.encode("ascii"))
        except UnicodeEncodeError as exc:
            raise SecureCookieError("the value could not be decoded") from exc
        parts = raw.split(b"|", 2)
        if len(parts) != 3:
            raise SecureCookieError("the value is not valid")
        stamp, body, mac = parts
        expected = self._mac(name.encode() + b"|" + stamp + b"|" + body)
        if not hmac.compare_digest(mac, expected):
            raise SecureCookieError("the value is not valid")
        try:
            issued = int(stamp)
        except ValueError as exc:
            raise SecureCookieError("invalid timestamp") from exc
        now = int(self._clock())
        if self._min_age and issued > now - self._min_age:
            raise SecureCookieError("timestamp is too new")
        if self._max_age and issued < now - self._max_age:
            raise SecureCookieError("expired timestamp")
        data = _b64decode(body)
        if self._block_key:
            data = self._decrypt(data)
        try:
            return json.loads(data)
        except (UnicodeDecodeError, ValueError) as exc:
            raise SecureCookieError("the value could not be deserialized") from exc


def _valid_cookie_domain(domain: str) -> bool:
    if not domain or len(domain) > 255:
        return False
    try:
        ipaddress.ip_address(domain)
        return True
    except ValueError:
        return bool(_DOMAIN_RE.match(domain))


@dataclass
class CookieID:
    """Identity of a logged-in user as stored in the ``id`` cookie."""

    id: str = ""
    user_name: str = ""
    user_avatar: str = ""
    provider_id: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CookieID:
        return cls(
            id=str(data.get("id", "")),
            user_name=str(data.get("user_name", "")),
            user_avatar=str(data.get("user_avatar", "")),
            provider_id=str(data.get("provider_id", "")),
        )

    def set_cookie(self, secure_cookie: SecureCookie, host: str) -> str:
        """Return the ``Set-Cookie`` header value carrying this identity."""
        encoded = secure_cookie.encode(COOKIE_NAME, asdict(self))
        parts = [f"{COOKIE_NAME}={encoded}", "Path=/"]
        domain = host[1:] if host.startswith(".") else host
        if _valid_cookie_domain(domain):
            parts.append(f"Domain={domain}")
        parts.append("HttpOnly")
        return "; ".join(parts)


def read_cookie(cookie_header: str, secure_cookie: SecureCookie) -> CookieID:
    """Find and decode the ``id`` cookie in a ``Cookie`` request header."""
    for chunk in cookie_header.split(";"):
        name, has_value, value = chunk.strip().partition("=")
        if not has_value or name.strip() != COOKIE_NAME:
            continue
        value = value.strip()
        if len(value) > 1 and value.startswith('"') and value.endswith('"'):
            value = value[1:-1]
        decoded = secure_cookie.decode(COOKIE_NAME, value)
        if not isinstance(decoded, dict):
            raise SecureCookieError("the value is not valid")
        return CookieID.from_dict(decoded)
    raise MissingCookieError("named cookie not present")