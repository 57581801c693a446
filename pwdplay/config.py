"""Command-line configuration for the playground server."""

from __future__ import annotations

import os
import re
import sys
from dataclasses import dataclass, field
from typing import Any, Callable, NamedTuple, Sequence

from pwdplay.securecookie import SecureCookie

PWD_HOSTNAME_REGEX = "[0-9]{1,3}-[0-9]{1,3}-[0-9]{1,3}-[0-9]{1,3}"
PORT_REGEX = "[0-9]{1,5}"
ALIASNAME_REGEX = "[0-9|a-z|A-Z|-]*"
ALIAS_SESSION_REGEX = "[0-9|a-z|A-Z]{8}"
ALIAS_GROUP_REGEX = "(" + ALIASNAME_REGEX + ")-(" + ALIAS_SESSION_REGEX + ")"
PWD_HOST_PORT_GROUP_REGEX = (
    "^.*ip(" + PWD_HOSTNAME_REGEX + ")(?:-?(" + PORT_REGEX + "))?(?:\\..*)?$"
)
ALIAS_PORT_GROUP_REGEX = "^.*pwd" + ALIAS_GROUP_REGEX + "(?:-?(" + PORT_REGEX + "))?\\..*$"

NAME_FILTER = re.compile(PWD_HOST_PORT_GROUP_REGEX)
ALIAS_FILTER = re.compile(ALIAS_PORT_GROUP_REGEX)


class FlagError(ValueError):
    """Raised when the command line cannot be parsed."""


@dataclass
class Config:
    """Settings of a running playground server."""

    lets_encrypt_certs_dir: str = "/certs"
    use_lets_encrypt: bool = False
    force_tls: bool = False
    port_number: str = "3000"
    sessions_file: str = "./pwd/sessions"
    pwd_container_name: str = "pwd"
    l2_container_name: str = "l2"
    l2_router_ip: str = ""
    l2_subdomain: str = "direct"
    hash_key: str = "salmonrosado"
    no_windows: bool = False
    external_dind_volume: bool = False
    max_load_avg: float = 100.0
    ssh_key_path: str = ""
    cookie_hash_key: str = ""
    cookie_block_key: str = ""
    playground_domain: str = "localhost"
    admin_token: str = ""
    segment_id: str = ""
    unsafe: bool = False
    args: list[str] = field(default_factory=list)
    providers: dict[str, dict[str, Any]] = field(default_factory=dict)
    secure_cookie: SecureCookie = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.secure_cookie = SecureCookie(
            self.cookie_hash_key.encode(), self.cookie_block_key.encode()
        )


def _parse_bool(text: str) -> bool:
    if text in ("1", "t", "T", "true", "TRUE", "True"):
        return True
    if text in ("0", "f", "F", "false", "FALSE", "False"):
        return False
    raise ValueError(f"invalid boolean {text!r}")


def _parse_float(text: str) -> float:
    if "_" in text:
        raise ValueError(f"invalid number {text!r}")
    return float(text)


class _Flag(NamedTuple):
    attr: str
    convert: Callable[[str], Any]
    usage: str

    @property
    def is_bool(self) -> bool:
        return self.convert is _parse_bool


_FLAGS: dict[str, _Flag] = {
    "letsencrypt-certs-dir": _Flag("lets_encrypt_certs_dir", str, "Path where let's encrypt certs will be stored"),
    "letsencrypt-enable": _Flag("use_lets_encrypt", _parse_bool, "Enabled let's encrypt tls certificates"),
    "tls": _Flag("force_tls", _parse_bool, "Use TLS to connect to docker daemons"),
    "port": _Flag("port_number", str, "Port number"),
    "save": _Flag("sessions_file", str, "Tell where to store sessions file"),
    "name": _Flag("pwd_container_name", str, "Container name used to run PWD"),
    "l2": _Flag("l2_container_name", str, "Container name used to run L2 Router"),
    "l2-ip": _Flag("l2_router_ip", str, "Host IP address for L2 router ping response"),
    "l2-subdomain": _Flag("l2_subdomain", str, "Subdomain to the L2 Router"),
    "hash_key": _Flag("hash_key", str, "Hash key to use for cookies"),
    "win-disable": _Flag("no_windows", _parse_bool, "Disable windows instances"),
    "dind-external-volume": _Flag("external_dind_volume", _parse_bool, "Use external dind volume though XFS volume driver"),
    "maxload": _Flag("max_load_avg", _parse_float, "Maximum allowed load average before failing ping requests"),
    "ssh_key_path": _Flag("ssh_key_path", str, "SSH Private Key to use"),
    "cookie-hash-key": _Flag("cookie_hash_key", str, "Hash key to use to validate cookies"),
    "cookie-block-key": _Flag("cookie_block_key", str, "Block key to use to encrypt cookies"),
    "playground-domain": _Flag("playground_domain", str, "Domain to use for the playground"),
    "admin-token": _Flag("admin_token", str, "Token to validate admin user for admin endpoints"),
    "segment-id": _Flag("segment_id", str, "Segment id to post metrics"),
    "unsafe": _Flag("unsafe", _parse_bool, "Operate in unsafe mode"),
}


def _usage() -> str:
    return "\n".join(f"  -{name}\n    \t{flag.usage}" for name, flag in _FLAGS.items())


def parse_flags(argv: Sequence[str] | None = None) -> Config:
    """Parse command-line flags into a :class:`Config`.

    Flags take the form ``-name value``, ``-name=value`` or the same with a
    double dash; boolean flags may stand alone. Parsing stops at the first
    argument that is not a flag or after ``--``; what remains is kept in
    ``Config.args``.
    """
    remaining = list(sys.argv[1:] if argv is None else argv)
    values: dict[str, Any] = {"unsafe": os.environ.get("PWD_UNSAFE") == "true"}

    while remaining:
        arg = remaining[0]
        if len(arg) < 2 or not arg.startswith("-"):
            break
        remaining.pop(0)
        if arg == "--":
            break
        body = arg[2:] if arg.startswith("--") else arg[1:]
        if not body or body[0] in "-=":
            raise FlagError(f"bad flag syntax: {arg}")
        name, has_value, value = body.partition("=")
        flag = _FLAGS.get(name)
        if flag is None:
            if name in ("h", "help"):
                raise FlagError("flag: help requested\n" + _usage())
            raise FlagError(f"flag provided but not defined: -{name}")
        if flag.is_bool and not has_value:
            values[flag.attr] = True
            continue
        if not has_value:
            if not remaining:
                raise FlagError(f"flag needs an argument: -{name}")
            value = remaining.pop(0)
        try:
            values[flag.attr] = flag.convert(value)
        except ValueError as exc:
            raise FlagError(f"invalid value {value!r} for flag -{name}: {exc}") from exc

    return Config(args=remaining, **values)