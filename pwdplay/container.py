"""Request bodies and payload helpers for talking to instance Docker daemons."""

from __future__ import annotations

import io
import re
import tarfile
import time
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

BYTE = 1
KILOBYTE = 1024 * BYTE
MEGABYTE = 1024 * KILOBYTE

CONTAINER_DIR = "/opt/pwd"
CONTAINER_CERT_DIR = f"{CONTAINER_DIR}/certs"
DEFAULT_PIDS_LIMIT = 1000

_INTEGER = re.compile(r"[+-]?[0-9]+")


class CopyError(ValueError):
    """Raised when a copied archive cannot be turned into a single file."""


@dataclass
class SwarmTokens:
    """Join tokens of a freshly initialised swarm."""

    manager: str = ""
    worker: str = ""


@dataclass
class CreateContainerOpts:
    """Everything needed to create an instance container."""

    image: str = ""
    session_id: str = ""
    container_name: str = ""
    hostname: str = ""
    server_cert: bytes = b""
    server_key: bytes = b""
    ca_cert: bytes = b""
    privileged: bool = False
    host_fqdn: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    networks: list[str] = field(default_factory=list)
    dind_volume_size: str = ""
    envs: list[str] = field(default_factory=list)
    external_dind_volume: bool = False


def _atoi(text: str) -> int | None:
    if _INTEGER.fullmatch(text):
        return int(text)
    return None


def build_env(opts: CreateContainerOpts) -> list[str]:
    """Return the environment variables passed to an instance container."""
    env = [*opts.envs, f"SESSION_ID={opts.session_id}"]
    if opts.server_cert:
        env.append(r"DOCKER_TLSCERT=\/opt\/pwd\/certs\/cert.pem")
    if opts.server_key:
        env.append(r"DOCKER_TLSKEY=\/opt\/pwd\/certs\/key.pem")
    if opts.ca_cert:
        # Clients must then present a certificate signed by this CA.
        env.append(r"DOCKER_TLSCACERT=\/opt\/pwd\/certs\/ca.pem")
    if opts.server_cert or opts.server_key or opts.ca_cert:
        env.append("DOCKER_TLSENABLE=true")
    else:
        env.append("DOCKER_TLSENABLE=false")
    env.append(f"PWD_HOST_FQDN={opts.host_fqdn}")
    return env


def build_host_config(opts: CreateContainerOpts, environ: Mapping[str, str]) -> dict[str, Any]:
    """Return the ``HostConfig`` section for creating an instance container.

    ``environ`` supplies the optional ``APPARMOR_PROFILE``, ``STORAGE_SIZE``,
    ``MAX_PROCESSES`` and ``MAX_MEMORY_MB`` settings.
    """
    host: dict[str, Any] = {
        "NetworkMode": opts.session_id,
        "Privileged": opts.privileged,
        "AutoRemove": True,
        "LogConfig": {"Type": "", "Config": {"max-size": "10m", "max-file": "1"}},
    }

    apparmor = environ.get("APPARMOR_PROFILE", "")
    if apparmor:
        host["SecurityOpt"] = [f"apparmor={apparmor}"]

    storage_size = environ.get("STORAGE_SIZE", "")
    if storage_size:
        host["StorageOpt"] = {"size": storage_size}

    pids_limit = DEFAULT_PIDS_LIMIT
    max_processes = environ.get("MAX_PROCESSES", "")
    if max_processes:
        parsed = _atoi(max_processes)
        if parsed is not None:
            pids_limit = parsed
    host["PidsLimit"] = pids_limit

    max_memory = environ.get("MAX_MEMORY_MB", "")
    if max_memory:
        parsed = _atoi(max_memory)
        if parsed is not None:
            host["Memory"] = parsed * MEGABYTE

    host["OomKillDisable"] = True

    if opts.external_dind_volume:
        host["Binds"] = [f"{opts.container_name}:/var/lib/docker"]

    return host


def build_container_config(opts: CreateContainerOpts, environ: Mapping[str, str]) -> dict[str, Any]:
    """Return the full container-create body, host and network sections included."""
    if not opts.networks:
        raise ValueError("at least one network is required to create a container")
    return {
        "Hostname": opts.hostname,
        "Image": opts.image,
        "Tty": True,
        "OpenStdin": True,
        "AttachStdin": True,
        "AttachStdout": True,
        "AttachStderr": True,
        "Env": build_env(opts),
        "Labels": dict(opts.labels),
        "HostConfig": build_host_config(opts, environ),
        "NetworkingConfig": {"EndpointsConfig": {opts.networks[0]: {}}},
    }


def tar_single_file(file_name: str, content: bytes, mtime: float | None = None) -> bytes:
    """Pack ``content`` as a single mode-0600 file in a tar archive."""
    info = tarfile.TarInfo(name=file_name)
    info.mode = 0o600
    info.size = len(content)
    info.mtime = time.time() if mtime is None else mtime
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w", format=tarfile.USTAR_FORMAT) as archive:
        archive.addfile(info, io.BytesIO(content))
    return buffer.getvalue()


def extract_single_file(data: bytes) -> bytes:
    """Return the contents of the first entry of a tar archive.

    Raises :class:`CopyError` when that entry is a directory. An empty
    archive yields empty contents.
    """
    try:
        with tarfile.open(fileobj=io.BytesIO(data), mode="r:") as archive:
            member = archive.next()
            if member is None:
                return b""
            if member.isdir():
                raise CopyError("Copying directories is not supported")
            handle = archive.extractfile(member)
            return handle.read() if handle is not None else b""
    except tarfile.TarError as exc:
        raise CopyError(f"invalid archive: {exc}") from exc


def published_ports(containers: Iterable[Mapping[str, Any]]) -> list[int]:
    """Collect the host ports published by the listed containers.

    Unpublished ports are reported with a public port of 0 and are skipped.
    """
    return [
        port["PublicPort"]
        for container in containers
        for port in container.get("Ports") or ()
        if port.get("PublicPort", 0) != 0
    ]


def swarm_hosts_and_ports(
    nodes: Iterable[Mapping[str, Any]],
    services: Iterable[Mapping[str, Any]],
) -> tuple[list[str], list[int]]:
    """Return swarm node hostnames and the ports published by its services."""
    hosts = [node.get("Description", {}).get("Hostname", "") for node in nodes]
    ports = [
        int(port.get("PublishedPort", 0)) & 0xFFFF
        for service in services
        for port in (service.get("Endpoint") or {}).get("Ports") or ()
    ]
    return hosts, ports


def container_ips(inspect: Mapping[str, Any]) -> dict[str, str]:
    """Map each network of an inspected container to its IP address."""
    networks = (inspect.get("NetworkSettings") or {}).get("Networks") or {}
    return {name: conf.get("IPAddress", "") for name, conf in networks.items()}