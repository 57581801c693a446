"""Cross-origin policy for the session API endpoints."""

from __future__ import annotations

ALLOWED_HEADERS = ("x-requested-with", "content-type")
ALLOWED_METHODS = ("GET", "POST", "HEAD", "DELETE")
ALLOWED_ORIGIN_SUFFIXES = (
    "play-with-docker.com",
    "play-with-kubernetes.com",
    "docker.com",
    "play-with-go.dev",
)


def is_allowed_origin(origin: str) -> bool:
    """Tell whether a browser ``Origin`` may call the API with credentials.

    Any origin mentioning ``localhost`` is accepted, as is any origin ending
    in one of the known playground domains.
    """
    return "localhost" in origin or origin.endswith(ALLOWED_ORIGIN_SUFFIXES)