"""Building blocks for a browser-based container playground: events, ids, settings, cookies, container requests, request helpers and websocket messaging."""

__version__ = "0.1.0"

__all__ = [
    "config",
    "container",
    "cors",
    "event",
    "genheader",
    "ids",
    "securecookie",
    "web",
    "wsocket",
]