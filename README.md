# pwdplay

Building blocks for a browser-based container playground, where users open a
session in the browser, start container instances and drive their terminals
over a websocket. The package holds the parts of such a service that do not
need a running container engine: events, identifiers, command-line settings,
signed cookies, container request bodies, request helpers and websocket
messaging.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## What is inside

| Module | Contents |
| --- | --- |
| `pwdplay.event` | `EventType`, the events of sessions and instances; `LocalBroker`, an in-process broker with `on`, `on_any` and `emit`. |
| `pwdplay.ids` | `XIDGenerator.new_id()` returns 20-character, time-ordered unique identifiers. |
| `pwdplay.config` | `parse_flags(argv)` reads the server's command-line flags into a `Config`; `FlagError` reports a bad command line. |
| `pwdplay.securecookie` | `SecureCookie` signs (HMAC-SHA256) and, given a block key, encrypts (AES-CTR) JSON values with `encode` and `decode`; `CookieID` is the logged-in user's identity, turned into a `Set-Cookie` value by `set_cookie` and read back from a `Cookie` header by `read_cookie`. |
| `pwdplay.container` | Container-create bodies: `CreateContainerOpts`, `build_env`, `build_host_config`, `build_container_config`; single-file tar archives with `tar_single_file` and `extract_single_file`; reading engine answers with `published_ports`, `swarm_hosts_and_ports` and `container_ips`; `SwarmTokens` for swarm join tokens. |
| `pwdplay.web` | `get_parent_domain`, `get_docker_endpoint`, `format_stack`, `validate_token` (Basic authorization against an admin token) and `parse_duration` (text such as `"1h30m"` to a `timedelta`). |
| `pwdplay.cors` | `is_allowed_origin(origin)` decides which origins may make credentialed cross-site calls. |
| `pwdplay.wsocket` | `Socket` exchanges `{"name": ..., "args": [...]}` messages: `on` registers listeners, `emit` sends, `handle_message` dispatches one received frame, `process` handles a stream of frames, `close` fires the `close` listeners. |
| `pwdplay.genheader` | `add_generated_header(path, label)` puts a "DO NOT EDIT" comment at the top of a file. |

## Events

```python
from pwdplay.event import EventType, LocalBroker

broker = LocalBroker()
broker.on(EventType.INSTANCE_NEW, lambda session_id, *args: print(session_id, args))
broker.on_any(lambda event_type, session_id, *args: print(event_type, session_id))
broker.emit(EventType.INSTANCE_NEW, "session-1", "node1")
```

Each emitted event is delivered on a background thread, first to the
`on_any` handlers, then to the handlers of its type. `emit` does not wait.

## Configuration

```python
from pwdplay.config import parse_flags

config = parse_flags(["-port", "8080", "-tls", "-maxload=50"])
config.port_number   # "8080"
config.force_tls     # True
config.max_load_avg  # 50.0
```

Flags are written `-name value`, `-name=value` or with a double dash; boolean
flags may stand alone. `-unsafe` defaults to true when the environment
variable `PWD_UNSAFE` is `true`. `Config.secure_cookie` is built from
`-cookie-hash-key` and `-cookie-block-key`.

## Cookies

```python
from pwdplay.securecookie import CookieID, SecureCookie, read_cookie

hash_key = b"secret"
cookies = SecureCookie(hash_key)
header = CookieID(id="u1", user_name="alice").set_cookie(cookies, "labs.example.com")
user = read_cookie(header.split(";")[0], cookies)
user.user_name  # "alice"
```

A `SecureCookie` without a hash key refuses to encode or decode, and a block
key must be 16, 24 or 32 bytes long. Values older than 30 days are rejected.

## Request helpers

```python
from pwdplay.cors import is_allowed_origin
from pwdplay.web import format_stack, get_parent_domain, parse_duration

get_parent_domain("ip10-0-0-1.labs.example.com")  # "labs.example.com"
format_stack("/dockersamples/example-voting-app")  # URL of its stack.yml in the shared stacks repository
parse_duration("4h")                               # timedelta(hours=4)
is_allowed_origin("http://localhost:3000")         # True
```

## Marking generated files

```
pwdplay-genheader path/to/generated.go "generated by the asset builder"
```

This rewrites the file in place with the line
`// generated by the asset builder DO NOT EDIT` and a blank line in front of
its previous contents.

## What this package does not do

It does not run an HTTP or websocket server, hold sessions, instances or
users in storage, or talk to a container engine. `pwdplay.container` only
builds request bodies and reads answers that the caller obtained elsewhere,
and `Socket` writes through a `send` callable supplied by the caller. There
is no command that starts a playground; the only command is
`pwdplay-genheader`.