import pytest

from pwdplay.config import ALIAS_FILTER, NAME_FILTER, Config, FlagError, parse_flags
from pwdplay.securecookie import SecureCookieError


def test_defaults(monkeypatch):
    monkeypatch.delenv("PWD_UNSAFE", raising=False)
    cfg = parse_flags([])
    assert cfg.port_number == "3000"
    assert cfg.sessions_file == "./pwd/sessions"
    assert cfg.hash_key == "salmonrosado"
    assert cfg.lets_encrypt_certs_dir == "/certs"
    assert cfg.l2_subdomain == "direct"
    assert cfg.max_load_avg == 100.0
    assert cfg.playground_domain == "localhost"
    assert cfg.unsafe is False
    assert cfg.force_tls is False


def test_string_flag_forms():
    assert parse_flags(["-port", "8080"]).port_number == "8080"
    assert parse_flags(["--port=8080"]).port_number == "8080"
    assert parse_flags(["-l2-subdomain=x"]).l2_subdomain == "x"


def test_bool_flags():
    assert parse_flags(["-tls"]).force_tls is True
    assert parse_flags(["-tls=false"]).force_tls is False
    assert parse_flags(["--win-disable=1"]).no_windows is True


def test_float_flag():
    assert parse_flags(["-maxload", "2.5"]).max_load_avg == 2.5
    with pytest.raises(FlagError):
        parse_flags(["-maxload", "high"])


def test_parsing_stops_at_positional():
    cfg = parse_flags(["-port", "1", "extra", "-tls"])
    assert cfg.port_number == "1"
    assert cfg.force_tls is False
    assert cfg.args == ["extra", "-tls"]


def test_double_dash_terminates():
    cfg = parse_flags(["--", "-tls"])
    assert cfg.force_tls is False
    assert cfg.args == ["-tls"]


@pytest.mark.parametrize(
    "argv",
    [["-nope"], ["-port"], ["-tls=maybe"], ["---port=1"], ["-h"]],
)
def test_bad_command_lines(argv):
    with pytest.raises(FlagError):
        parse_flags(argv)


def test_unsafe_from_environment(monkeypatch):
    monkeypatch.setenv("PWD_UNSAFE", "true")
    assert parse_flags([]).unsafe is True
    assert parse_flags(["-unsafe=false"]).unsafe is False


def test_secure_cookie_uses_configured_keys():
    cfg = parse_flags(["-cookie-hash-key", "secret"])
    encoded = cfg.secure_cookie.encode("id", {"id": "u1"})
    assert cfg.secure_cookie.decode("id", encoded) == {"id": "u1"}


def test_secure_cookie_without_hash_key_fails():
    with pytest.raises(SecureCookieError):
        Config().secure_cookie.encode("id", {"id": "u1"})


def test_name_filter_extracts_ip_and_port():
    match = NAME_FILTER.match("ip10-0-0-1-8080.direct.localhost")
    assert match is not None
    assert match.groups() == ("10-0-0-1", "8080")
    assert NAME_FILTER.match("ip10-0-0-1").groups() == ("10-0-0-1", None)


def test_alias_filter_extracts_alias_session_and_port():
    match = ALIAS_FILTER.match("pwdweb-abcd1234-80.localhost")
    assert match is not None
    assert match.groups() == ("web", "abcd1234", "80")