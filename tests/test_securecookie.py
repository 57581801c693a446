import base64

import pytest

from pwdplay.securecookie import (
    CookieID,
    MissingCookieError,
    SecureCookie,
    SecureCookieError,
    read_cookie,
)

HASH_KEY = b"secret"
BLOCK_KEY = bytes(range(16))


def test_round_trip_signed_only():
    sc = SecureCookie(HASH_KEY)
    value = {"id": "u1", "user_name": "alice"}
    assert sc.decode("id", sc.encode("id", value)) == value


def test_round_trip_encrypted_hides_plaintext():
    sc = SecureCookie(HASH_KEY, BLOCK_KEY)
    encoded = sc.encode("id", {"user_name": "alice"})
    raw = base64.urlsafe_b64decode(encoded)
    inner = base64.urlsafe_b64decode(raw.split(b"|", 2)[1])
    assert b"alice" not in inner
    assert sc.decode("id", encoded) == {"user_name": "alice"}


def test_payload_layout_is_timestamp_value_mac():
    sc = SecureCookie(HASH_KEY, clock=lambda: 1234)
    raw = base64.urlsafe_b64decode(sc.encode("id", "v"))
    stamp, body, mac = raw.split(b"|", 2)
    assert stamp == b"1234"
    assert base64.urlsafe_b64decode(body) == b'"v"'
    assert len(mac) == 32


def test_wrong_name_rejected():
    sc = SecureCookie(HASH_KEY)
    with pytest.raises(SecureCookieError):
        sc.decode("other", sc.encode("id", {"id": "u1"}))


def test_tampered_value_rejected():
    sc = SecureCookie(HASH_KEY)
    raw = bytearray(base64.urlsafe_b64decode(sc.encode("id", {"id": "u1"})))
    raw[-1] ^= 0x01
    with pytest.raises(SecureCookieError):
        sc.decode("id", base64.urlsafe_b64encode(bytes(raw)).decode())


def test_other_key_rejected():
    encoded = SecureCookie(HASH_KEY).encode("id", 1)
    with pytest.raises(SecureCookieError):
        SecureCookie(b"token").decode("id", encoded)


def test_garbage_rejected():
    with pytest.raises(SecureCookieError):
        SecureCookie(HASH_KEY).decode("id", "not base64 at all!")


def test_missing_hash_key():
    sc = SecureCookie(b"")
    with pytest.raises(SecureCookieError, match="hash key is not set"):
        sc.encode("id", {})


def test_bad_block_key_size():
    sc = SecureCookie(HASH_KEY, b"secret")
    with pytest.raises(SecureCookieError):
        sc.encode("id", {})


def test_expiry():
    now = [1000]
    sc = SecureCookie(HASH_KEY, max_age=60, clock=lambda: now[0])
    encoded = sc.encode("id", "v")
    now[0] = 1060
    assert sc.decode("id", encoded) == "v"
    now[0] = 1061
    with pytest.raises(SecureCookieError, match="expired"):
        sc.decode("id", encoded)


def test_too_long():
    sc = SecureCookie(HASH_KEY, max_length=10)
    with pytest.raises(SecureCookieError, match="too long"):
        sc.encode("id", {"id": "u1"})


def test_set_cookie_header():
    header = CookieID(id="u1").set_cookie(SecureCookie(HASH_KEY), "example.com")
    assert header.startswith("id=")
    assert "; Path=/" in header
    assert "; Domain=example.com" in header
    assert header.endswith("; HttpOnly")


def test_set_cookie_drops_invalid_domain():
    header = CookieID(id="u1").set_cookie(SecureCookie(HASH_KEY), "localhost:3000")
    assert "Domain=" not in header


def test_read_cookie_round_trip():
    sc = SecureCookie(HASH_KEY, BLOCK_KEY)
    cookie = CookieID(id="u1", user_name="alice", user_avatar="a.png", provider_id="p9")
    pair = cookie.set_cookie(sc, "example.com").split(";")[0]
    assert read_cookie(f"theme=dark; {pair}", sc) == cookie


def test_read_cookie_missing():
    with pytest.raises(MissingCookieError):
        read_cookie("theme=dark", SecureCookie(HASH_KEY))


def test_read_cookie_non_object_rejected():
    sc = SecureCookie(HASH_KEY)
    with pytest.raises(SecureCookieError):
        read_cookie("id=" + sc.encode("id", [1, 2]), sc)