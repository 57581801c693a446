import pytest

from pwdplay.cors import ALLOWED_ORIGIN_SUFFIXES, is_allowed_origin


@pytest.mark.parametrize(
    "origin",
    [
        "http://localhost:3000",
        "http://localhost",
        "https://labs.play-with-docker.com",
        "https://play-with-kubernetes.com",
        "https://www.docker.com",
        "https://play-with-go.dev",
    ],
)
def test_known_origins_are_allowed(origin):
    assert is_allowed_origin(origin) is True


@pytest.mark.parametrize(
    "origin",
    [
        "https://attacker.example.com",
        "https://docker.com.example.com",
        "https://play-with-docker.com:8443",
        "",
    ],
)
def test_other_origins_are_rejected(origin):
    assert is_allowed_origin(origin) is False


def test_every_suffix_is_accepted_on_a_subdomain():
    for suffix in ALLOWED_ORIGIN_SUFFIXES:
        assert is_allowed_origin("https://sub." + suffix)


def test_localhost_anywhere_in_origin_is_accepted():
    assert is_allowed_origin("https://localhost.example.org")