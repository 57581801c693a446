import base64
import string
import time

from pwdplay.ids import XIDGenerator


def _raw(xid):
    return base64.b32hexdecode(xid.upper() + "====")


def test_id_shape():
    xid = XIDGenerator().new_id()
    assert len(xid) == 20
    assert set(xid) <= set(string.digits + "abcdefghijklmnopqrstuv")


def test_ids_are_unique():
    gen = XIDGenerator()
    ids = {gen.new_id() for _ in range(1000)}
    assert len(ids) == 1000


def test_timestamp_is_embedded():
    before = int(time.time())
    raw = _raw(XIDGenerator().new_id())
    after = int(time.time())
    assert len(raw) == 12
    assert before <= int.from_bytes(raw[:4], "big") <= after


def test_counter_increments_and_machine_part_is_stable():
    gen = XIDGenerator()
    first = _raw(gen.new_id())
    second = _raw(XIDGenerator().new_id())
    assert first[4:9] == second[4:9]
    diff = int.from_bytes(second[9:], "big") - int.from_bytes(first[9:], "big")
    assert diff % (1 << 24) == 1


def test_encoding_round_trip():
    xid = XIDGenerator().new_id()
    assert base64.b32hexencode(_raw(xid)).decode().rstrip("=").lower() == xid