import pytest

from tihu.utf8 import (
    InvalidCodePoint,
    InvalidUtf8,
    InvalidUtf16,
    NotEnoughRoom,
    UtfError,
    advance,
    append,
    distance,
    next_code_point,
    prior,
    replace_invalid,
    utf8to16,
    utf8to32,
    utf16to8,
    utf32to8,
)

SAMPLE = "a\u00e9\u20ac\U0001F600 سلام"


def _utf16_units(text):
    raw = text.encode("utf-16-le")
    return [int.from_bytes(raw[i : i + 2], "little") for i in range(0, len(raw), 2)]


@pytest.mark.parametrize("char", ["a", "\u00e9", "\u20ac", "\U0001F600", "س"])
def test_append_matches_standard_encoding(char):
    assert append(ord(char)) == char.encode("utf-8")


@pytest.mark.parametrize("cp", [0xD800, 0xDFFF, 0x110000])
def test_append_rejects_invalid_code_points(cp):
    with pytest.raises(InvalidCodePoint) as info:
        append(cp)
    assert info.value.code_point == cp


def test_next_code_point_walks_string():
    data = SAMPLE.encode()
    pos = 0
    decoded = []
    while pos < len(data):
        cp, pos = next_code_point(data, pos)
        decoded.append(cp)
    assert decoded == [ord(c) for c in SAMPLE]
    assert pos == len(data)


def test_next_code_point_invalid_lead():
    with pytest.raises(InvalidUtf8) as info:
        next_code_point(b"\xff", 0)
    assert info.value.octet == 0xFF


def test_next_code_point_overlong():
    with pytest.raises(InvalidUtf8):
        next_code_point(b"\xc0\x80", 0)


def test_next_code_point_truncated():
    data = "\u20ac".encode()[:2]
    with pytest.raises(NotEnoughRoom):
        next_code_point(data, 0)


def test_next_code_point_surrogate_is_invalid_code_point():
    with pytest.raises(InvalidCodePoint) as info:
        next_code_point(b"\xed\xa0\x80", 0)
    assert info.value.code_point == 0xD800


def test_errors_share_base_class():
    with pytest.raises(UtfError):
        next_code_point(b"\x80", 0)


def test_prior_steps_backwards():
    data = SAMPLE.encode()
    pos = len(data)
    decoded = []
    while pos > 0:
        cp, pos = prior(data, pos)
        decoded.append(cp)
    assert decoded == [ord(c) for c in reversed(SAMPLE)]


def test_prior_at_start_raises():
    with pytest.raises(NotEnoughRoom):
        prior(b"abc", 0)


def test_prior_without_lead_raises():
    with pytest.raises(InvalidUtf8):
        prior(b"\x80\x80", 2)


def test_advance_and_distance():
    data = SAMPLE.encode()
    assert distance(data) == len(SAMPLE)
    assert advance(data, 0, 4) == len(SAMPLE[:4].encode())
    assert advance(data, 0, len(SAMPLE)) == len(data)


def test_advance_past_end_raises():
    with pytest.raises(NotEnoughRoom):
        advance(b"ab", 0, 3)


def test_replace_invalid_matches_standard_replacement():
    data = b"a\xffb\xe2\x28\xa1"
    assert replace_invalid(data) == data.decode("utf-8", errors="replace").encode()


def test_replace_invalid_keeps_valid_data():
    data = SAMPLE.encode()
    assert replace_invalid(data) == data


def test_replace_invalid_custom_marker():
    assert replace_invalid(b"x\xffy", ord("?")) == b"x?y"


def test_replace_invalid_truncated_raises():
    with pytest.raises(NotEnoughRoom):
        replace_invalid("\u20ac".encode()[:2])


def test_utf16_round_trip():
    units = _utf16_units(SAMPLE)
    assert utf16to8(units) == SAMPLE.encode()
    assert utf8to16(SAMPLE.encode()) == units


def test_utf16_lone_lead_surrogate():
    with pytest.raises(InvalidUtf16) as info:
        utf16to8([0x61, 0xD800])
    assert info.value.unit == 0xD800


def test_utf16_lone_trail_surrogate():
    with pytest.raises(InvalidUtf16) as info:
        utf16to8([0xDC00])
    assert info.value.unit == 0xDC00


def test_utf16_lead_followed_by_non_trail():
    with pytest.raises(InvalidUtf16) as info:
        utf16to8([0xD800, 0x61])
    assert info.value.unit == 0x61


def test_utf32_round_trip():
    cps = [ord(c) for c in SAMPLE]
    assert utf32to8(cps) == SAMPLE.encode()
    assert utf8to32(SAMPLE.encode()) == cps


def test_utf32to8_rejects_invalid():
    with pytest.raises(InvalidCodePoint):
        utf32to8([0x61, 0x110000])