import codecs

import pytest

from tihu.utf8_core import (
    BOM,
    CODE_POINT_MAX,
    LEAD_SURROGATE_MIN,
    TRAIL_SURROGATE_MAX,
    Utf8Status,
    find_invalid,
    is_code_point_valid,
    is_valid,
    sequence_length,
    starts_with_bom,
    validate_next,
)

SAMPLES = ["a", "é", "س", "\u200c", "€", "😀"]


def test_code_point_limits():
    assert is_code_point_valid(CODE_POINT_MAX)
    assert not is_code_point_valid(CODE_POINT_MAX + 1)
    assert not is_code_point_valid(LEAD_SURROGATE_MIN)
    assert not is_code_point_valid(TRAIL_SURROGATE_MAX)
    assert is_code_point_valid(0)


@pytest.mark.parametrize("ch", SAMPLES)
def test_sequence_length_matches_encoding(ch):
    encoded = ch.encode("utf-8")
    assert sequence_length(encoded[0]) == len(encoded)


def test_sequence_length_invalid_lead():
    assert sequence_length(0x80) == 0
    assert sequence_length(0xFF) == 0


@pytest.mark.parametrize("ch", SAMPLES)
def test_validate_next_decodes(ch):
    encoded = ch.encode("utf-8")
    status, cp, pos = validate_next(encoded, 0)
    assert status is Utf8Status.UTF8_OK
    assert cp == ord(ch)
    assert pos == len(encoded)


def test_validate_next_at_offset():
    data = "aس".encode("utf-8")
    status, cp, pos = validate_next(data, 1)
    assert status is Utf8Status.UTF8_OK
    assert cp == ord("س")
    assert pos == len(data)


@pytest.mark.parametrize(
    "data, expected",
    [
        (b"\x80", Utf8Status.INVALID_LEAD),
        (b"\xc3", Utf8Status.NOT_ENOUGH_ROOM),
        (b"\xc3\x28", Utf8Status.INCOMPLETE_SEQUENCE),
        (b"\xc0\x80", Utf8Status.OVERLONG_SEQUENCE),
        (b"\xed\xa0\x80", Utf8Status.INVALID_CODE_POINT),
        (b"\xf4\x90\x80\x80", Utf8Status.INVALID_CODE_POINT),
        (b"", Utf8Status.NOT_ENOUGH_ROOM),
    ],
)
def test_validate_next_errors_keep_position(data, expected):
    status, cp, pos = validate_next(data, 0)
    assert status is expected
    assert pos == 0
    assert cp == 0


def test_find_invalid_points_at_bad_byte():
    data = "ab".encode() + b"\x80" + b"cd"
    assert find_invalid(data) == data.index(b"\x80")


def test_find_invalid_on_valid_returns_length():
    data = "سلام دنیا".encode("utf-8")
    assert find_invalid(data) == len(data)


@pytest.mark.parametrize(
    "data",
    [b"plain", "سلام".encode(), b"\xff", b"\xe2\x82", b"\xed\xa0\x80", b"\xc0\xaf", b""],
)
def test_is_valid_agrees_with_decoder(data):
    try:
        data.decode("utf-8")
        expected = True
    except UnicodeDecodeError:
        expected = False
    assert is_valid(data) is expected


def test_starts_with_bom():
    assert BOM == codecs.BOM_UTF8
    assert starts_with_bom(codecs.BOM_UTF8 + b"text")
    assert not starts_with_bom(b"text")
    assert not starts_with_bom(codecs.BOM_UTF8[:2])