"""Checked UTF-8 encoding, decoding and conversion between UTF-8/16/32."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence

from .utf8_core import (
    LEAD_OFFSET,
    SURROGATE_OFFSET,
    TRAIL_SURROGATE_MIN,
    Utf8Status,
    is_code_point_valid,
    is_lead_surrogate,
    is_trail,
    is_trail_surrogate,
    sequence_length,
    validate_next,
)

REPLACEMENT_CHARACTER = 0xFFFD


class UtfError(Exception):
    """Base class for all UTF conversion errors."""


class InvalidCodePoint(UtfError):
    """A value that is not a Unicode scalar value was met."""

    def __init__(self, code_point: int) -> None:
        super().__init__("Invalid code point")
        self.code_point = code_point


class InvalidUtf8(UtfError):
    """A malformed UTF-8 sequence was met."""

    def __init__(self, octet: int) -> None:
        super().__init__("Invalid UTF-8")
        self.octet = octet & 0xFF


class InvalidUtf16(UtfError):
    """A malformed UTF-16 sequence (unpaired surrogate) was met."""

    def __init__(self, unit: int) -> None:
        super().__init__("Invalid UTF-16")
        self.unit = unit & 0xFFFF


class NotEnoughRoom(UtfError):
    """The input ended in the middle of a sequence."""

    def __init__(self) -> None:
        super().__init__("Not enough space")


def append(cp: int) -> bytes:
    """Encode one code point as UTF-8."""
    if not is_code_point_valid(cp) or cp < 0:
        raise InvalidCodePoint(cp)
    if cp < 0x80:
        return bytes((cp,))
    if cp < 0x800:
        return bytes(((cp >> 6) | 0xC0, (cp & 0x3F) | 0x80))
    if cp < 0x10000:
        return bytes(
            ((cp >> 12) | 0xE0, ((cp >> 6) & 0x3F) | 0x80, (cp & 0x3F) | 0x80)
        )
    return bytes(
        (
            (cp >> 18) | 0xF0,
            ((cp >> 12) & 0x3F) | 0x80,
            ((cp >> 6) & 0x3F) | 0x80,
            (cp & 0x3F) | 0x80,
        )
    )


def _raw_code_point(data: Sequence[int], pos: int) -> int:
    """Decode a structurally complete sequence without range checks."""
    length = sequence_length(data[pos])
    lead_bits = {1: 0x7F, 2: 0x1F, 3: 0x0F, 4: 0x07}[length]
    cp = data[pos] & lead_bits
    for octet in data[pos + 1 : pos + length]:
        cp = (cp << 6) | (octet & 0x3F)
    return cp


def next_code_point(data: Sequence[int], pos: int = 0) -> tuple[int, int]:
    """Decode the code point at ``pos``; return it with the position after it."""
    status, cp, nxt = validate_next(data, pos)
    if status is Utf8Status.UTF8_OK:
        return cp, nxt
    if status is Utf8Status.NOT_ENOUGH_ROOM:
        raise NotEnoughRoom()
    if status is Utf8Status.INVALID_CODE_POINT:
        raise InvalidCodePoint(_raw_code_point(data, pos))
    raise InvalidUtf8(data[pos])


def prior(data: Sequence[int], pos: int) -> tuple[int, int]:
    """Decode the code point that ends at ``pos``; return it with its start."""
    if pos <= 0:
        raise NotEnoughRoom()
    start = pos - 1
    while is_trail(data[start]):
        if start == 0:
            raise InvalidUtf8(data[start])
        start -= 1
    cp, _ = next_code_point(data[:pos], start)
    return cp, start


def advance(data: Sequence[int], pos: int, n: int) -> int:
    """Position reached after stepping over ``n`` code points from ``pos``."""
    for _ in range(n):
        _, pos = next_code_point(data, pos)
    return pos


def _iter_code_points(data: Sequence[int]) -> Iterator[int]:
    pos = 0
    while pos < len(data):
        cp, pos = next_code_point(data, pos)
        yield cp


def distance(data: Sequence[int]) -> int:
    """Number of code points in the UTF-8 data."""
    return sum(1 for _ in _iter_code_points(data))


def replace_invalid(
    data: Sequence[int], replacement: int = REPLACEMENT_CHARACTER
) -> bytes:
    """Copy the data, replacing each invalid sequence with ``replacement``."""
    marker = append(replacement)
    out = bytearray()
    pos = 0
    end = len(data)
    while pos != end:
        status, _, nxt = validate_next(data, pos)
        if status is Utf8Status.UTF8_OK:
            out.extend(data[pos:nxt])
            pos = nxt
        elif status is Utf8Status.NOT_ENOUGH_ROOM:
            raise NotEnoughRoom()
        elif status is Utf8Status.INVALID_LEAD:
            out += marker
            pos += 1
        else:
            out += marker
            pos += 1
            while pos != end and is_trail(data[pos]):
                pos += 1
    return bytes(out)


def utf16to8(units: Iterable[int]) -> bytes:
    """Convert UTF-16 code units to UTF-8."""
    out = bytearray()
    it = iter(units)
    for unit in it:
        cp = unit & 0xFFFF
        if is_lead_surrogate(cp):
            trail = next(it, None)
            if trail is None:
                raise InvalidUtf16(cp)
            trail &= 0xFFFF
            if not is_trail_surrogate(trail):
                raise InvalidUtf16(trail)
            cp = (cp << 10) + trail + SURROGATE_OFFSET
        elif is_trail_surrogate(cp):
            raise InvalidUtf16(cp)
        out += append(cp)
    return bytes(out)


def utf8to16(data: Sequence[int]) -> list[int]:
    """Convert UTF-8 data to UTF-16 code units."""
    units: list[int] = []
    for cp in _iter_code_points(data):
        if cp > 0xFFFF:
            units.append((cp >> 10) + LEAD_OFFSET)
            units.append((cp & 0x3FF) + TRAIL_SURROGATE_MIN)
        else:
            units.append(cp)
    return units


def utf32to8(code_points: Iterable[int]) -> bytes:
    """Encode a sequence of code points as UTF-8."""
    return b"".join(append(cp) for cp in code_points)


def utf8to32(data: Sequence[int]) -> list[int]:
    """Decode UTF-8 data into a list of code points."""
    return list(_iter_code_points(data))