"""UTF-8 encoding and decoding without validation.

These functions trust their input: malformed sequences are decoded by
their bit patterns alone and produce whatever values those patterns give.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence

from .utf8_core import (
    LEAD_OFFSET,
    SURROGATE_OFFSET,
    TRAIL_SURROGATE_MIN,
    is_lead_surrogate,
    is_trail,
    sequence_length,
)


def append(cp: int) -> bytes:
    """Encode one code point as UTF-8 without checking that it is valid."""
    cp &= 0xFFFFFFFF
    if cp < 0x80:
        octets = (cp,)
    elif cp < 0x800:
        octets = ((cp >> 6) | 0xC0, (cp & 0x3F) | 0x80)
    elif cp < 0x10000:
        octets = ((cp >> 12) | 0xE0, ((cp >> 6) & 0x3F) | 0x80, (cp & 0x3F) | 0x80)
    else:
        octets = (
            (cp >> 18) | 0xF0,
            ((cp >> 12) & 0x3F) | 0x80,
            ((cp >> 6) & 0x3F) | 0x80,
            (cp & 0x3F) | 0x80,
        )
    return bytes(octet & 0xFF for octet in octets)


def next_code_point(data: Sequence[int], pos: int = 0) -> tuple[int, int]:
    """Decode the code point at ``pos``; return it with the position after it."""
    cp = data[pos] & 0xFF
    length = sequence_length(cp)
    if length == 2:
        cp = ((cp << 6) & 0x7FF) + (data[pos + 1] & 0x3F)
    elif length == 3:
        cp = ((cp << 12) & 0xFFFF) + (((data[pos + 1] & 0xFF) << 6) & 0xFFF)
        cp += data[pos + 2] & 0x3F
    elif length == 4:
        cp = ((cp << 18) & 0x1FFFFF) + (((data[pos + 1] & 0xFF) << 12) & 0x3FFFF)
        cp += ((data[pos + 2] & 0xFF) << 6) & 0xFFF
        cp += data[pos + 3] & 0x3F
    # An invalid lead (length 0) is taken as a single octet.
    return cp, pos + max(length, 1)


def prior(data: Sequence[int], pos: int) -> tuple[int, int]:
    """Decode the code point that ends at ``pos``; return it with its start."""
    start = pos - 1
    while start > 0 and is_trail(data[start]):
        start -= 1
    cp, _ = next_code_point(data, start)
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


def utf16to8(units: Iterable[int]) -> bytes:
    """Convert UTF-16 code units to UTF-8, pairing surrogates without checks."""
    out = bytearray()
    it = iter(units)
    for unit in it:
        cp = unit & 0xFFFF
        if is_lead_surrogate(cp):
            trail = next(it, 0) & 0xFFFF
            cp = ((cp << 10) + trail + SURROGATE_OFFSET) & 0xFFFFFFFF
        out += append(cp)
    return bytes(out)


def utf8to16(data: Sequence[int]) -> list[int]:
    """Convert UTF-8 data to UTF-16 code units."""
    units: list[int] = []
    for cp in _iter_code_points(data):
        if cp > 0xFFFF:
            units.append(((cp >> 10) + LEAD_OFFSET) & 0xFFFF)
            units.append(((cp & 0x3FF) + TRAIL_SURROGATE_MIN) & 0xFFFF)
        else:
            units.append(cp)
    return units


def utf32to8(code_points: Iterable[int]) -> bytes:
    """Encode a sequence of code points as UTF-8."""
    return b"".join(append(cp) for cp in code_points)


def utf8to32(data: Sequence[int]) -> list[int]:
    """Decode UTF-8 data into a list of code points."""
    return list(_iter_code_points(data))