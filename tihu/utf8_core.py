"""Low-level UTF-8 validation helpers working on byte sequences."""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

LEAD_SURROGATE_MIN = 0xD800
LEAD_SURROGATE_MAX = 0xDBFF
TRAIL_SURROGATE_MIN = 0xDC00
TRAIL_SURROGATE_MAX = 0xDFFF
LEAD_OFFSET = LEAD_SURROGATE_MIN - (0x10000 >> 10)
SURROGATE_OFFSET = 0x10000 - (LEAD_SURROGATE_MIN << 10) - TRAIL_SURROGATE_MIN
CODE_POINT_MAX = 0x10FFFF

BOM = b"\xef\xbb\xbf"


class Utf8Status(Enum):
    """Outcome of decoding one UTF-8 sequence."""

    UTF8_OK = 0
    NOT_ENOUGH_ROOM = 1
    INVALID_LEAD = 2
    INCOMPLETE_SEQUENCE = 3
    OVERLONG_SEQUENCE = 4
    INVALID_CODE_POINT = 5


def is_trail(octet: int) -> bool:
    """Return True if the octet is a continuation byte (10xxxxxx)."""
    return ((octet & 0xFF) >> 6) == 0x2


def is_lead_surrogate(cp: int) -> bool:
    return LEAD_SURROGATE_MIN <= cp <= LEAD_SURROGATE_MAX


def is_trail_surrogate(cp: int) -> bool:
    return TRAIL_SURROGATE_MIN <= cp <= TRAIL_SURROGATE_MAX


def is_surrogate(cp: int) -> bool:
    return LEAD_SURROGATE_MIN <= cp <= TRAIL_SURROGATE_MAX


def is_code_point_valid(cp: int) -> bool:
    """Return True if cp is a Unicode scalar value."""
    return cp <= CODE_POINT_MAX and not is_surrogate(cp)


def sequence_length(lead: int) -> int:
    """Length of the sequence a lead octet starts, or 0 for an invalid lead."""
    lead &= 0xFF
    if lead < 0x80:
        return 1
    if (lead >> 5) == 0x6:
        return 2
    if (lead >> 4) == 0xE:
        return 3
    if (lead >> 3) == 0x1E:
        return 4
    return 0


def is_overlong_sequence(cp: int, length: int) -> bool:
    """Return True if cp was encoded with more octets than it needs."""
    if cp < 0x80:
        return length != 1
    if cp < 0x800:
        return length != 2
    if cp < 0x10000:
        return length != 3
    return False


def _decode(data: Sequence[int], pos: int, length: int) -> tuple[Utf8Status, int]:
    end = len(data)
    cp = data[pos] & 0xFF
    if length == 1:
        return Utf8Status.UTF8_OK, cp

    trail_shifts = {2: (6,), 3: (12, 6), 4: (18, 12, 6)}[length]
    lead_masks = {2: 0x7FF, 3: 0xFFFF, 4: 0x1FFFFF}
    cp = (cp << trail_shifts[0]) & lead_masks[length]
    shifts = trail_shifts[1:] + (0,)
    for offset, shift in enumerate(shifts, start=1):
        index = pos + offset
        if index >= end:
            return Utf8Status.NOT_ENOUGH_ROOM, 0
        octet = data[index] & 0xFF
        if not is_trail(octet):
            return Utf8Status.INCOMPLETE_SEQUENCE, 0
        cp += (octet & 0x3F) << shift
    return Utf8Status.UTF8_OK, cp


def validate_next(data: Sequence[int], pos: int = 0) -> tuple[Utf8Status, int, int]:
    """Decode the sequence starting at ``pos``.

    Returns ``(status, code_point, next_pos)``. On failure the code point is 0
    and ``next_pos`` equals ``pos``.
    """
    if pos >= len(data):
        return Utf8Status.NOT_ENOUGH_ROOM, 0, pos

    length = sequence_length(data[pos])
    if length == 0:
        return Utf8Status.INVALID_LEAD, 0, pos

    status, cp = _decode(data, pos, length)
    if status is not Utf8Status.UTF8_OK:
        return status, 0, pos
    if not is_code_point_valid(cp):
        return Utf8Status.INVALID_CODE_POINT, 0, pos
    if is_overlong_sequence(cp, length):
        return Utf8Status.OVERLONG_SEQUENCE, 0, pos
    return Utf8Status.UTF8_OK, cp, pos + length


def find_invalid(data: Sequence[int]) -> int:
    """Index of the first invalid sequence, or ``len(data)`` if all are valid."""
    pos = 0
    while pos != len(data):
        status, _, nxt = validate_next(data, pos)
        if status is not Utf8Status.UTF8_OK:
            return pos
        pos = nxt
    return pos


def is_valid(data: Sequence[int]) -> bool:
    """Return True if the whole sequence is valid UTF-8."""
    return find_invalid(data) == len(data)


def starts_with_bom(data: Sequence[int]) -> bool:
    """Return True if the data begins with the UTF-8 byte order mark."""
    return len(data) >= 3 and all((data[i] & 0xFF) == BOM[i] for i in range(3))