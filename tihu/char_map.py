"""Character classification tables used by the tokenizer."""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from enum import Enum

from .utf8 import utf16to8


class TokenType(str, Enum):
    """Class of a character; the value is its one-letter code in token tables."""

    UNKNOWN = "U"
    DELIMITER = "D"
    PERSIAN = "P"
    ENGLISH = "E"
    DIGIT = "N"
    PUNCTUATION = "S"


@dataclass(frozen=True)
class CharMap:
    """How one UTF-16 code unit is normalised and classified."""

    normed: str = ""
    code: int = 0
    type: TokenType = TokenType.UNKNOWN

    def is_diacritic(self) -> bool:
        """Return True for non-spacing marks such as Arabic short vowels."""
        if not 0 < self.code <= 0x10FFFF or 0xD800 <= self.code <= 0xDFFF:
            return False
        return unicodedata.category(chr(self.code)) == "Mn"

    def is_line_break(self) -> bool:
        return self.code in (0x0A, 0x0D)


class CharMapper:
    """Table from UTF-16 code units to their :class:`CharMap`.

    The table is organised in rows keyed by the high byte of the code unit.
    A letter whose row has never been filled maps to itself as UNKNOWN; a
    letter in a filled row that was not set itself gets an empty map.
    """

    def __init__(self) -> None:
        self._rows: dict[int, dict[int, CharMap]] = {}

    def set_char_map(self, letter: int, char_map: CharMap) -> None:
        letter &= 0xFFFF
        self._rows.setdefault(letter >> 8, {})[letter & 0xFF] = char_map

    def get_char_map(self, letter: int) -> CharMap:
        letter &= 0xFFFF
        row = self._rows.get(letter >> 8)
        if row is not None:
            return row.get(letter & 0xFF, CharMap())
        normed = utf16to8([letter]).decode("utf-8")
        return CharMap(normed, letter, TokenType.UNKNOWN)