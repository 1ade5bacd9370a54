"""Split text into typed words and pick out inline events.

Text is walked one UTF-16 code unit at a time. Each unit is looked up in a
:class:`CharMapper`; a run of units of the same token type forms one word.
Inline events have the form ``/type:value/`` and attach to the word that
follows them. An ``offset`` event moves the running text offset instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from os import PathLike

from .char_map import CharMap, CharMapper, TokenType
from .utf8 import utf8to16, utf16to8

log = logging.getLogger(__name__)

ZWNJ = "\u200c"
HE = "\u0647"
HAMZE = "\u0654"
LAM = "\u0644"
ALEF = "\u0627"

# Letters that never join the following letter, so a ZWNJ after them is redundant.
_DETACHED = frozenset("\u0627\u0622\u0623\u0625\u062f\u0630\u0631\u0632\u0698\u0648\u0624\u0629\u0621")

_SLASH = ord("/")
_COLON = ord(":")


class EventType(Enum):
    UNKNOWN = 0
    BOOKMARK = 1
    VOLUME_RATIO = 2
    PITCH_RATIO = 3
    SPEED_RATIO = 4
    SILENCE = 5
    SPELL_OUT = 6


_EVENT_NAMES = {
    "mark": EventType.BOOKMARK,
    "volume": EventType.VOLUME_RATIO,
    "pitch": EventType.PITCH_RATIO,
    "speed": EventType.SPEED_RATIO,
    "silence": EventType.SILENCE,
    "spell": EventType.SPELL_OUT,
}


@dataclass
class Event:
    """An inline instruction attached to a word."""

    kind: EventType
    value: str


@dataclass
class Word:
    """One token of the input text."""

    text: str = ""
    offset: int = 0
    length: int = 0
    type: TokenType = TokenType.UNKNOWN
    has_diacritic: bool = False
    is_end_of_paragraph: bool = False
    events: list[Event] = field(default_factory=list)

    def add_event(self, kind: EventType, value: str) -> None:
        self.events.append(Event(kind, value))


@dataclass
class Corpus:
    """Input text together with the words found in it."""

    text: str = ""
    offset: int = 0
    words: list[Word] = field(default_factory=list)

    def add_word(self, word: Word) -> None:
        self.words.append(word)

    def last_word(self) -> Word | None:
        return self.words[-1] if self.words else None

    def __len__(self) -> int:
        return len(self.words)


def _ends_with_detached(text: str) -> bool:
    return bool(text) and text[-1] in _DETACHED


def _find(units: list[int], start: int, target: int) -> int | None:
    """Index of ``target`` at or after ``start``, stopping at the terminating 0."""
    for index in range(start, len(units)):
        unit = units[index]
        if unit == target:
            return index
        if unit == 0:
            return None
    return None


def _decode(units: list[int]) -> str:
    return utf16to8(units).decode("utf-8")


class Tokenizer:
    """Break a :class:`Corpus` text into words using a character table."""

    def __init__(self, char_mapper: CharMapper | None = None) -> None:
        self.char_mapper = char_mapper if char_mapper is not None else CharMapper()
        self.offset = 0
        self.stopped = False

    def load(self, path: str | PathLike[str]) -> None:
        """Read a token table.

        Each line holds five tab-separated fields: the letter's code, the
        letter, the normalised code, the normalised text and the one-letter
        token type. Reading stops at the first line without a type. Space and
        tab are always added as delimiters.
        """
        with open(path, encoding="utf-8") as table:
            for line_num, line in enumerate(table, start=1):
                line = line.rstrip("\r\n")
                if not line:
                    continue
                pieces = line.split("\t") + [""] * 5
                code_l, _letter, code_n, normed, kind = pieces[:5]
                if not kind:
                    log.warning("error: line %d: wrong token type.", line_num)
                    break
                self.char_mapper.set_char_map(
                    int(code_l), CharMap(normed, int(code_n), TokenType(kind[0]))
                )

        self.char_mapper.set_char_map(ord("\t"), CharMap("\t", ord("\t"), TokenType.DELIMITER))
        self.char_mapper.set_char_map(ord(" "), CharMap(" ", ord(" "), TokenType.DELIMITER))

    def stop(self) -> None:
        """Ask a running or later :meth:`parse_text` to stop."""
        self.stopped = True

    def parse_text(self, corpus: Corpus) -> None:
        """Append the words of ``corpus.text`` to the corpus."""
        units = utf8to16(corpus.text.encode("utf-8"))
        units.append(0)

        normed = ""
        token_type = TokenType.DELIMITER
        length = 0
        word = Word()
        self.offset = corpus.offset
        pos = 0

        while not self.stopped:
            unit = units[pos]
            char_map = self.char_mapper.get_char_map(unit)

            if token_type != char_map.type:
                if token_type != TokenType.DELIMITER:
                    if normed.endswith(ZWNJ):
                        normed = normed[:-1]
                    if normed:
                        word.text = normed
                        word.offset = self.offset
                        word.length = length
                        word.type = token_type
                        corpus.add_word(word)
                        word = Word()
                normed = ""
                self.offset += length
                length = 0
                token_type = char_map.type

            if unit == 0:
                break

            if token_type == TokenType.PERSIAN:
                normed = self._add_persian(normed, char_map, word)
            elif token_type == TokenType.PUNCTUATION:
                size = self._parse_events(word, units, pos)
                if size == 1:
                    # A doubled slash stands for one slash character.
                    pos += size
                elif size > 1:
                    pos += size
                    token_type = TokenType.DELIMITER
                    continue
                else:
                    normed += char_map.normed
            elif token_type == TokenType.DELIMITER:
                if char_map.is_line_break():
                    last = corpus.last_word()
                    if last is not None:
                        last.is_end_of_paragraph = True
            else:
                normed += char_map.normed

            length += 1
            pos += 1

    @staticmethod
    def _add_persian(normed: str, char_map: CharMap, word: Word) -> str:
        if char_map.is_diacritic():
            word.has_diacritic = True

        code = char_map.code
        if code == 0x200C:
            if not (normed == "" or normed.endswith(ZWNJ) or _ends_with_detached(normed)):
                normed += ZWNJ
        elif code == 0x0640:
            pass  # tatweel carries no sound
        elif code == 0x0621:
            # A lone hamza is dropped; after heh it becomes heh with hamza.
            if normed.endswith(HE):
                normed += HE + HAMZE
        elif code == 0x06C0:
            normed += HE + HAMZE
        elif code == 0xFEFB:
            normed += LAM + ALEF
        elif code == 0xFDF2:
            normed += ALEF + LAM + LAM + HE
        else:
            normed += char_map.normed
        return normed

    def _parse_events(self, word: Word, units: list[int], pos: int) -> int:
        """Consume events starting at ``pos``; return how many units they take."""
        start = pos
        while units[start] == _SLASH:
            if units[start + 1] == _SLASH:
                start += 1
                break

            colon = _find(units, start + 1, _COLON)
            if colon is None:
                log.warning("Wrong event at offset %d", self.offset)
                break
            end = _find(units, colon + 1, _SLASH)
            if end is None:
                log.warning("Wrong event at offset %d", self.offset)
                break

            event_type = _decode(units[start + 1 : colon]).lower()
            event_value = _decode(units[colon + 1 : end])

            if event_type == "offset":
                self.offset = int(event_value)
            else:
                word.add_event(_EVENT_NAMES.get(event_type, EventType.UNKNOWN), event_value)

            start = end + 1
        return start - pos