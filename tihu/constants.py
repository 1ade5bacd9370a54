"""Engine enumerations, error messages and version information."""

from __future__ import annotations

from enum import IntEnum

VERSION_MAJOR = 2
VERSION_MINOR = 1
VERSION_PATCH = 0


class ErrorCode(IntEnum):
    NONE = 0
    LOADING = 1
    LOAD_USER_DIC = 2
    PYTHON_NOT_FOUND = 3
    SAMPLERATE_NOT_FOUND = 4
    ESPEAK_NOT_FOUND = 5
    HAZM_NOT_FOUND = 6


class Param(IntEnum):
    PITCH = 0
    VOLUME = 1
    RATE = 2
    READ_PUNCS = 3
    FREQUENCY = 4


class CallbackReturn(IntEnum):
    DATA_NOT_PROCESSED = 0
    DATA_PROCESSED = 1
    DATA_ABORT = 2


class CallbackMessage(IntEnum):
    WAVE_BUFFER = 0
    TEXT_MESSAGE = 1
    TEXT_TAGS = 2
    EVENT_WORD_BOUNDARY = 3
    EVENT_SENTENCE_BOUNDARY = 4
    EVENT_BOOKMARK = 5


class Voice(IntEnum):
    MBROLA_MALE = 0
    MBROLA_FEMALE = 1
    ESPEAK_MALE = 2
    ESPEAK_FEMALE = 3


VOICE_COUNT = len(Voice)

_ERROR_STRINGS = {
    ErrorCode.NONE: "No Error.",
    ErrorCode.LOADING: "Error loading loading failed",
    ErrorCode.LOAD_USER_DIC: "Error loading user lexicon failed",
    ErrorCode.PYTHON_NOT_FOUND: "Python not found",
    ErrorCode.SAMPLERATE_NOT_FOUND: "Samplerate not found",
    ErrorCode.ESPEAK_NOT_FOUND: "eSpeak-ng not found",
    ErrorCode.HAZM_NOT_FOUND: "Hazm not found",
}


def error_string(code: int) -> str:
    """Human-readable message for an error code; ValueError if unknown."""
    return _ERROR_STRINGS[ErrorCode(code)]


def version() -> str:
    """The engine version as ``major.minor.patch``."""
    return f"{VERSION_MAJOR}.{VERSION_MINOR}.{VERSION_PATCH}"