"""Persian text-to-speech building blocks: UTF handling, character maps, tokenizing, mbrola driving and WAV output."""

__version__ = "2.1.0"