"""Canonical 44-byte PCM WAVE header and a writer that fills it in on close."""

from __future__ import annotations

import struct
from os import PathLike
from types import TracebackType

WAVE_HEADER_SIZE = 44

_HEADER = struct.Struct("<4sI4s4sIHHIIHH4sI")


def wav_header(
    channels: int, sample_rate: int, bits_per_sample: int, data_size: int
) -> bytes:
    """Build a PCM WAVE header for ``data_size`` bytes of samples."""
    sample_bytes = 1 if bits_per_sample == 8 else 2
    byte_rate = channels * sample_bytes * sample_rate
    block_align = channels * sample_bytes
    return _HEADER.pack(
        b"RIFF",
        (data_size + 36) & 0xFFFFFFFF,
        b"WAVE",
        b"fmt ",
        16,
        1,
        channels & 0xFF,
        sample_rate & 0xFFFFFFFF,
        byte_rate & 0xFFFFFFFF,
        block_align & 0xFFFF,
        bits_per_sample & 0xFFFF,
        b"data",
        data_size & 0xFFFFFFFF,
    )


class WavWriter:
    """Write raw PCM samples to a WAVE file, patching the header on close."""

    def __init__(
        self,
        path: str | PathLike[str],
        channels: int = 1,
        sample_rate: int = 22050,
        bits_per_sample: int = 16,
    ) -> None:
        self.channels = channels
        self.sample_rate = sample_rate
        self.bits_per_sample = bits_per_sample
        self._file = open(path, "wb")
        self._file.write(wav_header(channels, sample_rate, bits_per_sample, 0))

    @property
    def closed(self) -> bool:
        return self._file.closed

    def write(self, data: bytes) -> int:
        """Append raw sample bytes; return the number written."""
        return self._file.write(data)

    def close(self) -> None:
        """Rewrite the header with the final data size and close the file."""
        if self._file.closed:
            return
        data_size = self._file.tell() - WAVE_HEADER_SIZE
        self._file.seek(0)
        self._file.write(
            wav_header(self.channels, self.sample_rate, self.bits_per_sample, data_size)
        )
        self._file.close()

    def __enter__(self) -> WavWriter:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()