"""An mbrola voice with the engine's pitch, rate and volume scales."""

from __future__ import annotations

from .mbrowrap import Mbrola, MbrolaError


def pitch_command(pitch: int) -> str:
    """Mbrola frequency-ratio command for a pitch adjustment in -10..10."""
    ratio = ((pitch + 10) * 1.6 / 20) + 0.2
    return f";; F = {ratio:f}\r\n"


def rate_command(rate: int) -> str:
    """Mbrola time-ratio command for a rate adjustment.

    The ratio runs the other way to the rate: faster speech is a smaller
    ratio, from 2.2 down to 0.2.
    """
    if rate >= 0:
        ratio = abs(rate - 10) * 0.06 + 0.2
    else:
        ratio = abs(rate) * 0.5 + 0.2
    return f";; T = {ratio:f}\r\n"


def volume_ratio(volume: int) -> float:
    """Map a volume in 0..100 onto mbrola's 0.2..3.0 ratio."""
    return (volume * 2.8 / 100) + 0.2


class MbrolaVoice:
    """A loaded mbrola voice database ready to synthesise phonemes."""

    def __init__(self, mbrola: Mbrola | None = None) -> None:
        self._mbrola = mbrola if mbrola is not None else Mbrola()

    @property
    def frequency(self) -> int:
        """Sample rate of the loaded voice."""
        return self._mbrola.frequency

    def initialize(self, data_path: str) -> None:
        """Load the voice database; raise MbrolaError if mbrola cannot start."""
        self.finalize()
        try:
            self._mbrola.init(data_path)
        except MbrolaError:
            self.finalize()
            raise

    def finalize(self) -> None:
        self._mbrola.close()

    def write(self, text: str) -> int:
        return self._mbrola.write(text)

    def read(self, length: int) -> bytes:
        """Read at most ``length`` 16-bit samples as little-endian bytes."""
        return self._mbrola.read(length)

    def last_error(self) -> str:
        return self._mbrola.last_error()

    def apply_pitch(self, pitch: int) -> None:
        self.write(pitch_command(pitch))

    def apply_rate(self, rate: int) -> None:
        self.write(rate_command(rate))

    def apply_volume(self, volume: int) -> None:
        self._mbrola.set_volume_ratio(volume_ratio(volume))

    def flush(self) -> None:
        self._mbrola.flush()

    def clear(self) -> None:
        self.flush()

    def reset(self) -> bool:
        return self._mbrola.reset()