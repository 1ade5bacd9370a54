"""Drive an external mbrola process through pipes.

The process is started with its input, output and error streams connected to
non-blocking pipes. Phoneme text is written to its input; 16-bit little-endian
audio samples are read back from its output. Whether mbrola has finished
working is judged from the scheduler state in ``/proc/<pid>/stat``.
"""

from __future__ import annotations

import logging
import os
import select
import signal
import subprocess
from collections import deque
from enum import Enum

log = logging.getLogger(__name__)

_ERROR_LIMIT = 159
_STALL_LIMIT_MS = 5000 * (4 - 1) // 4
_RESET_MESSAGES = (b"Got a reset signal", b"Input Flush Signal")


class MbrolaError(Exception):
    """Raised when the mbrola process cannot be driven as requested."""


class MbrolaState(Enum):
    INACTIVE = 0
    IDLE = 1
    NEWDATA = 2
    AUDIO = 3
    WEDGED = 4


def _ignore_signals() -> None:
    for sig in (signal.SIGHUP, signal.SIGINT, signal.SIGQUIT, signal.SIGTERM):
        signal.signal(sig, signal.SIG_IGN)


class Mbrola:
    """One mbrola child process synthesising a single voice."""

    def __init__(self, executable: str = "./mbrola") -> None:
        self.executable = executable
        self.state = MbrolaState.INACTIVE
        self.frequency = 0
        self.volume = 1.0
        self._voice_path: str | None = None
        self._proc: subprocess.Popen[bytes] | None = None
        self._alive = False
        self._stat_fd = -1
        self._cmd_fd = -1
        self._audio_fd = -1
        self._error_fd = -1
        self._error = ""
        self._pending: deque[memoryview] = deque()
        self._stderr_tail = b""
        self._carry = b""

    # -- error bookkeeping -------------------------------------------------

    def _err(self, message: str) -> None:
        self._error = message[:_ERROR_LIMIT]
        log.error("mbrowrap error: %s", self._error)

    def _fail(self, message: str) -> MbrolaError:
        self._err(message)
        return MbrolaError(self._error)

    # -- process lifetime --------------------------------------------------

    def _start(self, voice_path: str) -> None:
        if self.state is not MbrolaState.INACTIVE:
            raise self._fail("mbrola init request when already initialized")

        args = [
            self.executable, "-e", "-v", f"{self.volume:g}", voice_path, "-", "-.wav",
        ]
        try:
            proc = subprocess.Popen(
                args,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                bufsize=0,
                preexec_fn=_ignore_signals,
            )
        except OSError as exc:
            raise self._fail(f"mbrola: {exc.strerror}") from exc

        try:
            stat_fd = os.open(f"/proc/{proc.pid}/stat", os.O_RDONLY)
        except OSError as exc:
            self._discard(proc)
            raise self._fail(f"/proc is unaccessible: {exc.strerror}") from exc

        assert proc.stdin and proc.stdout and proc.stderr
        try:
            for stream in (proc.stdin, proc.stdout, proc.stderr):
                os.set_blocking(stream.fileno(), False)
        except OSError as exc:
            os.close(stat_fd)
            self._discard(proc)
            raise self._fail(f"fcntl(): {exc.strerror}") from exc

        self._proc = proc
        self._alive = True
        self._stat_fd = stat_fd
        self._cmd_fd = proc.stdin.fileno()
        self._audio_fd = proc.stdout.fileno()
        self._error_fd = proc.stderr.fileno()
        self._stderr_tail = b""
        self._carry = b""
        self.state = MbrolaState.IDLE

    @staticmethod
    def _discard(proc: subprocess.Popen[bytes]) -> None:
        for stream in (proc.stdin, proc.stdout, proc.stderr):
            if stream is not None:
                stream.close()
        proc.wait()

    def _stop(self) -> None:
        if self.state is MbrolaState.INACTIVE:
            return
        proc = self._proc
        os.close(self._stat_fd)
        self._stat_fd = -1
        if proc is not None:
            for stream in (proc.stdin, proc.stdout, proc.stderr):
                if stream is not None:
                    stream.close()
            if self._alive:
                proc.send_signal(signal.SIGTERM)
            try:
                proc.wait(timeout=5)
            except subprocess.TimeoutExpired:
                proc.kill()
                proc.wait()
        self._proc = None
        self._alive = False
        self.state = MbrolaState.INACTIVE

    def _died(self) -> bool:
        assert self._proc is not None
        try:
            status = self._proc.wait(timeout=1.0)
        except subprocess.TimeoutExpired:
            msg = "mbrola closed stderr and did not exit"
        else:
            self._alive = False
            if status < 0:
                msg = f"mbrola died by signal {-status}"
            else:
                msg = f"mbrola exited with status {status}"
        log.error("mbrowrap error: %s", msg)
        if not self._error:
            self._error = msg[:_ERROR_LIMIT]
        else:
            self._error = f"{self._error}, ({msg})"[:_ERROR_LIMIT]
        return True

    def _has_errors(self) -> bool:
        """Collect mbrola's stderr; True only if it failed or went away."""
        while True:
            try:
                chunk = os.read(self._error_fd, 256)
            except BlockingIOError:
                return False
            except OSError as exc:
                self._err(f"read(error): {exc.strerror}")
                return True
            if not chunk:
                return self._died()

            *lines, self._stderr_tail = (self._stderr_tail + chunk).split(b"\n")
            for line in lines:
                if line.startswith(_RESET_MESSAGES):
                    continue
                text = line.decode(errors="replace")
                log.warning("mbrola: %s", text)
                # Not fatal; kept so that last_error() can report it.
                self._error = text[:_ERROR_LIMIT]

    def _is_idle(self) -> bool:
        try:
            stat = os.pread(self._stat_fd, 512, 0)
        except OSError:
            return False
        close = stat.rfind(b")")
        if close < 0 or close + 2 >= len(stat):
            return False
        return stat[close + 1 : close + 3] == b" S"

    # -- pipe traffic ------------------------------------------------------

    def _send(self, cmd: bytes) -> int:
        if not self._alive:
            raise MbrolaError("mbrola is not running")
        try:
            written = os.write(self._cmd_fd, cmd)
        except BlockingIOError:
            written = 0
        except BrokenPipeError as exc:
            if self._has_errors():
                raise MbrolaError(self._error) from exc
            raise self._fail(f"write(): {exc.strerror}") from exc
        except OSError as exc:
            raise self._fail(f"write(): {exc.strerror}") from exc

        if written != len(cmd):
            self._pending.append(memoryview(cmd)[written:])
        return len(cmd)

    def _write_pending(self) -> bool:
        """Write what the command pipe takes; True if more blocks remain queued."""
        head = self._pending[0]
        try:
            written = os.write(self._cmd_fd, head)
        except BlockingIOError:
            return False
        except BrokenPipeError as exc:
            if self._has_errors():
                raise MbrolaError(self._error) from exc
            raise self._fail(f"write(): {exc.strerror}") from exc
        except OSError as exc:
            raise self._fail(f"write(): {exc.strerror}") from exc
        if written != len(head):
            self._pending[0] = head[written:]
            return False
        self._pending.popleft()
        return bool(self._pending)

    def _receive(self, bufsize: int) -> bytes:
        if not self._alive:
            raise MbrolaError("mbrola is not running")

        buffer = bytearray()
        wait = 1
        while len(buffer) < bufsize:
            poller = select.poll()
            poller.register(self._audio_fd, select.POLLIN)
            poller.register(self._error_fd, select.POLLIN)
            if self._pending:
                poller.register(self._cmd_fd, select.POLLOUT)

            idle = self._is_idle()
            events = dict(poller.poll(0 if idle else wait))
            if not events:
                if idle:
                    self.state = MbrolaState.IDLE
                    break
                if wait >= _STALL_LIMIT_MS:
                    self.state = MbrolaState.WEDGED
                    self._err("mbrola process is stalled")
                    break
                wait *= 4
                continue
            wait = 1

            if events.get(self._error_fd) and self._has_errors():
                raise MbrolaError(self._error)

            if self._pending and events.get(self._cmd_fd):
                if self._write_pending():
                    continue

            if events.get(self._audio_fd):
                try:
                    chunk = os.read(self._audio_fd, bufsize - len(buffer))
                except BlockingIOError:
                    continue
                except OSError as exc:
                    raise self._fail(f"read(): {exc.strerror}") from exc
                buffer += chunk
                self.state = MbrolaState.AUDIO
        return bytes(buffer)

    # -- public interface --------------------------------------------------

    def init(self, voice_path: str) -> None:
        """Start mbrola on a voice database and learn its sample rate."""
        self._start(voice_path)
        try:
            self._send(b"#\n")
            header = self._receive(45)
        except MbrolaError:
            self._stop()
            raise

        if len(header) != 44:
            self._err("unable to get .wav Header from mbrola")
            self._stop()
            raise MbrolaError(self._error)
        if header[:4] != b"RIFF" or header[8:16] != b"WAVEfmt ":
            self._err("mbrola did not return a .wav Header")
            self._stop()
            raise MbrolaError(self._error)

        self.frequency = int.from_bytes(header[24:28], "little")
        log.info("mbrowrap: voice samplerate = %d", self.frequency)
        self._voice_path = voice_path
        log.info("mbrola started.")

    def close(self) -> None:
        """Stop mbrola and forget the voice and volume."""
        self._stop()
        self._pending.clear()
        self._voice_path = None
        self.volume = 1.0

    def reset(self) -> bool:
        """Abort ongoing work and drop buffered audio; True on success."""
        if self.state is MbrolaState.IDLE:
            return True
        if not self._alive or self._proc is None:
            return False

        success = True
        try:
            os.kill(self._proc.pid, signal.SIGUSR1)
        except OSError:
            success = False
        self._pending.clear()
        try:
            if os.write(self._cmd_fd, b"\n#\n") != 3:
                success = False
        except OSError:
            success = False
        while True:
            try:
                if not os.read(self._audio_fd, 4096):
                    success = False
                    break
            except BlockingIOError:
                break
            except OSError:
                success = False
                break
        self._carry = b""
        if not self._has_errors() and success:
            self.state = MbrolaState.IDLE
        return success

    def read(self, nb_samples: int) -> bytes:
        """Return at most ``nb_samples`` 16-bit little-endian samples as bytes."""
        if nb_samples < 0:
            raise ValueError("nb_samples must not be negative")
        wanted = nb_samples * 2 - len(self._carry)
        data = self._carry + (self._receive(wanted) if wanted > 0 else b"")
        cut = len(data) - len(data) % 2
        self._carry = data[cut:]
        return data[:cut]

    def write(self, data: str | bytes) -> int:
        """Queue phoneme text for mbrola; return the number of bytes accepted."""
        if isinstance(data, str):
            data = data.encode()
        self.state = MbrolaState.NEWDATA
        return self._send(data)

    def flush(self) -> None:
        """Ask mbrola to synthesise everything written so far."""
        self._send(b"\n#\n")

    def set_volume_ratio(self, value: float) -> None:
        """Change the output volume, restarting mbrola if it is idle."""
        if value == self.volume:
            return
        self.volume = value
        if self.state is not MbrolaState.IDLE or self._voice_path is None:
            return
        voice_path = self._voice_path
        self._stop()
        self.init(voice_path)

    def last_error(self) -> str:
        """The latest error or warning message, or an empty string."""
        if self._alive:
            self._has_errors()
        return self._error

    def reset_error(self) -> None:
        """Forget any pending error message."""
        self._error = ""