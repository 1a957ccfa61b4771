"""Sinks that receive bytes drained from a child process."""

import codecs
import threading
from dataclasses import dataclass, field
from typing import IO, Any, Protocol


class Sink(Protocol):
    """Destination for chunks of output bytes."""

    def write(self, data: bytes) -> None:
        ...


@dataclass
class CaptureBuffer:
    """Append-only byte accumulator that is safe to write from multiple threads."""

    _data: bytearray = field(default_factory=bytearray, init=False, repr=False)
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False
    )

    def write(self, data: bytes) -> None:
        with self._lock:
            self._data += data

    def getvalue(self) -> bytes:
        with self._lock:
            return bytes(self._data)

    def text(self) -> str:
        """Captured bytes decoded as UTF-8, with invalid sequences replaced."""
        return self.getvalue().decode("utf-8", errors="replace")


class Mirror:
    """Forwards output bytes to a (usually terminal) stream as they arrive.

    Streams with a binary `buffer` attribute, like `sys.stdout`, receive the raw
    bytes. Text-only streams receive incrementally decoded UTF-8, so a multibyte
    character split across chunks is not mangled.
    """

    def __init__(self, stream: IO[Any]):
        self._stream = stream
        self._binary: IO[bytes] | None = getattr(stream, "buffer", None)
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    def write(self, data: bytes) -> None:
        if self._binary is not None:
            # Anything already written through the text layer goes out first.
            self._stream.flush()
            self._binary.write(data)
            self._binary.flush()
            return
        if text := self._decoder.decode(data):
            self._stream.write(text)
            self._stream.flush()


class Tee:
    """Writes each chunk to a capture sink and then to an optional mirror.

    Capturing always happens. The first mirror failure is remembered in
    `error` and disables mirroring for the rest of the stream, so the pipe keeps
    draining and no captured output is lost.
    """

    def __init__(self, capture: Sink, mirror: Sink | None = None):
        self.capture = capture
        self.mirror = mirror
        self.error: Exception | None = None

    def write(self, data: bytes) -> None:
        self.capture.write(data)
        if self.mirror is None or self.error is not None:
            return
        try:
            self.mirror.write(data)
        except Exception as e:
            self.error = e
