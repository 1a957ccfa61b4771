import io
import threading

from shellexec.capture import CaptureBuffer, Mirror, Tee


def test_capture_buffer_concurrent_writes() -> None:
    buffer = CaptureBuffer()

    def writer(chunk: bytes) -> None:
        for _ in range(1000):
            buffer.write(chunk)

    threads = [threading.Thread(target=writer, args=(c,)) for c in (b"ab", b"cd")]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    data = buffer.getvalue()
    assert len(data) == 4000
    assert data.count(b"ab") == 1000
    assert data.count(b"cd") == 1000


def test_capture_buffer_text_replaces_invalid_utf8() -> None:
    buffer = CaptureBuffer()
    buffer.write(b"ok \xff")
    assert buffer.text() == "ok �"


def test_mirror_binary_stream() -> None:
    raw = io.BytesIO()
    stream = io.TextIOWrapper(raw, encoding="utf-8")
    stream.write("text first ")
    Mirror(stream).write(b"then bytes")
    assert raw.getvalue() == b"text first then bytes"


def test_mirror_text_stream_split_character() -> None:
    stream = io.StringIO()
    mirror = Mirror(stream)
    encoded = "héllo".encode()
    mirror.write(encoded[:2])
    mirror.write(encoded[2:])
    assert stream.getvalue() == "héllo"


class FailingSink:
    def __init__(self) -> None:
        self.calls = 0

    def write(self, data: bytes) -> None:
        self.calls += 1
        raise OSError("closed")


def test_tee_keeps_capturing_after_mirror_failure() -> None:
    capture = CaptureBuffer()
    mirror = FailingSink()
    tee = Tee(capture, mirror)
    tee.write(b"a")
    tee.write(b"b")
    assert capture.getvalue() == b"ab"
    assert isinstance(tee.error, OSError)
    assert mirror.calls == 1


def test_tee_without_mirror() -> None:
    capture = CaptureBuffer()
    tee = Tee(capture)
    tee.write(b"only captured")
    assert capture.getvalue() == b"only captured"
    assert tee.error is None
