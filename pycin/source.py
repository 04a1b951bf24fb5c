from __future__ import annotations

import io
import logging

from abc import abstractmethod
from typing import Any, Iterable, Iterator, Optional

logger = logging.getLogger("pycin.source")


class ByteSource:
    """Byte source interface

    A byte source fills a caller-provided buffer on demand. `fill` returns
    the number of bytes written into the buffer, which must not exceed its
    length. Zero means that the source is exhausted. I/O failures are
    reported by raising an exception (usually OSError).

    The reader owns its source, so `close` is called when the reader is
    closed.
    """

    name = "<source>"

    @abstractmethod
    def fill(self, buffer: memoryview) -> int:
        ...

    def close(self) -> None:
        pass

    def __repr__(self):
        return f"{type(self).__name__}({self.name!r})"


class StreamSource(ByteSource):
    """Source over a binary file object.

    Prefers `readinto1`, so an interactive stream returns what is available
    instead of blocking until the whole buffer is filled.
    """

    def __init__(self, stream: Any, closefd=True):
        self.stream = stream
        self.name = getattr(stream, 'name', '<stream>')
        self.closefd = closefd

        readable = getattr(stream, 'readable', None)
        if readable is not None and not readable():
            raise ValueError(f"stream must be readable: {self.name}")

        if hasattr(stream, 'readinto1'):
            self._fill = self._fill_readinto1
        elif hasattr(stream, 'readinto'):
            self._fill = self._fill_readinto
        else:
            self._fill = self._fill_read

        logger.debug("%s: filling with %s", self.name, self._fill.__name__)

    def fill(self, buffer: memoryview) -> int:
        return self._fill(buffer)

    def _fill_readinto1(self, buffer: memoryview) -> int:
        return self.stream.readinto1(buffer) or 0

    def _fill_readinto(self, buffer: memoryview) -> int:
        # None means a non-blocking stream has no data at the moment
        return self.stream.readinto(buffer) or 0

    def _fill_read(self, buffer: memoryview) -> int:
        data = self.stream.read(len(buffer))
        if not data:
            return 0
        size = len(data)
        buffer[:size] = data
        return size

    def close(self) -> None:
        if self.closefd:
            self.stream.close()


class _PendingBytes:
    # Bytes produced ahead of the consumer, handed out over several fills.

    def __init__(self):
        self.data = b""
        self.pos = 0

    def __bool__(self) -> bool:
        return self.pos < len(self.data)

    def set(self, data: bytes) -> None:
        self.data = data
        self.pos = 0

    def copy_to(self, buffer: memoryview) -> int:
        size = min(len(buffer), len(self.data) - self.pos)
        buffer[:size] = self.data[self.pos:self.pos + size]
        self.pos += size
        return size


class TextStreamSource(ByteSource):
    """Source over a text stream, re-encoded to UTF-8.

    A chunk of N characters may encode to more than N bytes, so the bytes
    that did not fit into the buffer are kept for the next fill.
    """

    def __init__(self, stream: io.TextIOBase, closefd=True):
        self.stream = stream
        self.name = getattr(stream, 'name', '<text stream>')
        self.closefd = closefd
        self._pending = _PendingBytes()

        if not stream.readable():
            raise ValueError(f"stream must be readable: {self.name}")

    def fill(self, buffer: memoryview) -> int:
        if not self._pending:
            text = self.stream.read(len(buffer))
            if not text:
                return 0
            self._pending.set(text.encode("UTF-8"))
        return self._pending.copy_to(buffer)

    def close(self) -> None:
        if self.closefd:
            self.stream.close()


class ChunkSource(ByteSource):
    """Source over an iterable of byte chunks.

    Empty chunks are skipped, so only the end of the iterable exhausts
    the source.
    """

    def __init__(self, chunks: Iterable[bytes], name="<chunks>"):
        self.name = name
        self._chunks: Optional[Iterator[bytes]] = iter(chunks)
        self._pending = _PendingBytes()

    def fill(self, buffer: memoryview) -> int:
        while not self._pending:
            if self._chunks is None:
                return 0
            try:
                chunk = next(self._chunks)
            except StopIteration:
                self._chunks = None
                return 0
            if not isinstance(chunk, (bytes, bytearray, memoryview)):
                raise ValueError(f"{self.name}: expected a bytes chunk, "
                                 f"got {type(chunk).__name__}")
            self._pending.set(memoryview(chunk).tobytes())
        return self._pending.copy_to(buffer)

    def close(self) -> None:
        close = getattr(self._chunks, 'close', None)
        if close is not None:
            close()
        self._chunks = None
        self._pending.set(b"")


def open_source(obj: Any) -> ByteSource:
    """Create a byte source for the object.

    Accepts ByteSource instances (returned as is), strings (encoded to
    UTF-8), bytes-like objects, text and binary streams, and iterables of
    byte chunks.

    Raises:
        ValueError: The stream is not readable.
        TypeError: The object cannot be used as a source.
    """
    if isinstance(obj, ByteSource):
        return obj
    if isinstance(obj, str):
        source = StreamSource(io.BytesIO(obj.encode("UTF-8")))
        source.name = "<string>"
        return source
    if isinstance(obj, (bytes, bytearray, memoryview)):
        source = StreamSource(io.BytesIO(bytes(obj)))
        source.name = "<bytes>"
        return source
    if isinstance(obj, io.TextIOBase):
        return TextStreamSource(obj)
    if isinstance(obj, io.IOBase) or hasattr(obj, 'read'):
        return StreamSource(obj)
    if hasattr(obj, '__iter__'):
        return ChunkSource(obj)

    raise TypeError(f"cannot read from {type(obj).__name__} object")
