from __future__ import annotations

import logging

from os import PathLike, fspath
from typing import Any, Iterator, Optional

from .parsers import apply_parser, get_parser
from .source import ByteSource, StreamSource, open_source
from .utf8 import classify, shift_in, to_char

DEFAULT_BUFSIZE = 8000

logger = logging.getLogger("pycin.reader")


class DecodingReader:
    """
    Reads a byte source and produces a stream of characters, tokens and lines.

    The source is read in chunks of `bufsize` bytes, and characters are
    decoded from the buffer one at a time, so a huge single-line input is
    never loaded at once.

    The reader never raises while reading. Every operation returns None
    when there is nothing to return, which can mean the end of data, a
    malformed UTF-8 sequence or a token that could not be parsed. The
    source exhaustion and source failures set the sticky error flag, which
    is checked with `valid()`; nothing else sets it.

    Consumed bytes are never put back: if a token fails to parse, it is
    lost.
    """

    def __init__(self, source: Any, bufsize: int = DEFAULT_BUFSIZE):
        if bufsize < 1:
            raise ValueError(f"buffer size must be positive, got {bufsize}")

        self.source: ByteSource = open_source(source)
        self.name = self.source.name
        self.buffer = bytearray(bufsize)
        self.cursor = 0
        self.limit = 0
        self.errored = False
        self.exception: Optional[BaseException] = None
        self.closed = False

        self._view = memoryview(self.buffer)

    @classmethod
    def open(cls,
             path: str | PathLike[str],
             bufsize: int = DEFAULT_BUFSIZE) -> DecodingReader:
        """Create a reader over the file, opened in binary mode."""
        stream = open(fspath(path), 'rb', buffering=0)
        try:
            return cls(StreamSource(stream), bufsize)
        except Exception:
            stream.close()
            raise

    @property
    def capacity(self) -> int:
        return len(self.buffer)

    def refill(self) -> None:
        self.cursor = 0
        try:
            count = self.source.fill(self._view)
        except (OSError, ValueError) as e:
            logger.debug("%s: source failed: %s", self.name, e)
            self.exception = e
            self.errored = True
            return

        if not isinstance(count, int) or not 0 <= count <= self.capacity:
            logger.debug("%s: source returned invalid count %r",
                         self.name, count)
            self.exception = ValueError(f"invalid byte count: {count!r}")
            self.errored = True
        elif count == 0:
            logger.debug("%s: source exhausted", self.name)
            self.errored = True
        else:
            logger.debug("%s: read %d bytes", self.name, count)
            self.limit = count

    def next_byte(self) -> Optional[int]:
        if self.errored:
            return None
        if self.cursor >= self.limit:
            self.refill()
            if self.errored:
                return None
        byte = self.buffer[self.cursor]
        self.cursor += 1
        return byte

    def next_char(self) -> Optional[str]:
        """Decode a single character.

        Return None if the source is exhausted, including the middle of a
        sequence, or if the bytes do not form a Unicode scalar value.
        """
        lead = self.next_byte()
        if lead is None:
            return None

        info = classify(lead)
        if info is None:
            return None
        count, code = info
        if count == 0:
            return chr(code)

        for _ in range(count):
            byte = self.next_byte()
            if byte is None:
                return None
            code = shift_in(code, byte)

        return to_char(code)

    read_char = next_char

    def read(self, type_: Any = str) -> Any:
        """Read the next whitespace-delimited token and parse it.

        Leading whitespace is skipped. The whitespace character that ends
        the token is consumed.

        Args:
            type_: Target type or any callable that takes a string. See
                `pycin.parsers`.
        """
        # an unknown type must fail before any input is consumed
        fn = get_parser(type_)

        chars: list[str] = []
        while (char := self.next_char()) is not None:
            if char.isspace():
                if chars:
                    break
            else:
                chars.append(char)

        if not chars:
            return None
        return apply_parser(fn, ''.join(chars))

    def read_line(self) -> Optional[str]:
        """Read characters up to the line feed, excluding it.

        Return None only at the end of data. An empty line gives an empty
        string. Carriage returns are kept.
        """
        chars: list[str] = []
        while (char := self.next_char()) is not None:
            if char == '\n':
                break
            chars.append(char)

        if self.errored and not chars:
            return None
        return ''.join(chars)

    def skip_line(self) -> None:
        while (char := self.next_char()) is not None:
            if char == '\n':
                break

    def valid(self) -> bool:
        return not self.errored

    def tokens(self, type_: Any = str) -> Iterator[Any]:
        """Yield parsed tokens until the first read that returns None."""
        while (value := self.read(type_)) is not None:
            yield value

    def lines(self) -> Iterator[str]:
        while (line := self.read_line()) is not None:
            yield line

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        char = self.next_char()
        if char is None:
            raise StopIteration
        return char

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self.errored = True
        self._view.release()
        self.source.close()

    def __enter__(self) -> DecodingReader:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self):
        return (f"DecodingReader({self.name!r}, capacity={self.capacity}, "
                f"cursor={self.cursor}, limit={self.limit}, "
                f"errored={self.errored})")
