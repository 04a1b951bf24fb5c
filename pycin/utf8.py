from __future__ import annotations

from typing import Optional

MAX_SCALAR = 0x10FFFF
SURROGATE_MIN = 0xD800
SURROGATE_MAX = 0xDFFF

CONTINUATION_MASK = 0x3F


def classify(lead: int) -> Optional[tuple[int, int]]:
    """Classify the leading byte of a UTF-8 sequence.

    Return a pair of the number of continuation bytes that follow and the
    payload bits carried by the leading byte. Return None if the byte
    cannot start a sequence: a stray continuation byte (10xxxxxx) or one
    of 0xF8..0xFF.

    ```
    0xxxxxxx  -> (0, 0xxxxxxx)
    110xxxxx  -> (1, xxxxx)
    1110xxxx  -> (2, xxxx)
    11110xxx  -> (3, xxx)
    ```
    """
    if lead & 0x80 == 0:
        return 0, lead
    if lead & 0xC0 == 0x80:
        return None
    if lead & 0xE0 == 0xC0:
        return 1, lead & 0x1F
    if lead & 0xF0 == 0xE0:
        return 2, lead & 0x0F
    if lead & 0xF8 == 0xF0:
        return 3, lead & 0x07
    return None


def shift_in(code: int, byte: int) -> int:
    """Append the low 6 bits of a continuation byte to the code."""
    return (code << 6) | (byte & CONTINUATION_MASK)


def to_char(code: int) -> Optional[str]:
    """Convert an assembled code to a character if it is a scalar value."""
    if code < 0 or code > MAX_SCALAR:
        return None
    if SURROGATE_MIN <= code <= SURROGATE_MAX:
        return None
    return chr(code)
