"""Process-wide reader over the standard input.

```python
from pycin.cin import cin

n = cin.read(int)
values = [cin.read(float) for _ in range(n)]
```

The reader is created on first use. All operations take one lock, so
operations from different threads never interleave, although the order in
which waiting threads get the lock is not defined.
"""

from __future__ import annotations

import sys
import logging
import threading

from typing import Any, Callable, Optional

from .reader import DEFAULT_BUFSIZE, DecodingReader

logger = logging.getLogger("pycin.cin")


def stdin_source() -> Any:
    return sys.stdin.buffer


class Cin:
    def __init__(self,
                 source_factory: Callable[[], Any] = stdin_source,
                 bufsize: int = DEFAULT_BUFSIZE):
        self.source_factory = source_factory
        self.bufsize = bufsize
        self._lock = threading.Lock()
        self._reader: Optional[DecodingReader] = None

    def _get_reader(self) -> DecodingReader:
        # must be called with the lock held
        if self._reader is None:
            self._reader = DecodingReader(self.source_factory(), self.bufsize)
            logger.debug("created %r", self._reader)
        return self._reader

    def read(self, type_: Any = str) -> Any:
        with self._lock:
            return self._get_reader().read(type_)

    def read_line(self) -> Optional[str]:
        with self._lock:
            return self._get_reader().read_line()

    def skip_line(self) -> None:
        with self._lock:
            self._get_reader().skip_line()

    def read_char(self) -> Optional[str]:
        with self._lock:
            return self._get_reader().next_char()

    def valid(self) -> bool:
        with self._lock:
            return self._get_reader().valid()

    @property
    def initialized(self) -> bool:
        return self._reader is not None


cin = Cin()
