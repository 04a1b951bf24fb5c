import logging

from pathlib import Path
from typing import Any, BinaryIO, Iterable, Iterator, Optional

from pycin.config import READER_OPTIONS, TYPES, Config, read_file
from pycin.errors import PycinError
from pycin.reader import DecodingReader
from pycin.source import StreamSource

logging.basicConfig(format="{name}: {message}", style="{")
logger = logging.getLogger("pycin")


class TokenError(PycinError):
    """Token cannot be parsed as the requested type."""


class InputError(PycinError):
    """Input cannot be decoded."""


def set_verbosity(*, verbose=False, debug=False) -> None:
    if debug:
        logger.setLevel(logging.DEBUG)
    elif verbose:
        logger.setLevel(logging.INFO)


def load_config(*,
                config_file: Optional[Path] = None,
                defines: Iterable[str] = (),
                overrides: Optional[dict[str, Any]] = None) -> Config:
    """Build the reader configuration.

    Options are applied in order: schema defaults, the configuration file,
    `name=value` definitions and explicit overrides (command line flags).
    """
    if config_file is not None:
        cfg = read_file(READER_OPTIONS, config_file)
        logger.info("loaded config file %s", config_file)
    else:
        cfg = Config(READER_OPTIONS)

    cfg.parse(defines)
    overrides = {k: v for k, v in (overrides or {}).items() if v is not None}
    if overrides:
        cfg.override(overrides)
    cfg.validate()

    return cfg


def open_reader(stream: BinaryIO, cfg: Config) -> DecodingReader:
    """Create the reader over the stream and skip header lines."""
    # the stream belongs to the caller
    reader = DecodingReader(StreamSource(stream, closefd=False), cfg.bufsize)
    logger.info("reading %s, buffer size %d", reader.name, cfg.bufsize)

    for _ in range(cfg.skip):
        reader.skip_line()

    return reader


def iter_tokens(reader: DecodingReader, type_name: str) -> Iterator[Any]:
    """Yield tokens of the named type until the end of data.

    Raises:
        TokenError: A token is not valid for the type, or the input holds
            a malformed UTF-8 sequence, while it still has data.
    """
    type_ = TYPES[type_name]
    count = 0

    for value in reader.tokens(type_):
        count += 1
        yield value

    if reader.valid():
        raise TokenError(f"{reader.name}: cannot read token {count + 1}: "
                         f"not a valid {type_name} or not valid UTF-8")

    logger.info("read %d tokens", count)


def iter_lines(reader: DecodingReader) -> Iterator[str]:
    count = 0
    for line in reader.lines():
        count += 1
        yield line
    logger.info("read %d lines", count)


def iter_chars(reader: DecodingReader) -> Iterator[str]:
    """Yield decoded characters until the end of data.

    Raises:
        InputError: The input holds a malformed UTF-8 sequence.
    """
    yield from reader

    if reader.valid():
        raise InputError(f"{reader.name}: malformed UTF-8 sequence "
                         f"before byte {reader.cursor} of the buffer")

    if reader.exception is not None:
        logger.warning("%s: %s", reader.name, reader.exception)
