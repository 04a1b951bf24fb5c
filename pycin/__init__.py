__all__ = [
    'DEFAULT_BUFSIZE',
    'DecodingReader',
    'ByteSource',
    'StreamSource',
    'TextStreamSource',
    'ChunkSource',
    'open_source',
    'register_parser',
    'PycinError',
    '__version__'
]

from .__version__ import __version__
from .errors import PycinError
from .parsers import register_parser
from .reader import DEFAULT_BUFSIZE, DecodingReader
from .source import (
    ByteSource,
    StreamSource,
    TextStreamSource,
    ChunkSource,
    open_source
)
