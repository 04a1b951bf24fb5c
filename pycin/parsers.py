"""Text parsers for the token scanner.

A parser is a callable that takes the token text and returns a value or
raises an exception. Types without a registered parser are used as parsers
themselves, so `int`, `float`, `decimal.Decimal`, `fractions.Fraction` and
user classes with a one-argument constructor work out of the box.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

Parser = Callable[[str], Any]

PARSE_ERRORS = (ValueError, TypeError, ArithmeticError)

_PARSERS: dict[Any, Parser] = {}


def register_parser(type_: Any, fn: Parser) -> None:
    """Add the new type parser, replacing the existing one."""
    _PARSERS[type_] = fn


def unregister_parser(type_: Any) -> Optional[Parser]:
    return _PARSERS.pop(type_, None)


def get_parser(type_: Any) -> Parser:
    try:
        return _PARSERS[type_]
    except (KeyError, TypeError):
        pass
    if callable(type_):
        return type_
    raise TypeError(f"no parser for {type_!r}")


def parse(text: str, type_: Any = str) -> Any:
    """Parse the token text as `type_`.

    Return None if the text does not satisfy the parser.
    """
    return apply_parser(get_parser(type_), text)


def apply_parser(fn: Parser, text: str) -> Any:
    try:
        return fn(text)
    except PARSE_ERRORS:
        return None


def parse_bool(text: str) -> bool:
    if text == "true":
        return True
    if text == "false":
        return False
    raise ValueError(f"invalid bool literal: {text!r}")


def parse_bytes(text: str) -> bytes:
    return text.encode("UTF-8")


register_parser(str, str)
register_parser(bool, parse_bool)
register_parser(bytes, parse_bytes)
