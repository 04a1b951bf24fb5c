import string

_PRINTABLE = set(string.printable)
_WHITESPACE = set(string.whitespace)


def code_to_char(code: int) -> str:
    """Convert character code to a printable form.

    Whitespace is replaced by its escape sequence. ASCII characters that
    are not printable are written as `\\uXXXX`, other characters are
    returned as is if Python considers them printable.
    """
    c = chr(code)
    if c in _WHITESPACE:
        return repr(c)[1:-1]
    if c in _PRINTABLE or code > 0x7F and c.isprintable():
        return c
    code_hex = hex(code)[2:].rjust(4, '0')
    return fr"\u{code_hex}"


def describe_char(char: str) -> str:
    """Describe a character as `U+XXXX <char>`."""
    code = ord(char)
    return f"U+{code:04X} {code_to_char(code)}"
