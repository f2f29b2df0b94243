"""
Parser for the ``key=value`` properties file format.

Follows the classic properties rules: ``#`` and ``!`` comment lines, ``=``,
``:`` or whitespace separators, backslash line continuations and the
``\\t \\n \\r \\f \\uXXXX`` escapes. Files are decoded as ISO-8859-1 unless an
encoding is given; non-Latin characters are normally written as ``\\uXXXX``.
"""

import re
from typing import BinaryIO, Iterator, Optional, Tuple, Union

from ...domain.models import FlatProperties
from ...infrastructure.exceptions import ParseError

DEFAULT_ENCODING = "iso-8859-1"

_WHITESPACE = " \t\f"
_SEPARATORS = "=:"
_SIMPLE_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def _ends_with_continuation(line: str) -> bool:
    trailing = len(line) - len(line.rstrip("\\"))
    return trailing % 2 == 1


def _logical_lines(text: str) -> Iterator[Tuple[int, str]]:
    """Yield (line number, logical line) with comments dropped and continuations joined."""
    natural = _LINE_BREAK.split(text)
    index = 0
    while index < len(natural):
        line_number = index + 1
        line = natural[index].lstrip(_WHITESPACE)
        index += 1
        if not line or line[0] in "#!":
            continue
        while _ends_with_continuation(line):
            line = line[:-1]
            if index >= len(natural):
                break
            line += natural[index].lstrip(_WHITESPACE)
            index += 1
        yield line_number, line


def _split_key_value(line: str) -> Tuple[str, str]:
    key_end = len(line)
    value_start = len(line)
    has_separator = False
    escaped = False

    for position, char in enumerate(line):
        if escaped:
            escaped = False
            continue
        if char == "\\":
            escaped = True
        elif char in _SEPARATORS:
            key_end, value_start, has_separator = position, position + 1, True
            break
        elif char in _WHITESPACE:
            key_end, value_start = position, position + 1
            break

    while value_start < len(line) and line[value_start] in _WHITESPACE:
        value_start += 1
    if not has_separator and value_start < len(line) and line[value_start] in _SEPARATORS:
        value_start += 1
        while value_start < len(line) and line[value_start] in _WHITESPACE:
            value_start += 1

    return line[:key_end], line[value_start:]


def _unescape(raw: str, line_number: int, source: Optional[str]) -> str:
    chars = []
    position = 0
    while position < len(raw):
        char = raw[position]
        position += 1
        if char != "\\" or position >= len(raw):
            chars.append(char)
            continue
        char = raw[position]
        position += 1
        if char == "u":
            digits = raw[position:position + 4]
            if len(digits) < 4 or not all(d in "0123456789abcdefABCDEF" for d in digits):
                raise ParseError(
                    "Malformed \\uxxxx encoding",
                    resource=source,
                    line=line_number
                )
            chars.append(chr(int(digits, 16)))
            position += 4
        else:
            chars.append(_SIMPLE_ESCAPES.get(char, char))
    return "".join(chars)


def parse_properties(text: str, source: Optional[str] = None) -> FlatProperties:
    """Parse properties text; a repeated key keeps its last value."""
    properties: FlatProperties = {}
    for line_number, line in _logical_lines(text):
        raw_key, raw_value = _split_key_value(line)
        key = _unescape(raw_key, line_number, source)
        properties[key] = _unescape(raw_value, line_number, source)
    return properties


def load_properties(
    stream: Union[BinaryIO, bytes],
    encoding: str = DEFAULT_ENCODING,
    source: Optional[str] = None
) -> FlatProperties:
    """Read a whole properties stream and parse it."""
    data = stream if isinstance(stream, bytes) else stream.read()
    try:
        text = data.decode(encoding)
    except UnicodeDecodeError as e:
        raise ParseError(
            f"Properties content is not valid {encoding}",
            resource=source,
            cause=e
        ) from e
    return parse_properties(text, source)
