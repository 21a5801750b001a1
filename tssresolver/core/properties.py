"""
Reader for the SDK folder's .properties files.

qualifier.properties and secretmap.properties use the java.util.Properties
line format:

- leading whitespace on every line is ignored
- lines starting with # or ! are comments
- a line ending in an odd number of backslashes continues on the next line
- the key ends at the first unescaped '=', ':' or whitespace
- backslash escapes (\\t, \\n, \\r, \\f, \\uXXXX, \\<char>) are decoded
"""

import logging
from pathlib import Path
from typing import Dict, List, Tuple


logger = logging.getLogger(__name__)

_WHITESPACE = " \t\f"
_SEPARATORS = "=:"
_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}


def load_properties(path: Path) -> Dict[str, str]:
    """
    Load a .properties file into an ordered dict.

    Args:
        path: File to read.

    Returns:
        Keys and values in file order. Empty if the file is missing or
        unreadable.
    """
    path = Path(path)
    if not path.is_file():
        logger.warning(f"Can't find {path.name} in {path.parent}")
        return {}

    try:
        text = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Problem reading properties file {path}: {e}")
        return {}

    return parse_properties(text)


def parse_properties(text: str) -> Dict[str, str]:
    """Parse properties text. Later duplicates override earlier ones."""
    props = {}
    for line in _logical_lines(text):
        key, value = _split_line(line)
        props[_unescape(key)] = _unescape(value)
    return props


def _ends_with_continuation(line: str) -> bool:
    trailing = len(line) - len(line.rstrip("\\"))
    return trailing % 2 == 1


def _logical_lines(text: str) -> List[str]:
    """Join continued natural lines, dropping blanks and comments."""
    natural = text.splitlines()
    logical = []
    i = 0
    while i < len(natural):
        line = natural[i].lstrip(_WHITESPACE)
        i += 1
        if not line or line[0] in "#!":
            continue

        while _ends_with_continuation(line):
            line = line[:-1]
            if i >= len(natural):
                break
            line += natural[i].lstrip(_WHITESPACE)
            i += 1

        logical.append(line)
    return logical


def _split_line(line: str) -> Tuple[str, str]:
    """Split a logical line into raw (still escaped) key and value."""
    end = 0
    while end < len(line):
        char = line[end]
        if char == "\\":
            end += 2
            continue
        if char in _SEPARATORS or char in _WHITESPACE:
            break
        end += 1

    key = line[:end]
    rest = line[end:].lstrip(_WHITESPACE)
    if rest[:1] in ("=", ":"):
        rest = rest[1:].lstrip(_WHITESPACE)
    return key, rest


def _unescape(raw: str) -> str:
    chars = []
    i = 0
    while i < len(raw):
        char = raw[i]
        if char != "\\" or i + 1 >= len(raw):
            chars.append(char)
            i += 1
            continue

        nxt = raw[i + 1]
        if nxt == "u":
            digits = raw[i + 2:i + 6]
            if len(digits) == 4 and all(c in "0123456789abcdefABCDEF" for c in digits):
                chars.append(chr(int(digits, 16)))
                i += 6
                continue
            logger.warning(f"Malformed \\u escape in properties value: {raw[i:i + 6]!r}")
            chars.append("u")
        else:
            chars.append(_ESCAPES.get(nxt, nxt))
        i += 2
    return "".join(chars)
