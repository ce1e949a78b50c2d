"""Dotted/bracketed path helpers for addressing values inside JSON."""

from typing import Any, List, Union
from ..types import UNDEFINED

PathSegment = Union[str, int]

_ESCAPED_CHARS = ('\\', '.', '[')


def escape_path_segment(segment: str) -> str:
    """Escape a key so that '.', '[' and '\\' inside it stay part of one segment."""
    if not isinstance(segment, str):
        segment = str(segment)
    for ch in _ESCAPED_CHARS:
        segment = segment.replace(ch, '\\' + ch)
    return segment


def join_key(parent: str, key: str) -> str:
    """Append an object key to a path."""
    escaped = escape_path_segment(key)
    return f"{parent}.{escaped}" if parent else escaped


def join_index(parent: str, index: int) -> str:
    """Append a list index to a path."""
    return f"{parent}[{index}]"


def split_path(path: str) -> List[PathSegment]:
    """
    Split a path such as ``users[0].address.city`` into segments.

    Keys come back as strings, list indices as ints. The empty path
    addresses the root and yields no segments.

    Raises:
        ValueError: If a bracket is unterminated or holds a non-integer
    """
    segments: List[PathSegment] = []
    buf: List[str] = []
    key_open = bool(path) and not path.startswith('[')
    i = 0

    while i < len(path):
        ch = path[i]
        if ch == '\\' and i + 1 < len(path):
            buf.append(path[i + 1])
            i += 2
            continue
        if ch == '.':
            if key_open:
                segments.append(''.join(buf))
            buf = []
            key_open = True
            i += 1
            continue
        if ch == '[':
            end = path.find(']', i)
            if end == -1:
                raise ValueError(f"Unterminated index in path: {path!r}")
            if key_open:
                segments.append(''.join(buf))
                buf = []
                key_open = False
            segments.append(int(path[i + 1:end]))
            i = end + 1
            continue
        buf.append(ch)
        i += 1

    if key_open:
        segments.append(''.join(buf))
    return segments


def describe_path(path: str) -> str:
    """Human-readable label for a path, e.g. ``data > items[0] > tags``."""
    if not path:
        return "(root)"

    parts: List[str] = []
    for segment in split_path(path):
        if isinstance(segment, int) and parts:
            parts[-1] += f"[{segment}]"
        elif isinstance(segment, int):
            parts.append(f"[{segment}]")
        else:
            parts.append(segment)
    return " > ".join(parts)


def get_value_by_path(data: Any, path: str) -> Any:
    """Retrieve the value at a path, or UNDEFINED if any step is missing."""
    try:
        segments = split_path(path)
    except ValueError:
        return UNDEFINED

    value = data
    for segment in segments:
        if isinstance(segment, int):
            if not isinstance(value, list) or not 0 <= segment < len(value):
                return UNDEFINED
        elif not isinstance(value, dict) or segment not in value:
            return UNDEFINED
        value = value[segment]
    return value
