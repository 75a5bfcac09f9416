"""
Dotted field-path access over nested records.

A field path such as ``"user.address.city"`` addresses a value inside nested
mappings. A backslash escapes the character that follows it, so a key that
itself contains a dot is written ``"labels.app\\.kubernetes\\.io"``. Empty
segments are ignored (``"a..b"`` is the same path as ``"a.b"``).

Semantics at each failure point:
    get_field     absent segment or non-mapping intermediate -> MISSING
    set_field     absent intermediates are created; a non-mapping
                  intermediate raises FieldTypeError (never overwritten);
                  with overwrite=False an existing final key raises
                  FieldConflictError. The record is untouched on failure.
    delete_field  absent path is a no-op returning MISSING
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, MutableMapping, Sequence, Tuple, Union

from .exceptions import FieldConflictError, FieldTypeError

FieldPath = Union[str, Sequence[str]]


class _Missing:
    """Sentinel type for absent fields (distinct from a JSON null)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


@lru_cache(maxsize=1024)
def parse_path(key: str) -> Tuple[str, ...]:
    """
    Split a dotted key into path segments.

    Examples:
        >>> parse_path("a.b.c")
        ('a', 'b', 'c')
        >>> parse_path("foo\\\\.bar")
        ('foo.bar',)

    Raises:
        ValueError: If the key yields no segments.
    """
    segments = []
    scratch = []
    escape = False
    for char in key:
        if escape:
            scratch.append(char)
            escape = False
        elif char == "\\":
            escape = True
        elif char == ".":
            if scratch:
                segments.append("".join(scratch))
                scratch = []
        else:
            scratch.append(char)

    if scratch:
        segments.append("".join(scratch))

    if not segments:
        raise ValueError(f"Field path '{key}' is empty")
    return tuple(segments)


def format_path(segments: Sequence[str]) -> str:
    """Render segments back into a dotted key, escaping literal dots."""
    return ".".join(
        segment.replace("\\", "\\\\").replace(".", "\\.") for segment in segments
    )


def _segments(path: FieldPath) -> Tuple[str, ...]:
    if isinstance(path, str):
        return parse_path(path)
    segments = tuple(path)
    if not segments:
        raise ValueError("Field path is empty")
    return segments


def _label(path: FieldPath) -> str:
    return path if isinstance(path, str) else format_path(path)


def get_field(record: MutableMapping[str, Any], path: FieldPath) -> Any:
    """Return the value at ``path`` or MISSING."""
    current: Any = record
    for segment in _segments(path):
        if not isinstance(current, MutableMapping) or segment not in current:
            return MISSING
        current = current[segment]
    return current


def has_field(record: MutableMapping[str, Any], path: FieldPath) -> bool:
    """Return True when ``path`` resolves to a value (a JSON null counts)."""
    return get_field(record, path) is not MISSING


def set_field(
    record: MutableMapping[str, Any],
    path: FieldPath,
    value: Any,
    overwrite: bool = True,
) -> MutableMapping[str, Any]:
    """
    Assign ``value`` at ``path``, creating intermediate mappings as needed.

    Returns:
        The same record object, for chaining.

    Raises:
        FieldTypeError: If an intermediate segment holds a non-mapping value.
        FieldConflictError: If overwrite is False and the field already exists.
    """
    segments = _segments(path)
    if not isinstance(record, MutableMapping):
        raise FieldTypeError("record is not an object", field=_label(path))

    # Validate the whole walk before mutating anything.
    current: Any = record
    depth = 0
    for segment in segments[:-1]:
        if segment not in current:
            break
        current = current[segment]
        depth += 1
        if not isinstance(current, MutableMapping):
            raise FieldTypeError(
                f"target key <{format_path(segments[:depth])}> is not an object",
                field=_label(path),
            )
    else:
        if not overwrite and segments[-1] in current:
            raise FieldConflictError(
                f"key <{_label(path)}> already exists", field=_label(path)
            )

    for segment in segments[depth:-1]:
        child: MutableMapping[str, Any] = {}
        current[segment] = child
        current = child

    current[segments[-1]] = value
    return record


def delete_field(record: MutableMapping[str, Any], path: FieldPath) -> Any:
    """Remove the value at ``path`` and return it, or MISSING if absent."""
    segments = _segments(path)
    parent = record if len(segments) == 1 else get_field(record, segments[:-1])
    if not isinstance(parent, MutableMapping) or segments[-1] not in parent:
        return MISSING
    return parent.pop(segments[-1])
