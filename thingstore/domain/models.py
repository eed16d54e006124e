"""
Core value types for thingstore.

- StoragePath: validated, ordered key segments (``instance/abc/count``)
- Absent / ABSENT: explicit result for a key that has never been written
- ValueType: the closed set of type tags understood by the value codecs
"""
from __future__ import annotations

from enum import Enum
from typing import Tuple, Union

from pydantic import BaseModel, ConfigDict, field_validator

from thingstore.core.exceptions import InvalidKeyError

SEPARATOR = "/"

# Separators from every supported platform, so one key maps to one file everywhere.
_FORBIDDEN_CHARS = ("/", "\\", "\x00")
_RESERVED_SEGMENTS = (".", "..")


def validate_segment(segment: str) -> str:
    if not isinstance(segment, str):
        raise InvalidKeyError(repr(segment), "segments must be strings")
    if not segment:
        raise InvalidKeyError(segment, "segment is empty")
    if segment in _RESERVED_SEGMENTS:
        raise InvalidKeyError(segment, "relative path segments are not allowed")
    for char in _FORBIDDEN_CHARS:
        if char in segment:
            raise InvalidKeyError(segment, f"contains forbidden character {char!r}")
    return segment


class StoragePath(BaseModel):
    """
    Immutable key path made of one or more segments.

    Two paths with the same segments are equal and hash the same, so views
    built from either observe the same stored values.
    """

    model_config = ConfigDict(frozen=True)

    segments: Tuple[str, ...]

    @field_validator("segments")
    @classmethod
    def _check_segments(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        if not value:
            raise InvalidKeyError("", "a path needs at least one segment")
        for segment in value:
            validate_segment(segment)
        return value

    @classmethod
    def of(cls, *segments: str) -> "StoragePath":
        return cls(segments=tuple(segments))

    @classmethod
    def parse(cls, raw: Union[str, "StoragePath"]) -> "StoragePath":
        """Build a path from a slash-delimited string such as ``global/count``."""
        if isinstance(raw, StoragePath):
            return raw
        return cls(segments=tuple(raw.split(SEPARATOR)))

    def child(self, segment: str) -> "StoragePath":
        return StoragePath(segments=self.segments + (validate_segment(segment),))

    @property
    def name(self) -> str:
        return self.segments[-1]

    @property
    def parent(self) -> "StoragePath":
        if len(self.segments) == 1:
            raise ValueError(f"{self} has no parent")
        return StoragePath(segments=self.segments[:-1])

    def __str__(self) -> str:
        return SEPARATOR.join(self.segments)


class Absent:
    """Marker for "no value stored under this key"."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"

    def __reduce__(self):
        return (Absent, ())


ABSENT = Absent()


class ValueType(str, Enum):
    MIXED = "mixed"
    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"
    DATETIME = "datetime"
    DURATION = "duration"
    PERCENTAGE = "percentage"
