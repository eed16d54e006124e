"""
Exception hierarchy for thingstore.

- StorageError: base for every known storage failure
- InvalidKeyError: a key or namespace segment cannot be mapped to a file
- UnknownValueTypeError: a type tag outside the supported set
- ValueConversionError: a value does not fit its type tag
- CorruptValueError: a stored file exists but does not hold valid JSON

Reading a key that was never written is not an error and has no exception.
Plain OSError from the filesystem is raised unchanged.
"""
from pathlib import Path
from typing import Optional


class StorageError(Exception):
    """Base class for all thingstore errors."""

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.hint = hint

    def get_user_message(self) -> str:
        if self.hint:
            return f"{self.message} ({self.hint})"
        return self.message


class InvalidKeyError(StorageError):
    """A key segment is empty, relative or contains a path separator."""

    def __init__(self, segment: str, reason: str):
        super().__init__(
            f"Invalid key segment {segment!r}: {reason}",
            hint="use sub() to nest namespaces instead of embedding '/' in a key",
        )
        self.segment = segment


class UnknownValueTypeError(StorageError, ValueError):
    def __init__(self, type_name: str):
        super().__init__(f"Unknown value type {type_name!r}")
        self.type_name = type_name


class ValueConversionError(StorageError, ValueError):
    """Raised when a value cannot be converted to or from its JSON form."""

    def __init__(self, type_name: str, detail: str):
        super().__init__(f"Cannot convert value as {type_name!r}: {detail}")
        self.type_name = type_name


class CorruptValueError(StorageError, ValueError):
    """
    The backing file for a key exists but could not be decoded.

    Usually left behind by a write that was interrupted midway.
    """

    def __init__(self, path: Path, detail: str):
        super().__init__(
            f"Stored value at {path} is not valid JSON: {detail}",
            hint="rewrite the key with set() or remove the file",
        )
        self.path = path
