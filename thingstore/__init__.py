"""
Hierarchical, file-backed key/value storage for an application and the
instances it manages.

Values live under ``<data dir>/storage/<namespace...>/<key>.json``::

    import thingstore

    await thingstore.global_().set("count", 5, "number")
    await thingstore.instance("lamp-1").sub("state").get("power", "boolean")

The data directory comes from THING_STORAGE or the platform convention,
see thingstore.core.paths.
"""
from pathlib import Path

from thingstore.core.dependencies import get_storage_root, global_, instance, reset_dependencies
from thingstore.core.exceptions import (
    CorruptValueError,
    InvalidKeyError,
    StorageError,
    UnknownValueTypeError,
    ValueConversionError,
)
from thingstore.core.paths import get_data_dir
from thingstore.domain.entities import SubStorage
from thingstore.domain.models import ABSENT, Absent, StoragePath, ValueType
from thingstore.storage.file_kv_manager import FileKeyValueManager
from thingstore.storage.kv_manager import KeyValueManager
from thingstore.storage.root import StorageRoot


def data_dir() -> Path:
    """The resolved data directory, created on first access."""
    return get_data_dir()


__all__ = [
    "ABSENT",
    "Absent",
    "CorruptValueError",
    "FileKeyValueManager",
    "InvalidKeyError",
    "KeyValueManager",
    "StorageError",
    "StoragePath",
    "StorageRoot",
    "SubStorage",
    "UnknownValueTypeError",
    "ValueConversionError",
    "ValueType",
    "data_dir",
    "get_storage_root",
    "global_",
    "instance",
    "reset_dependencies",
]
