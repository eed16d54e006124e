"""
Process-wide wiring: one data directory and one StorageRoot per process,
created lazily on first use.
"""
from pathlib import Path
from typing import Any, Optional

from thingstore.core import paths
from thingstore.domain.entities import SubStorage
from thingstore.storage.root import StorageRoot

_storage_root: Optional[StorageRoot] = None


def get_data_dir() -> Path:
    return paths.get_data_dir()


def get_storage_root() -> StorageRoot:
    global _storage_root
    if _storage_root is None:
        _storage_root = StorageRoot.open(get_data_dir())
    return _storage_root


def global_() -> SubStorage:
    return get_storage_root().global_()


def instance(instance_id: Any) -> SubStorage:
    return get_storage_root().instance(instance_id)


def reset_dependencies() -> None:
    """Drop the cached root and data directory so the next call re-resolves them."""
    global _storage_root
    _storage_root = None
    paths.reset_data_dir()
