import logging
from pathlib import Path
from typing import Any

from thingstore.core.paths import STORAGE_DIR_NAME
from thingstore.domain.entities import SubStorage
from thingstore.domain.models import StoragePath
from thingstore.storage.file_kv_manager import FileKeyValueManager
from thingstore.storage.kv_manager import KeyValueManager

logger = logging.getLogger(__name__)

GLOBAL_NAMESPACE = "global"
INSTANCE_NAMESPACE = "instance"


class StorageRoot:
    """
    The single backing store of an application, plus the entry points for
    its top-level namespaces.

    Build one at startup with StorageRoot.open() and hand it to whatever
    needs storage. Tests can open roots in temporary directories.
    """

    def __init__(self, manager: KeyValueManager):
        self.manager = manager

    @classmethod
    def open(cls, data_dir: Path, atomic_writes: bool = False) -> "StorageRoot":
        """Create ``<data_dir>/storage`` if needed and open a file store there."""
        storage_dir = Path(data_dir) / STORAGE_DIR_NAME
        storage_dir.mkdir(parents=True, exist_ok=True)
        logger.debug(f"Opened storage root at {storage_dir}")
        return cls(FileKeyValueManager(storage_dir, atomic_writes=atomic_writes))

    def namespace(self, *segments: str) -> SubStorage:
        return SubStorage(self.manager, StoragePath.of(*segments))

    def global_(self) -> SubStorage:
        """Values shared by the whole application."""
        return self.namespace(GLOBAL_NAMESPACE)

    def instance(self, instance_id: Any) -> SubStorage:
        """Values belonging to one managed instance, keyed by its id."""
        return self.namespace(INSTANCE_NAMESPACE, str(instance_id))

    def __repr__(self) -> str:
        return f"StorageRoot({self.manager!r})"
