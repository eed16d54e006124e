from typing import Any, Optional, Union
import logging

from thingstore.domain import values
from thingstore.domain.models import StoragePath, ValueType
from thingstore.storage.kv_manager import KeyValueManager

logger = logging.getLogger(__name__)


class SubStorage:
    """
    A namespaced view over a shared KeyValueManager.

    Keys passed to get()/set() are single segments appended to the view's
    namespace. The view owns nothing; any number of views may share one
    manager, and views with equal namespaces see the same values.
    """

    def __init__(self, manager: KeyValueManager, path: Union[StoragePath, str]):
        self._manager = manager
        self._path = StoragePath.parse(path)

    @property
    def manager(self) -> KeyValueManager:
        return self._manager

    @property
    def path(self) -> StoragePath:
        return self._path

    @property
    def namespace(self) -> str:
        return str(self._path)

    async def get(self, key: str, type: Optional[Union[ValueType, str]] = ValueType.MIXED) -> Any:
        """
        Read ``key`` and decode it as ``type``.

        A key that was never written decodes to the type's default, which is
        None for every built-in type.
        """
        codec = values.get_codec(type)
        raw = await self._manager.get(self._path.child(key))
        return codec.from_json(raw)

    async def set(self, key: str, value: Any, type: Optional[Union[ValueType, str]] = ValueType.MIXED) -> None:
        codec = values.get_codec(type)
        full_key = self._path.child(key)
        await self._manager.set(full_key, codec.to_json(value))

    def sub(self, key: str) -> "SubStorage":
        return SubStorage(self._manager, self._path.child(key))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SubStorage):
            return NotImplemented
        return self._manager is other._manager and self._path == other._path

    def __hash__(self) -> int:
        return hash((id(self._manager), self._path))

    def __repr__(self) -> str:
        return f"Storage[{self._path}]"

    __str__ = __repr__
