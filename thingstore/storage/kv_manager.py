from abc import ABC, abstractmethod
from typing import Any, Union

from thingstore.domain.models import Absent, StoragePath

KeyLike = Union[StoragePath, str]


class KeyValueManager(ABC):
    """
    Abstract base class for the backing key/value store.

    Values are JSON-compatible data. Keys are full paths; namespacing is
    done by SubStorage on top of this interface.
    """

    @abstractmethod
    async def get(self, key: KeyLike) -> Union[Any, Absent]:
        """Return the stored value, or ABSENT if the key was never written."""
        pass

    @abstractmethod
    async def set(self, key: KeyLike, value: Any) -> None:
        """Store a value, replacing whatever was stored under the key."""
        pass
