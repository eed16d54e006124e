import json
import logging
import uuid
from pathlib import Path
from typing import Any, Union

import aiofiles
import aiofiles.os

from thingstore.core.exceptions import CorruptValueError
from thingstore.domain.models import ABSENT, Absent, StoragePath
from thingstore.storage.kv_manager import KeyLike, KeyValueManager

logger = logging.getLogger(__name__)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


class FileKeyValueManager(KeyValueManager):
    """
    Stores each key as its own JSON file: ``<root>/<segments...>.json``.

    There is no cache, lock or write queue; every call goes to disk and
    concurrent writers to one key race, the last completed write wins.
    Writes overwrite the file in place unless ``atomic_writes`` is set, in
    which case they go through a temporary sibling file and a rename.
    """

    def __init__(self, root: Path, atomic_writes: bool = False):
        self._root = Path(root)
        self._atomic_writes = atomic_writes

    @property
    def root(self) -> Path:
        return self._root

    def path_for(self, key: KeyLike) -> Path:
        path = StoragePath.parse(key)
        return self._root.joinpath(*path.segments[:-1], f"{path.name}.json")

    async def get(self, key: KeyLike) -> Union[Any, Absent]:
        file_path = self.path_for(key)
        try:
            async with aiofiles.open(file_path, "r", encoding="utf-8") as f:
                data = await f.read()
        except FileNotFoundError:
            logger.debug(f"No stored value for {key} at {file_path}")
            return ABSENT
        except UnicodeDecodeError as e:
            raise CorruptValueError(file_path, str(e)) from e

        try:
            return json.loads(data, parse_constant=_reject_constant)
        except ValueError as e:
            raise CorruptValueError(file_path, str(e)) from e

    async def set(self, key: KeyLike, value: Any) -> None:
        file_path = self.path_for(key)
        data = json.dumps(value, allow_nan=False)

        await aiofiles.os.makedirs(file_path.parent, exist_ok=True)

        if self._atomic_writes:
            tmp_path = file_path.with_name(f".{file_path.name}.{uuid.uuid4().hex}.tmp")
            try:
                async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                    await f.write(data)
                await aiofiles.os.replace(tmp_path, file_path)
            except BaseException:
                if await aiofiles.os.path.exists(tmp_path):
                    await aiofiles.os.remove(tmp_path)
                raise
        else:
            async with aiofiles.open(file_path, "w", encoding="utf-8") as f:
                await f.write(data)

        logger.debug(f"Stored {key} at {file_path}")

    def __repr__(self) -> str:
        return f"FileKeyValueManager({str(self._root)!r})"
