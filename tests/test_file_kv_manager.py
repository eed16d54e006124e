"""
Tests for the JSON-file backed key/value manager.
"""

import asyncio
import json
import math

import aiofiles.os
import pytest

from thingstore.core.exceptions import CorruptValueError, InvalidKeyError
from thingstore.domain.models import ABSENT, StoragePath
from thingstore.storage.file_kv_manager import FileKeyValueManager


@pytest.fixture
def manager(tmp_path):
    return FileKeyValueManager(tmp_path / "storage")


class TestFileKeyValueManager:

    def test_key_maps_to_json_file(self, manager):
        assert manager.path_for("global/count") == manager.root / "global" / "count.json"
        assert manager.path_for(StoragePath.of("top")) == manager.root / "top.json"

    def test_bad_key_is_rejected(self, manager):
        with pytest.raises(InvalidKeyError):
            manager.path_for("global/../escape")

    @pytest.mark.asyncio
    async def test_missing_key_is_absent(self, manager):
        assert await manager.get("global/missing") is ABSENT

    @pytest.mark.asyncio
    async def test_set_then_get(self, manager):
        await manager.set("global/config", {"name": "lamp", "levels": [1, 2, 3]})
        assert await manager.get("global/config") == {"name": "lamp", "levels": [1, 2, 3]}

    @pytest.mark.asyncio
    async def test_file_holds_plain_json(self, manager):
        await manager.set("instance/a/count", 5)
        file_path = manager.root / "instance" / "a" / "count.json"
        assert json.loads(file_path.read_text(encoding="utf-8")) == 5

    @pytest.mark.asyncio
    async def test_stored_null_is_not_absent(self, manager):
        await manager.set("global/nothing", None)
        assert await manager.get("global/nothing") is None

    @pytest.mark.asyncio
    async def test_overwrite_and_repeat(self, manager):
        await manager.set("global/x", 1)
        await manager.set("global/x", 2)
        await manager.set("global/x", 2)
        assert await manager.get("global/x") == 2

    @pytest.mark.asyncio
    async def test_unicode_round_trip(self, manager):
        await manager.set("global/greeting", "héllo ✓")
        assert await manager.get("global/greeting") == "héllo ✓"

    @pytest.mark.asyncio
    async def test_corrupt_file_raises(self, manager):
        file_path = manager.path_for("global/broken")
        file_path.parent.mkdir(parents=True)
        file_path.write_text('{"truncated": ', encoding="utf-8")
        with pytest.raises(CorruptValueError) as exc_info:
            await manager.get("global/broken")
        assert exc_info.value.path == file_path

    @pytest.mark.asyncio
    async def test_unencodable_value_raises(self, manager):
        with pytest.raises(TypeError):
            await manager.set("global/bad", object())

    @pytest.mark.asyncio
    async def test_write_failure_propagates(self, manager):
        manager.root.mkdir(parents=True)
        (manager.root / "global").write_text("in the way", encoding="utf-8")
        with pytest.raises(OSError):
            await manager.set("global/x", 1)

    @pytest.mark.asyncio
    async def test_concurrent_writers_leave_one_value(self, manager):
        await asyncio.gather(*(manager.set("global/race", i) for i in range(10)))
        assert await manager.get("global/race") in range(10)

    @pytest.mark.asyncio
    async def test_atomic_writes_leave_no_temp_files(self, tmp_path):
        manager = FileKeyValueManager(tmp_path / "storage", atomic_writes=True)
        await manager.set("global/x", {"a": 1})
        await manager.set("global/x", {"a": 2})
        assert await manager.get("global/x") == {"a": 2}
        assert [p.name for p in (manager.root / "global").iterdir()] == ["x.json"]

    @pytest.mark.asyncio
    async def test_failed_atomic_write_removes_temp_file(self, tmp_path, monkeypatch):
        manager = FileKeyValueManager(tmp_path / "storage", atomic_writes=True)
        await manager.set("global/x", 1)

        async def failing_replace(src, dst):
            raise OSError("disk went away")

        monkeypatch.setattr(aiofiles.os, "replace", failing_replace)
        with pytest.raises(OSError):
            await manager.set("global/x", 2)

        assert [p.name for p in (manager.root / "global").iterdir()] == ["x.json"]
        assert await manager.get("global/x") == 1

    @pytest.mark.asyncio
    async def test_invalid_utf8_is_corrupt(self, manager):
        file_path = manager.path_for("global/bad")
        file_path.parent.mkdir(parents=True)
        file_path.write_bytes(b"\xff\xfe")
        with pytest.raises(CorruptValueError):
            await manager.get("global/bad")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", [math.inf, -math.inf, math.nan, [1, math.nan]])
    async def test_non_finite_floats_are_not_written(self, manager, value):
        with pytest.raises(ValueError):
            await manager.set("global/x", value)
        assert not manager.path_for("global/x").exists()

    @pytest.mark.asyncio
    async def test_non_standard_constants_are_corrupt(self, manager):
        file_path = manager.path_for("global/inf")
        file_path.parent.mkdir(parents=True)
        file_path.write_text("Infinity", encoding="utf-8")
        with pytest.raises(CorruptValueError):
            await manager.get("global/inf")
