import pytest

from thingstore.core.dependencies import reset_dependencies
from thingstore.core.paths import DATA_ROOT_ENV_VAR
from thingstore.storage.root import StorageRoot


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Point the process-wide data directory at a temp dir and reset caches."""
    data_dir = tmp_path / "data"
    monkeypatch.setenv(DATA_ROOT_ENV_VAR, str(data_dir))
    reset_dependencies()
    yield data_dir
    reset_dependencies()


@pytest.fixture
def root(tmp_path) -> StorageRoot:
    return StorageRoot.open(tmp_path / "explicit")
