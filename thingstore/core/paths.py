"""
Location of the data directory used for persisted values.

Priority:
1. Environment variable THING_STORAGE (used verbatim, ``~`` expanded)
2. The platform convention:
   * macOS: ~/Library/Application Support/<app>
   * Windows: %LOCALAPPDATA%/<app>/Data (falls back to ~/AppData/Local)
   * everything else: $XDG_DATA_HOME/<app> (falls back to ~/.local/share)
"""
from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

APP_NAME = "abstract-things"
DATA_ROOT_ENV_VAR = "THING_STORAGE"
STORAGE_DIR_NAME = "storage"

_data_dir: Optional[Path] = None


def platform_data_dir(
    app_name: str = APP_NAME,
    platform: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    home: Optional[Path] = None,
) -> Path:
    """
    Compute the conventional per-user data directory for ``app_name``.

    Nothing is created on disk.
    """
    platform = platform or sys.platform
    environ = os.environ if environ is None else environ
    home = Path(home) if home is not None else Path.home()

    if platform == "darwin":
        return home / "Library" / "Application Support" / app_name
    if platform == "win32":
        local_app_data = environ.get("LOCALAPPDATA")
        base = Path(local_app_data) if local_app_data else home / "AppData" / "Local"
        return base / app_name / "Data"

    xdg_data = environ.get("XDG_DATA_HOME")
    base = Path(xdg_data) if xdg_data else home / ".local" / "share"
    return base / app_name


def resolve_data_dir(environ: Optional[Mapping[str, str]] = None) -> Path:
    """
    Resolve the data directory and make sure it exists.

    Unlike get_data_dir() this recomputes on every call.
    """
    environ = os.environ if environ is None else environ
    env_path = environ.get(DATA_ROOT_ENV_VAR)
    if env_path:
        data_dir = Path(env_path).expanduser()
    else:
        data_dir = platform_data_dir(environ=environ)

    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


def get_data_dir() -> Path:
    """Return the process-wide data directory, resolving it on first use."""
    global _data_dir
    if _data_dir is None:
        _data_dir = resolve_data_dir()
        logger.info(f"Using data directory {_data_dir}")
    return _data_dir


def reset_data_dir() -> None:
    """Forget the cached data directory. Intended for tests."""
    global _data_dir
    _data_dir = None
