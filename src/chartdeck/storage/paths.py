"""Cross-platform path management for chartdeck.

Every persistent file location is defined here so the rest of the package
imports one canonical set of paths.  Directory creation is deferred to
helpers rather than happening at import time, keeping imports
side-effect-free.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Union

from platformdirs import user_config_dir

APP_NAME = "chartdeck"

CONFIG_DIR: Path = Path(user_config_dir(APP_NAME))

TOKEN_FILE = CONFIG_DIR / "session.json"
SETTINGS_FILE = CONFIG_DIR / "settings.json"


def ensure_parents(path: Path) -> Path:
    """Create the parent directories of *path* and return *path* unchanged."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError:
        pass
    return path


def atomic_write(path: Path, data: Union[str, bytes]) -> None:
    """Write *data* to *path* through a sibling temp file and ``os.replace``.

    Text is written as UTF-8; bytes are written as-is.  A reader never sees a
    half-written settings or session file.
    """
    tmp = path.with_suffix(path.suffix + ".tmp")
    ensure_parents(tmp)
    payload = data.encode("utf-8") if isinstance(data, str) else data
    tmp.write_bytes(payload)
    try:
        os.replace(tmp, path)
    finally:
        if tmp.exists():
            try:
                tmp.unlink()
            except OSError:
                pass
