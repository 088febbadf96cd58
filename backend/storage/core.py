"""Storage initialization and path helpers."""

import os
import tempfile
from pathlib import Path

from quiet_year.text import slugify  # noqa: F401

_data_dir: Path | None = None


def init_storage(data_dir: Path) -> None:
    global _data_dir
    from . import locks as _locks_mod

    _data_dir = data_dir
    _data_dir.mkdir(parents=True, exist_ok=True)
    sessions_dir().mkdir(exist_ok=True)
    _locks_mod.reset_locks()


def data_dir() -> Path:
    assert _data_dir is not None, "Call init_storage() before using storage"
    return _data_dir


def sessions_dir() -> Path:
    return data_dir() / "sessions"


def write_atomic(path: Path, text: str) -> None:
    """Replace ``path`` with ``text`` in one step.

    Readers in other processes see either the old file or the new one, and a
    crash mid-write leaves the old file intact.
    """
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
