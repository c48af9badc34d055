"""
Small helpers for reading and atomically writing JSON documents on disk.
"""
import json
import os
import stat
import tempfile
from pathlib import Path
from typing import Any


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


# Read once; os.umask can only be queried by setting it.
DEFAULT_FILE_MODE = 0o666 & ~_current_umask()


def read_json(path: Path) -> Any:
    """Read and parse a JSON file. Raises OSError / ValueError on failure."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _target_mode(path: Path) -> int:
    """Mode of the file being replaced, else the umask default for new files."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        return DEFAULT_FILE_MODE


def write_json_atomic(path: Path, data: Any, indent: int) -> None:
    """
    Write data as pretty-printed JSON, replacing the file in one step.

    The document is written to a temporary file in the same directory and
    moved over the target, so readers never see a partial document. The
    result keeps the permissions of the file it replaces.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=indent, ensure_ascii=False)
        os.chmod(tmp_name, _target_mode(path))
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
