"""Filesystem helpers: read-or-create files and directories, data paths."""

from __future__ import annotations

import os
from pathlib import Path

from zerolaunch.errors import AppIOError

APP_DIR_NAME = "ZeroLaunch-rs"


def _create_file(target: Path, data: bytes) -> None:
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise AppIOError(exc) from exc
    try:
        target.write_bytes(data)
    except OSError as exc:
        raise AppIOError(exc) from exc


def read_or_create_str(path: str | os.PathLike[str], content: str | None = None) -> str:
    """Read a UTF-8 text file; if it is missing, create it with ``content``."""
    target = Path(path)
    try:
        with target.open(encoding="utf-8", newline="") as handle:
            return handle.read()
    except FileNotFoundError:
        pass
    except (OSError, UnicodeDecodeError) as exc:
        raise AppIOError(exc) from exc
    initial = content if content is not None else ""
    _create_file(target, initial.encode("utf-8"))
    return initial


def read_or_create_bytes(
    path: str | os.PathLike[str], content: bytes | None = None
) -> bytes:
    """Read a binary file; if it is missing, create it with ``content``."""
    target = Path(path)
    try:
        return target.read_bytes()
    except FileNotFoundError:
        pass
    except OSError as exc:
        raise AppIOError(exc) from exc
    initial = bytes(content) if content is not None else b""
    _create_file(target, initial)
    return initial


def read_dir_or_create(path: str | os.PathLike[str]) -> list[Path]:
    """List a directory's entries, creating the directory if it does not exist."""
    directory = Path(path)
    try:
        return list(directory.iterdir())
    except FileNotFoundError:
        pass
    except OSError as exc:
        raise AppIOError(exc) from exc
    try:
        directory.mkdir(parents=True, exist_ok=True)
        return list(directory.iterdir())
    except OSError as exc:
        raise AppIOError(exc) from exc


def get_default_remote_data_dir_path() -> str:
    """Return the default directory for the synchronised configuration data."""
    base = (
        os.environ.get("APPDATA")
        or os.environ.get("XDG_CONFIG_HOME")
        or str(Path.home() / ".config")
    )
    return str(Path(base) / APP_DIR_NAME)