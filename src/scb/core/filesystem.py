"""
Filesystem primitives used by the installer and cleanup engine.

All OS errors are translated into the InstallerError taxonomy at this seam so
callers can tell permission problems apart from generic I/O failures.

Removal is deliberately narrow: remove_named_directory() only ever deletes a
directory whose final path component is exactly the expected name.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
from datetime import datetime
from pathlib import Path
from typing import Any

from scb.core.config.constants import BACKUP_DIR_PREFIX, TIMESTAMP_FORMAT
from scb.core.errors import (
    AlreadyExistsError,
    InstallerError,
    NotFoundError,
    filesystem_error,
)

logger = logging.getLogger(__name__)


def timestamp(now: datetime | None = None) -> str:
    """Second-resolution timestamp used in backup names."""
    return (now or datetime.now()).strftime(TIMESTAMP_FORMAT)


def unique_path(path: Path) -> Path:
    """
    Return `path`, or `path` with a `-N` suffix if it is already taken.

    The suffix goes after the full name (or before the file suffix for files
    with one), so the timestamped base name stays recognisable.
    """
    if not path.exists() and not path.is_symlink():
        return path

    stem, suffix = path.stem, path.suffix
    if path.is_dir() or not suffix:
        stem, suffix = path.name, ""

    counter = 1
    while True:
        candidate = path.with_name(f"{stem}-{counter}{suffix}")
        if not candidate.exists() and not candidate.is_symlink():
            return candidate
        counter += 1


def backup_dir_path(target_dir: Path, now: datetime | None = None) -> Path:
    """Sibling-of-framework backup directory path inside the target."""
    return unique_path(target_dir / f"{BACKUP_DIR_PREFIX}{timestamp(now)}")


def create_directory(path: Path) -> None:
    """
    Create a directory (and parents) if it does not already exist.

    Raises:
        AlreadyExistsError: If a non-directory occupies the path
        PermissionDeniedError: If the directory cannot be created
    """
    if path.is_dir():
        return
    if path.exists() or path.is_symlink():
        raise AlreadyExistsError(
            f"path exists but is not a directory: {path}",
            context={"operation": "create directory", "path": str(path)},
        )
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise filesystem_error("create directory", path, e) from e
    logger.debug(f"Created directory {path}")


def ensure_directories(base: Path, names: tuple[str, ...] | list[str]) -> None:
    """Create `base` and each named child directory under it."""
    create_directory(base)
    for name in names:
        create_directory(base / name)


def copy_tree(src: Path, dst: Path) -> None:
    """
    Recursively copy `src` into `dst`, preserving symlinks and file modes.

    Existing directories at the destination are merged into; existing files
    are overwritten.
    """
    if not src.is_dir():
        raise NotFoundError(
            f"source directory does not exist: {src}",
            context={"operation": "copy directory", "path": str(src)},
        )
    try:
        shutil.copytree(src, dst, symlinks=True, dirs_exist_ok=True)
    except shutil.Error as e:
        raise InstallerError(
            f"failed to copy {src} to {dst}",
            cause=e,
            context={"operation": "copy directory", "path": str(dst)},
        ) from e
    except OSError as e:
        raise filesystem_error("copy directory to", dst, e) from e
    logger.debug(f"Copied {src} -> {dst}")


def replace_directories(src_root: Path, dst_root: Path, names: tuple[str, ...]) -> list[str]:
    """
    Replace each named child of `dst_root` with the copy from `src_root`.

    Children missing from the source are left untouched at the destination.

    Returns:
        Names that were copied
    """
    create_directory(dst_root)
    replaced: list[str] = []
    for name in names:
        src = src_root / name
        if not src.exists():
            logger.debug(f"Source has no {name}/, leaving destination untouched")
            continue
        dst = dst_root / name
        if dst.is_symlink() or dst.is_file():
            try:
                dst.unlink()
            except OSError as e:
                raise filesystem_error("remove", dst, e) from e
        elif dst.exists():
            remove_named_directory(dst, name)
        copy_tree(src, dst)
        replaced.append(name)
    return replaced


def remove_named_directory(path: Path, expected_name: str) -> bool:
    """
    Recursively remove a directory, but only if its name is `expected_name`.

    Returns:
        True if something was removed, False if the path did not exist

    Raises:
        InstallerError: If the path name does not match or the path is a symlink
    """
    if path.name != expected_name:
        raise InstallerError(
            f"refusing to remove {path}: expected a directory named {expected_name}",
            context={"operation": "remove directory", "path": str(path)},
        )
    if path.is_symlink():
        raise InstallerError(
            f"refusing to remove {path}: path is a symlink",
            context={"operation": "remove directory", "path": str(path)},
        )
    if not path.exists():
        return False
    try:
        shutil.rmtree(path)
    except OSError as e:
        raise filesystem_error("remove directory", path, e) from e
    logger.debug(f"Removed directory {path}")
    return True


def backup_directory(src: Path, dest: Path) -> None:
    """
    Copy `src` to a fresh backup location.

    Raises:
        NotFoundError: If the source does not exist
        AlreadyExistsError: If the backup location is already taken
    """
    if not src.is_dir():
        raise NotFoundError(
            f"nothing to back up at {src}",
            context={"operation": "backup", "path": str(src)},
        )
    if dest.exists() or dest.is_symlink():
        raise AlreadyExistsError(
            f"backup directory already exists: {dest}",
            context={"operation": "backup", "path": str(dest)},
        )
    try:
        shutil.copytree(src, dest, symlinks=True)
    except shutil.Error as e:
        raise InstallerError(
            f"failed to back up {src} to {dest}",
            cause=e,
            context={"operation": "backup", "path": str(dest)},
        ) from e
    except OSError as e:
        raise filesystem_error("back up directory to", dest, e) from e
    logger.info(f"Backed up {src} to {dest}")


def backup_file(path: Path, prefix: str, suffix: str, now: datetime | None = None) -> Path:
    """
    Copy a file to `<prefix><timestamp><suffix>` next to it.

    If a backup with the same name and identical bytes already exists it is
    reused instead of writing another copy.

    Returns:
        Path of the backup file
    """
    candidate = path.with_name(f"{prefix}{timestamp(now)}{suffix}")
    try:
        content = path.read_bytes()
        if candidate.is_file() and candidate.read_bytes() == content:
            return candidate
        candidate = unique_path(candidate)
        candidate.write_bytes(content)
    except OSError as e:
        raise filesystem_error("back up file", path, e) from e
    logger.debug(f"Backed up {path} to {candidate}")
    return candidate


def write_json_atomic(path: Path, data: dict[str, Any]) -> None:
    """Write JSON to path atomically via a tmp file + os.replace()."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(path.suffix + ".tmp")
        with tmp.open("w") as f:
            json.dump(data, f, indent=2)
            f.write("\n")
        os.replace(tmp, path)
    except OSError as e:
        raise filesystem_error("write", path, e) from e


def is_writable(path: Path) -> bool:
    return os.access(path, os.W_OK)
