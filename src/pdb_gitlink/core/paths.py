"""Map build-time absolute paths to canonical repository-relative paths."""

from __future__ import annotations

import ntpath
import os
import posixpath
from pathlib import Path

from pdb_gitlink.core.ports.repository import Repository

GIT_DIR_NAME = ".git"


def _split_segments(path: str) -> list[str]:
    normalized = path.replace("\\", "/")
    return [segment for segment in normalized.split("/") if segment and segment != "."]


def _is_windows_path(path: str) -> bool:
    return bool(ntpath.splitdrive(path)[0]) or path.startswith("\\\\")


def relative_to_root(path: str, root: str | Path) -> str | None:
    """Return *path* relative to *root*, joined with ``/``.

    Works for both Windows and POSIX spelled paths regardless of the host
    platform; comparison of the root prefix is case-insensitive.  Returns
    ``None`` when *path* is not located under *root*.
    """
    root_str = str(root)
    if _is_windows_path(path) or _is_windows_path(root_str):
        path_drive, path_rest = ntpath.splitdrive(path)
        root_drive, root_rest = ntpath.splitdrive(root_str)
        if path_drive.lower() != root_drive.lower():
            return None
        path_parts = _split_segments(ntpath.normpath(path_rest))
        root_parts = _split_segments(ntpath.normpath(root_rest))
    else:
        path_parts = _split_segments(posixpath.normpath(path))
        root_parts = _split_segments(posixpath.normpath(root_str))

    if len(path_parts) <= len(root_parts):
        return None
    if [p.lower() for p in path_parts[: len(root_parts)]] != [p.lower() for p in root_parts]:
        return None
    return "/".join(path_parts[len(root_parts) :])


def build_tracked_lookup(tracked_files: list[str]) -> dict[str, str]:
    """Map lower-cased tracked paths to their stored spelling; first entry wins."""
    lookup: dict[str, str] = {}
    for tracked in tracked_files:
        lookup.setdefault(tracked.replace("\\", "/").lower(), tracked)
    return lookup


def normalize_with_repository(
    path: str,
    repository: Repository,
    lookup: dict[str, str] | None = None,
) -> str | None:
    relative_path = relative_to_root(path, repository.working_directory)
    if relative_path is None:
        return None
    if lookup is None:
        lookup = build_tracked_lookup(repository.tracked_files())
    return lookup.get(relative_path.lower())


def _find_entry(directory: Path, name: str) -> str | None:
    try:
        entries = os.listdir(directory)
    except OSError:
        return None
    if name in entries:
        return name
    lowered = name.lower()
    for entry in sorted(entries):
        if entry.lower() == lowered:
            return entry
    return None


def normalize_with_filesystem(path: str, root: str | Path) -> str | None:
    relative_path = relative_to_root(path, root)
    if relative_path is None:
        return None
    current = Path(root)
    canonical: list[str] = []
    for segment in relative_path.split("/"):
        entry = _find_entry(current, segment)
        if entry is None:
            return None
        canonical.append(entry)
        current = current / entry
    return "/".join(canonical)


def normalize(path: str, root: Repository | str | Path) -> str | None:
    """Resolve *path* to its repository-relative spelling, or ``None`` if untracked.

    *root* is either an open repository, whose tracked-file index is searched
    case-insensitively, or a working-directory path, whose directory tree is
    walked to recover the on-disk case of every segment.
    """
    if isinstance(root, str | Path):
        return normalize_with_filesystem(path, root)
    return normalize_with_repository(path, root)


def normalize_all(paths: list[str], root: Repository | str | Path) -> list[tuple[str, str | None]]:
    """Normalize every path, preserving input order."""
    if isinstance(root, str | Path):
        return [(path, normalize_with_filesystem(path, root)) for path in paths]
    lookup = build_tracked_lookup(root.tracked_files())
    return [(path, normalize_with_repository(path, root, lookup)) for path in paths]


def find_git_dir(start_dir: str | Path) -> Path | None:
    """Walk upward from *start_dir* and return the first ``.git`` entry found."""
    current = Path(start_dir)
    for candidate in (current, *current.parents):
        git_dir = candidate / GIT_DIR_NAME
        try:
            if git_dir.exists():
                return git_dir
        except OSError:
            continue
    return None
