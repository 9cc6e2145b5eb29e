"""Read-only view of a project tree.

Detectors and plan synthesizers only talk to the `ProjectProbe` protocol,
so the same logic runs against a real directory (`DirectoryProbe`) or a
staged in-memory tree (`MemoryProbe`).

Reads never raise: a missing or unreadable file reads as "".
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Iterable, Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

# Directory names never descended into during a tree scan
SKIP_DIRS = frozenset({".git", "node_modules", ".venv", "venv", "dist", "build", "__pycache__"})


@dataclass
class TreeScan:
    """Every file in the project plus a count of files per extension."""

    files: list[str] = field(default_factory=list)
    ext_counts: dict[str, int] = field(default_factory=dict)


@runtime_checkable
class ProjectProbe(Protocol):
    """Filesystem operations detectors are allowed to perform."""

    def has(self, path: str) -> bool:
        """True if a file or directory exists at the relative path."""
        ...

    def read(self, path: str) -> str:
        """File contents, or "" when missing or unreadable."""
        ...

    def dir_exists(self, path: str) -> bool:
        ...

    def scan(self) -> TreeScan:
        ...


class DirectoryProbe:
    """Probe backed by a directory on disk. The tree scan is cached."""

    def __init__(self, root: Path | str):
        self.root = Path(root)
        self._scan: Optional[TreeScan] = None

    def has(self, path: str) -> bool:
        return (self.root / path).exists()

    def read(self, path: str) -> str:
        try:
            return (self.root / path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            return ""

    def dir_exists(self, path: str) -> bool:
        return (self.root / path).is_dir()

    def scan(self) -> TreeScan:
        if self._scan is None:
            self._scan = _scan_directory(self.root)
        return self._scan

    def __repr__(self) -> str:
        return f"DirectoryProbe({str(self.root)!r})"


class MemoryProbe:
    """Probe over ``{relative_path: content}``; directories are implied."""

    def __init__(self, files: dict[str, str], dirs: Iterable[str] = ()):
        self._files = {_normalise(p): content for p, content in files.items()}
        self._dirs: set[str] = {_normalise(d) for d in dirs}
        for path in self._files:
            for parent in PurePosixPath(path).parents:
                if str(parent) != ".":
                    self._dirs.add(str(parent))

    def has(self, path: str) -> bool:
        path = _normalise(path)
        return path in self._files or path in self._dirs

    def read(self, path: str) -> str:
        return self._files.get(_normalise(path), "")

    def dir_exists(self, path: str) -> bool:
        return _normalise(path) in self._dirs

    def scan(self) -> TreeScan:
        files = sorted(
            path for path in self._files
            if not any(part in SKIP_DIRS for part in PurePosixPath(path).parts[:-1])
        )
        return TreeScan(files=files, ext_counts=_count_extensions(files))


# ---------------------------------------------------------------------------
# Helpers shared by every detector
# ---------------------------------------------------------------------------

def has_any(probe: ProjectProbe, *paths: str) -> bool:
    return any(probe.has(path) for path in paths)


def any_dir(probe: ProjectProbe, *paths: str) -> bool:
    return any(probe.dir_exists(path) for path in paths)


def mentions(probe: ProjectProbe, path: str, needle: str) -> bool:
    """Case-insensitive substring check on a single file."""
    if not probe.has(path):
        return False
    return needle.lower() in probe.read(path).lower()


def mentions_any(probe: ProjectProbe, paths: Iterable[str], needle: str) -> bool:
    return any(mentions(probe, path, needle) for path in paths)


def contains_ext(files: Iterable[str], ext: str) -> bool:
    ext = ext.lower()
    return any(f.lower().endswith(ext) for f in files)


def files_with_ext(files: Iterable[str], ext: str) -> list[str]:
    ext = ext.lower()
    return [f for f in files if f.lower().endswith(ext)]


# ---------------------------------------------------------------------------
# Scanning
# ---------------------------------------------------------------------------

def _scan_directory(root: Path) -> TreeScan:
    files: list[str] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=_log_walk_error):
        dirnames[:] = [d for d in dirnames if d not in SKIP_DIRS]
        rel_dir = Path(dirpath).relative_to(root)
        for name in filenames:
            files.append((rel_dir / name).as_posix())
    files.sort()
    return TreeScan(files=files, ext_counts=_count_extensions(files))


def _count_extensions(files: Iterable[str]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for path in files:
        ext = PurePosixPath(path).suffix.lower()
        if ext:
            counts[ext] = counts.get(ext, 0) + 1
    return counts


def _log_walk_error(exc: OSError) -> None:
    logger.debug("Skipping unreadable path during scan: %s", exc)


def _normalise(path: str) -> str:
    return PurePosixPath(path.replace("\\", "/")).as_posix()
