"""Source file discovery for the doc generator."""

from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Iterable, List, Sequence

from ..logging import get_logger
from .errors import DiscoveryError

logger = get_logger("gendoc.discovery")


def package_key(path: str) -> str:
    """Return the subdirectory a relative source path belongs to."""
    return PurePosixPath(path).parts[0]


def discover_files(
    root: Path,
    pattern: str,
    *,
    hidden: Iterable[str] = (),
    test_suffixes: Sequence[str] = ("_test.go",),
    platform_suffixes: Sequence[str] = ("_windows.go",),
) -> List[str]:
    """Return candidate source files under ``root`` matching ``pattern``.

    Paths are relative, POSIX-style and in lexical order. Files in hidden
    packages, test files and platform-scoped files are dropped.
    """
    if not pattern or pattern.startswith("/"):
        raise DiscoveryError(f"Invalid source glob pattern: {pattern!r}")
    try:
        matches = sorted(
            path.relative_to(root).as_posix() for path in root.glob(pattern) if path.is_file()
        )
    except (ValueError, NotImplementedError) as exc:
        raise DiscoveryError(f"Invalid source glob pattern {pattern!r}: {exc}") from exc

    hidden_set = set(hidden)
    files: List[str] = []
    for rel_path in matches:
        # Files directly under the root have no package.
        if "/" not in rel_path:
            continue
        if package_key(rel_path) in hidden_set:
            continue
        if test_suffixes and rel_path.endswith(tuple(test_suffixes)):
            continue
        if platform_suffixes and rel_path.endswith(tuple(platform_suffixes)):
            continue
        files.append(rel_path)

    logger.debug("Discovered %d of %d files matching %s", len(files), len(matches), pattern)
    return files


__all__ = ["discover_files", "package_key"]
