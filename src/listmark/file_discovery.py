"""
Expanding CLI path arguments into the files Listmark should process.

Directories are walked recursively and filtered with gitignore-style patterns:
a file is kept when its name or relative path matches one of the configured
file types (`*.md`, `*.txt`, ...) and none of the exclusions.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from pathlib import Path

import pathspec

DEFAULT_EXCLUDES = (
    ".git/",
    ".hg/",
    ".svn/",
    ".venv/",
    "venv/",
    "node_modules/",
    "__pycache__/",
    ".tox/",
    "build/",
    "dist/",
)


class FileDiscovery:
    def __init__(self, file_types: Sequence[str], excludes: Sequence[str] = DEFAULT_EXCLUDES) -> None:
        self._include_spec: pathspec.PathSpec = pathspec.PathSpec.from_lines("gitignore", file_types)
        self._exclude_spec: pathspec.PathSpec = pathspec.PathSpec.from_lines("gitignore", excludes)

    def resolve(self, paths: Sequence[str | Path]) -> list[Path]:
        """
        Resolve input paths into a sorted, deduplicated list of files.

        Files named explicitly are always kept; directories are walked with the
        filters applied. Anything else raises `FileNotFoundError`.
        """
        found: set[Path] = set()
        for raw_path in paths:
            path = Path(raw_path)
            if path.is_file():
                found.add(path.resolve())
            elif path.is_dir():
                found.update(p.resolve() for p in self._walk(path))
            else:
                raise FileNotFoundError(f"Path not found: {raw_path}")
        return sorted(found)

    def _walk(self, root: Path) -> list[Path]:
        results: list[Path] = []
        for dirpath, dirnames, filenames in os.walk(root):
            rel_dir = Path(dirpath).relative_to(root)
            # Prune excluded directories in place so os.walk skips them.
            dirnames[:] = sorted(
                d for d in dirnames if not self._exclude_spec.match_file(f"{(rel_dir / d).as_posix()}/")
            )
            for filename in sorted(filenames):
                rel_path = (rel_dir / filename).as_posix()
                if self._exclude_spec.match_file(rel_path):
                    continue
                if self._include_spec.match_file(rel_path):
                    results.append(Path(dirpath) / filename)
        return results
