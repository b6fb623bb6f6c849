"""Discovery of the repository files that should be condensed."""
from __future__ import annotations

import fnmatch
import logging
import os
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Dict, Final, Iterable, List, Optional, Sequence

from .paginate.frames import ENCODING
from .paginate.models import SourceFile

LOGGER = logging.getLogger(__name__)

IGNORE_FILE_NAME: Final[str] = ".repconignore"
# Per-directory ignore files honoured during the walk, as git and ripgrep do.
SCOPED_IGNORE_FILE_NAMES: Final[tuple[str, ...]] = (".gitignore", ".ignore")
_ALWAYS_SKIPPED_DIRS: Final[frozenset[str]] = frozenset({".git"})


def to_relative_path(root: Path, file_path: Path) -> Path:
    """Return ``file_path`` relative to ``root``, or unchanged when outside it."""
    try:
        return file_path.relative_to(root)
    except ValueError:
        return file_path


def load_ignore_file(ignore_file: Path) -> List[str]:
    if not ignore_file.is_file():
        return []
    lines = [line.strip() for line in ignore_file.read_text(encoding=ENCODING).splitlines()]
    return [line for line in lines if line and not line.startswith("#")]


def is_ignored(relative: PurePosixPath, patterns: Sequence[str], *, is_dir: bool = False) -> bool:
    rel = relative.as_posix()
    for pattern in patterns:
        if pattern.endswith("/"):
            if not is_dir:
                continue
            pattern = pattern.rstrip("/")
        if pattern.startswith("**/"):
            pattern = pattern[3:]
        if pattern.startswith("/"):
            # Anchored: only the path from the pattern's base directory counts.
            if fnmatch.fnmatchcase(rel, pattern.lstrip("/")):
                return True
            continue
        if fnmatch.fnmatchcase(rel, pattern) or fnmatch.fnmatchcase(relative.name, pattern):
            return True
    return False


def load_scoped_ignore_patterns(directory: Path) -> List[str]:
    """Read ``.gitignore`` and ``.ignore`` patterns declared in ``directory``.

    Negated (``!``) patterns cannot re-include anything here and are dropped.
    """

    patterns: List[str] = []
    for name in SCOPED_IGNORE_FILE_NAMES:
        for pattern in load_ignore_file(directory / name):
            if pattern.startswith("!"):
                LOGGER.debug("Ignoring negated pattern %r in %s", pattern, directory / name)
                continue
            patterns.append(pattern)
    return patterns


@dataclass(frozen=True, slots=True)
class _IgnoreScope:
    """Patterns from one directory's ignore files, applied below that directory."""

    base: PurePosixPath
    patterns: List[str]

    def ignores(self, relative: PurePosixPath, *, is_dir: bool) -> bool:
        below = PurePosixPath(*relative.parts[len(self.base.parts):])
        return is_ignored(below, self.patterns, is_dir=is_dir)


def collect_target_files(
    root: Path,
    ignore_patterns: Iterable[str] = (),
    ignore_file: Optional[Path] = None,
    *,
    include_hidden: bool = False,
    use_scoped_ignores: bool = True,
) -> List[Path]:
    """Walk ``root`` and return the relative paths of files that are not ignored.

    Patterns are shell-style globs matched against the relative POSIX path and
    the bare name; a trailing ``/`` restricts a pattern to directories, which
    prunes the whole subtree. Hidden entries (dot-files and dot-directories)
    are skipped unless ``include_hidden`` is set, and ``.gitignore``/``.ignore``
    files found along the walk exclude paths below their own directory. The
    walk is sorted so reruns see the same order.
    """

    root = Path(root)
    if not root.is_dir():
        raise NotADirectoryError(f"Repository path {root} is not a directory")

    patterns = list(ignore_patterns)
    if ignore_file is not None:
        patterns.extend(load_ignore_file(Path(ignore_file)))

    inherited: Dict[PurePosixPath, List[_IgnoreScope]] = {}
    files: List[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        current = Path(dirpath)
        rel_dir = PurePosixPath(to_relative_path(root, current).as_posix())
        scopes = inherited.pop(rel_dir, [])
        if use_scoped_ignores:
            local = load_scoped_ignore_patterns(current)
            if local:
                scopes = [*scopes, _IgnoreScope(base=rel_dir, patterns=local)]

        def skipped(relative: PurePosixPath, is_dir: bool) -> bool:
            if not include_hidden and relative.name.startswith("."):
                return True
            if is_ignored(relative, patterns, is_dir=is_dir):
                return True
            return any(scope.ignores(relative, is_dir=is_dir) for scope in scopes)

        dirnames[:] = sorted(
            name
            for name in dirnames
            if name not in _ALWAYS_SKIPPED_DIRS and not skipped(rel_dir / name, True)
        )
        for name in dirnames:
            inherited[rel_dir / name] = scopes
        for name in sorted(filenames):
            path = current / name
            if not path.is_file():
                continue
            if skipped(rel_dir / name, False):
                continue
            files.append(to_relative_path(root, path))

    LOGGER.info("Collected %s file(s) under %s", len(files), root)
    return files


def _strip_terminator(line: str) -> str:
    if line.endswith("\r\n"):
        return line[:-2]
    if line.endswith("\n"):
        return line[:-1]
    return line


class _LineStream:
    """Strict UTF-8 line iterator over an already opened file.

    Only ``\\n`` ends a line; a lone ``\\r`` is ordinary content.
    """

    def __init__(self, path: Path) -> None:
        self._handle = path.open("r", encoding=ENCODING, newline="\n")

    def __iter__(self) -> "_LineStream":
        return self

    def __next__(self) -> str:
        return _strip_terminator(next(self._handle))

    def close(self) -> None:
        self._handle.close()


def source_files(root: Path, relative_paths: Iterable[Path]) -> List[SourceFile]:
    """Build pagination inputs identified by their root-relative POSIX path."""

    root = Path(root)
    sources: List[SourceFile] = []
    for relative in relative_paths:
        absolute = root / relative
        identifier = Path(relative).as_posix()
        sources.append(SourceFile(identifier=identifier, open_lines=lambda path=absolute: _LineStream(path)))
    return sources
