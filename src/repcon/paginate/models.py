"""Data models shared by the pagination engine and its callers."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, List


@dataclass(frozen=True, slots=True)
class SourceFile:
    """A file to paginate: its identifier plus a callable opening its lines.

    ``open_lines`` returns a lazy iterable of lines without terminators. It is
    called at most once per run.
    """

    identifier: str
    open_lines: Callable[[], Iterable[str]]


class WarningStage(str, Enum):
    """Where a recoverable per-file failure happened."""

    OPEN = "open"
    READ = "read"
    OVERSIZED_LINE = "oversized_line"


@dataclass(frozen=True, slots=True)
class FileWarning:
    identifier: str
    stage: WarningStage
    reason: str


@dataclass(slots=True)
class PaginationResult:
    """Containers produced by a run, in sequence order, with per-file warnings."""

    containers: List[Path] = field(default_factory=list)
    warnings: List[FileWarning] = field(default_factory=list)
