"""Aggregate size checks performed before pagination starts."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Final, Iterable

LOGGER = logging.getLogger(__name__)

KILOBYTE: Final[int] = 1024
MEGABYTE: Final[int] = KILOBYTE * 1024
GIGABYTE: Final[int] = MEGABYTE * 1024


class SizeLimitExceededError(RuntimeError):
    """Raised when the selected files are larger than the configured allowance."""

    def __init__(self, total_size: int, allowed_size: int) -> None:
        super().__init__(
            f"The total size of the files ({format_file_size(total_size)}) exceeds the "
            f"allowed limit of {allowed_size} bytes ({format_file_size(allowed_size)})."
        )
        self.total_size = total_size
        self.allowed_size = allowed_size


def get_dir_size(root: Path, files: Iterable[Path]) -> int:
    """Sum the on-disk size of ``files`` under ``root``; unreadable entries count as zero."""
    total = 0
    for relative in files:
        try:
            total += (Path(root) / relative).stat().st_size
        except OSError as error:
            LOGGER.debug("Unable to stat %s: %s", relative, error)
    return total


def check_size_limits(total_size: int, total_allowed_size: int) -> None:
    if total_size > total_allowed_size:
        raise SizeLimitExceededError(total_size, total_allowed_size)


def format_file_size(size: int) -> str:
    if size >= GIGABYTE:
        return f"{size / GIGABYTE:.2f} GB"
    if size >= MEGABYTE:
        return f"{size / MEGABYTE:.2f} MB"
    if size >= KILOBYTE:
        return f"{size / KILOBYTE:.2f} KB"
    return f"{size} B"
