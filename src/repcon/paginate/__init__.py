"""Chunked pagination of source files into size-bounded output containers."""
from __future__ import annotations

from .container import ContainerWriter, container_path
from .engine import PaginationEngine, split_files_into_chunks
from .errors import CapacityTooSmallError, ContainerWriteError, FrameParseError, PaginationError
from .frames import ParsedPage, encoded_size, parse_pages, render_footer, render_header
from .models import FileWarning, PaginationResult, SourceFile, WarningStage
from .tracker import PageTracker

__all__ = [
    "CapacityTooSmallError",
    "ContainerWriteError",
    "ContainerWriter",
    "FileWarning",
    "FrameParseError",
    "PageTracker",
    "PaginationEngine",
    "PaginationError",
    "PaginationResult",
    "ParsedPage",
    "SourceFile",
    "WarningStage",
    "container_path",
    "encoded_size",
    "parse_pages",
    "render_footer",
    "render_header",
    "split_files_into_chunks",
]
