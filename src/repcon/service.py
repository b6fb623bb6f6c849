"""High level condense entry point shared by the CLI and the HTTP API."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import httpx

from .config import CondenseSettings
from .discovery import collect_target_files, source_files, to_relative_path
from .logging_config import get_audit_logger
from .paginate import FileWarning, PaginationEngine
from .sizing import check_size_limits, format_file_size, get_dir_size
from .upload import UploadResult, resolve_api_key, upload_files

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class CondenseReport:
    containers: List[Path]
    warnings: List[FileWarning]
    file_count: int
    total_size: int
    uploads: List[UploadResult] = field(default_factory=list)

    @property
    def total_size_human(self) -> str:
        return format_file_size(self.total_size)


def _ignore_patterns(settings: CondenseSettings) -> List[str]:
    """Ignore patterns plus the output directory when it lives inside the repository."""
    patterns = list(settings.ignore_patterns)
    root = settings.path_to_repo.resolve()
    output = to_relative_path(root, settings.output_directory.resolve())
    if not output.is_absolute() and output != Path("."):
        patterns.append(f"{output.as_posix()}/")
    return patterns


def condense(settings: CondenseSettings, *, http_client: Optional[httpx.Client] = None) -> CondenseReport:
    """Collect, size-check, paginate and optionally upload a repository.

    Raises :class:`~repcon.sizing.SizeLimitExceededError` before any container
    is written when the selection is too large, and lets pagination errors
    propagate unchanged.
    """

    start = time.time()
    root = settings.path_to_repo
    files = collect_target_files(
        root,
        _ignore_patterns(settings),
        settings.resolved_ignore_file,
        include_hidden=settings.include_hidden,
    )
    total_size = get_dir_size(root, files)
    LOGGER.info("Total size of %s selected file(s): %s", len(files), format_file_size(total_size))
    check_size_limits(total_size, settings.total_allowed_size)

    engine = PaginationEngine(settings.output_directory, settings.max_file_size, settings.output_name)
    result = engine.run(source_files(root, files))

    report = CondenseReport(
        containers=result.containers,
        warnings=result.warnings,
        file_count=len(files),
        total_size=total_size,
    )

    api_key = resolve_api_key(settings.api_key, requested=settings.upload)
    if api_key:
        report.uploads = upload_files(report.containers, api_key, purpose=settings.purpose, client=http_client)

    get_audit_logger().info(
        {
            "event": "condense",
            "repo": str(root),
            "files": report.file_count,
            "total_size": report.total_size,
            "containers": [str(path) for path in report.containers],
            "warnings": [
                {"file": warning.identifier, "stage": warning.stage.value, "reason": warning.reason}
                for warning in report.warnings
            ],
            "uploaded": sum(1 for upload in report.uploads if upload.ok),
            "duration_seconds": round(time.time() - start, 3),
        }
    )
    return report
