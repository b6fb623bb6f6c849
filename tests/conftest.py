"""Shared fixtures for building small repositories on disk."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, Iterable, Iterator, List

import pytest

from repcon import logging_config
from repcon.paginate import SourceFile

# Five ~26 byte files whose identifiers are long enough that two framed
# pages never share a 300 byte container.
SMALL_FILES: Dict[str, str] = {
    f"src/pkg/file_{number}.txt": f"contents of file number {number}\n" for number in range(1, 6)
}


@pytest.fixture()
def make_repo(tmp_path: Path) -> Callable[[Dict[str, object]], Path]:
    """Write ``{relative_path: str | bytes}`` under a fresh repository root."""

    def _make(files: Dict[str, object]) -> Path:
        root = tmp_path / "repo"
        root.mkdir(exist_ok=True)
        for relative, content in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(str(content), encoding="utf-8")
        return root

    return _make


@pytest.fixture()
def memory_source() -> Callable[[str, Iterable[str]], SourceFile]:
    """Build an in-memory source whose lines are served once."""

    def _make(identifier: str, lines: Iterable[str]) -> SourceFile:
        materialised: List[str] = list(lines)
        return SourceFile(identifier=identifier, open_lines=lambda: iter(materialised))

    return _make


@pytest.fixture()
def output_dir(tmp_path: Path) -> Path:
    return tmp_path / "output"


@pytest.fixture(autouse=True)
def audit_log_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point the audit logger at a per-test file and detach it afterwards."""

    audit_path = tmp_path / "logs" / "condense_audit.log"
    monkeypatch.setattr(logging_config, "_AUDIT_LOG_PATH", audit_path)
    _reset_audit_logger()
    yield audit_path
    _reset_audit_logger()


def _reset_audit_logger() -> None:
    audit_logger = logging.getLogger(logging_config.AUDIT_LOGGER_NAME)
    for handler in list(audit_logger.handlers):
        audit_logger.removeHandler(handler)
        handler.close()
    setattr(audit_logger, "_audit_configured", False)


@pytest.fixture()
def small_repo(make_repo: Callable[[Dict[str, object]], Path]) -> Path:
    return make_repo(dict(SMALL_FILES))
