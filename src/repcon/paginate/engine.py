"""Chunked pagination of source files into size-bounded containers."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator, Optional

from .container import ContainerWriter
from .errors import CapacityTooSmallError, ContainerWriteError
from .frames import encoded_size
from .models import FileWarning, PaginationResult, SourceFile, WarningStage
from .tracker import PageTracker

LOGGER = logging.getLogger(__name__)

# Body lines are always terminated with a single "\n".
_LINE_TERMINATOR = "\n"
_LINE_TERMINATOR_SIZE = 1


class _PaginationState:
    """Mutable state of one run: the open container and the produced results."""

    def __init__(self, directory: Path, capacity: int, base_name: str) -> None:
        self.directory = directory
        self.capacity = capacity
        self.base_name = base_name
        self.result = PaginationResult()
        self.writer: Optional[ContainerWriter] = None
        self._open(1)

    @property
    def used_bytes(self) -> int:
        assert self.writer is not None
        return self.writer.used_bytes

    def remaining_after(self, size: int) -> int:
        return self.capacity - (self.used_bytes + size)

    def write(self, text: str) -> None:
        assert self.writer is not None
        self.writer.append(text)

    def rollover(self) -> None:
        assert self.writer is not None
        next_number = self.writer.sequence_number + 1
        self.writer.seal()
        self._open(next_number)

    def warn(self, identifier: str, stage: WarningStage, error: object) -> None:
        warning = FileWarning(identifier=identifier, stage=stage, reason=str(error))
        self.result.warnings.append(warning)
        LOGGER.warning("Skipping content of %s (%s): %s", identifier, stage.value, warning.reason)

    def finish(self) -> PaginationResult:
        if self.writer is not None:
            self.writer.seal()
        return self.result

    def abort(self) -> None:
        """Remove every container written in this run."""

        if self.writer is not None:
            self.writer.discard()
            self.writer = None
        for path in self.result.containers:
            path.unlink(missing_ok=True)
        self.result.containers.clear()

    def _open(self, sequence_number: int) -> None:
        self.writer = ContainerWriter.open(self.directory, sequence_number, self.base_name)
        self.result.containers.append(self.writer.path)


class PaginationEngine:
    """Pack source files into numbered containers of at most ``capacity`` bytes.

    Each file is written as one or more pages, each wrapped in a header naming
    the file and page number and a matching footer. A page never straddles two
    containers; when the next line would not leave room for the footer, the
    page is closed and the file continues on a new page in a new container.
    """

    def __init__(self, output_directory: Path, capacity: int, base_name: str) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be a positive number of bytes")
        if not base_name:
            raise ValueError("base_name must not be empty")
        self.output_directory = Path(output_directory)
        self.capacity = capacity
        self.base_name = base_name

    def run(self, files: Iterable[SourceFile]) -> PaginationResult:
        try:
            self.output_directory.mkdir(parents=True, exist_ok=True)
        except OSError as error:
            raise ContainerWriteError(self.output_directory, cause=error) from error

        state = _PaginationState(self.output_directory, self.capacity, self.base_name)
        try:
            for source in files:
                self._paginate_file(state, source)
        except Exception:
            LOGGER.error("Pagination aborted; removing %s partial container(s)", len(state.result.containers))
            state.abort()
            raise
        except BaseException:
            state.finish()
            raise

        result = state.finish()
        LOGGER.info(
            "Generated %s container(s) with %s warning(s)",
            len(result.containers),
            len(result.warnings),
        )
        return result

    def _paginate_file(self, state: _PaginationState, source: SourceFile) -> None:
        identifier = source.identifier
        try:
            lines = iter(source.open_lines())
        except (OSError, ValueError) as error:
            state.warn(identifier, WarningStage.OPEN, error)
            return

        try:
            tracker = self._validated(PageTracker.start(identifier))
            if state.remaining_after(tracker.frame_size) < 0:
                state.rollover()
            state.write(tracker.header)
            tracker = self._write_body(state, tracker, lines)
            state.write(tracker.footer)
        finally:
            close = getattr(lines, "close", None)
            if close is not None:
                close()

        LOGGER.debug("Paginated %s into %s page(s)", identifier, tracker.page_number)

    def _write_body(self, state: _PaginationState, tracker: PageTracker, lines: Iterator[str]) -> PageTracker:
        """Write the lines of one file, rolling over pages as needed.

        Returns the tracker of the page left open, whose footer is still owed.
        """

        while True:
            try:
                line = next(lines)
            except StopIteration:
                return tracker
            except (OSError, ValueError) as error:
                state.warn(tracker.identifier, WarningStage.READ, error)
                return tracker

            line_size = encoded_size(line) + _LINE_TERMINATOR_SIZE
            if state.remaining_after(line_size + tracker.footer_size) < 0:
                next_tracker = self._validated(tracker.advance())
                if next_tracker.frame_size + line_size > self.capacity:
                    state.warn(
                        tracker.identifier,
                        WarningStage.OVERSIZED_LINE,
                        f"line of {line_size} bytes cannot fit a page of {self.capacity} bytes",
                    )
                    return tracker
                state.write(tracker.footer)
                state.rollover()
                tracker = next_tracker
                state.write(tracker.header)

            state.write(line + _LINE_TERMINATOR)

    def _validated(self, tracker: PageTracker) -> PageTracker:
        if not tracker.fits(self.capacity):
            raise CapacityTooSmallError(
                tracker.identifier, tracker.page_number, tracker.frame_size, self.capacity
            )
        return tracker


def split_files_into_chunks(
    files: Iterable[SourceFile],
    output_directory: Path,
    max_file_size: int,
    output_name: str,
) -> PaginationResult:
    """Paginate ``files`` into ``output_directory/{output_name}_{n}.txt`` containers."""

    return PaginationEngine(output_directory, max_file_size, output_name).run(files)
