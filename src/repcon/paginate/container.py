"""Output container handling."""
from __future__ import annotations

import logging
from pathlib import Path
from types import TracebackType
from typing import IO, Optional, Type

from .errors import ContainerWriteError
from .frames import ENCODING

LOGGER = logging.getLogger(__name__)


def container_path(directory: Path, sequence_number: int, base_name: str) -> Path:
    return directory / f"{base_name}_{sequence_number}.txt"


class ContainerWriter:
    """Append-only writer for one numbered output container.

    The writer only counts bytes; deciding whether a write fits is left to the
    pagination engine.
    """

    def __init__(self, path: Path, sequence_number: int, handle: IO[bytes]) -> None:
        self.path = path
        self.sequence_number = sequence_number
        self.used_bytes = 0
        self._handle: Optional[IO[bytes]] = handle

    @classmethod
    def open(cls, directory: Path, sequence_number: int, base_name: str) -> "ContainerWriter":
        path = container_path(directory, sequence_number, base_name)
        try:
            handle = path.open("wb")
        except OSError as error:
            raise ContainerWriteError(path, cause=error) from error
        LOGGER.debug("Opened container %s", path)
        return cls(path, sequence_number, handle)

    @property
    def sealed(self) -> bool:
        return self._handle is None

    def append(self, text: str) -> None:
        if self._handle is None:
            raise ContainerWriteError(self.path, cause=ValueError("container is sealed"))
        data = text.encode(ENCODING)
        try:
            self._handle.write(data)
        except OSError as error:
            raise ContainerWriteError(self.path, cause=error) from error
        self.used_bytes += len(data)

    def seal(self) -> None:
        if self._handle is None:
            return
        handle, self._handle = self._handle, None
        try:
            handle.close()
        except OSError as error:
            raise ContainerWriteError(self.path, cause=error) from error
        LOGGER.debug("Sealed container %s at %s bytes", self.path, self.used_bytes)

    def discard(self) -> None:
        """Close the container and delete whatever was written to it."""

        if self._handle is not None:
            handle, self._handle = self._handle, None
            handle.close()
        self.path.unlink(missing_ok=True)

    def __enter__(self) -> "ContainerWriter":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        self.seal()
