"""Exceptions raised by the pagination engine."""
from __future__ import annotations


class PaginationError(RuntimeError):
    """Base class for failures that abort a pagination run."""

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.__cause__ = cause


class CapacityTooSmallError(PaginationError):
    """Raised when a page header and footer alone exceed the container capacity."""

    def __init__(self, identifier: str, page_number: int, required: int, capacity: int) -> None:
        super().__init__(
            f"The maximum file size ({capacity}) is too small to contain the page header "
            f"and footer for {identifier} page {page_number} ({required} bytes required)."
        )
        self.identifier = identifier
        self.page_number = page_number
        self.required = required
        self.capacity = capacity


class ContainerWriteError(PaginationError):
    """Raised when an output container cannot be created or written."""

    def __init__(self, path: object, *, cause: Exception | None = None) -> None:
        super().__init__(f"Failed to write output container {path}: {cause}", cause=cause)
        self.path = path


class FrameParseError(ValueError):
    """Raised when container text does not consist of well-formed pages."""
