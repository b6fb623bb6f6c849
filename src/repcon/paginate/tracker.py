"""Per-file page state."""
from __future__ import annotations

from dataclasses import dataclass

from .frames import encoded_size, render_footer, render_header


@dataclass(frozen=True, slots=True)
class PageTracker:
    """Frame text and sizes for the page currently open for one source file."""

    identifier: str
    page_number: int
    header: str
    footer: str
    header_size: int
    footer_size: int

    @classmethod
    def start(cls, identifier: str) -> "PageTracker":
        return cls._render(identifier, 1)

    @classmethod
    def _render(cls, identifier: str, page_number: int) -> "PageTracker":
        header = render_header(identifier, page_number)
        footer = render_footer(identifier)
        return cls(
            identifier=identifier,
            page_number=page_number,
            header=header,
            footer=footer,
            header_size=encoded_size(header),
            footer_size=encoded_size(footer),
        )

    def advance(self) -> "PageTracker":
        """Return the tracker for the next page of the same file."""

        return self._render(self.identifier, self.page_number + 1)

    @property
    def frame_size(self) -> int:
        return self.header_size + self.footer_size

    def fits(self, capacity: int) -> bool:
        return self.frame_size <= capacity
