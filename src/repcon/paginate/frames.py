"""Rendering and parsing of the header/footer frames that delimit pages."""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List

from .errors import FrameParseError

ENCODING = "utf-8"

_FILE_NAME_PREFIX = "# repcon_file_name: "
_PAGE_NUMBER_PREFIX = "# repcon_page_number: "
_START_PREFIX = "// START OF CODE BLOCK: "
_END_PREFIX = "// END OF CODE BLOCK: "
_PAGE_NUMBER_RE = re.compile(r"^[1-9][0-9]*$")


def render_header(identifier: str, page_number: int) -> str:
    """Return the three-line header that opens page ``page_number`` of ``identifier``."""

    return (
        f"{_FILE_NAME_PREFIX}{identifier}\n"
        f"{_PAGE_NUMBER_PREFIX}{page_number}\n"
        f"{_START_PREFIX}{identifier}\n"
    )


def render_footer(identifier: str) -> str:
    """Return the end marker closing every page of ``identifier``."""

    return f"{_END_PREFIX}{identifier}\n"


def encoded_size(text: str) -> int:
    return len(text.encode(ENCODING))


@dataclass(slots=True)
class ParsedPage:
    """A page recovered from container text."""

    identifier: str
    page_number: int
    lines: List[str] = field(default_factory=list)


def parse_pages(text: str) -> List[ParsedPage]:
    """Split container text back into its framed pages.

    Every page must open with a full header and close with the footer for the
    same identifier; anything outside a frame is rejected.

    Frames are not escaped, so a body line identical to its page's footer
    (``// END OF CODE BLOCK: <identifier>``) ends the page early and the rest
    of that page is then read as stray text or misattributed.
    """

    pages: List[ParsedPage] = []
    current: ParsedPage | None = None
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()

    index = 0
    while index < len(lines):
        line = lines[index]
        if current is None:
            if not line.startswith(_FILE_NAME_PREFIX):
                raise FrameParseError(f"Expected page header at line {index + 1}, got {line!r}")
            if index + 2 >= len(lines):
                raise FrameParseError(f"Truncated page header at line {index + 1}")
            identifier = line[len(_FILE_NAME_PREFIX):]
            page_line = lines[index + 1]
            start_line = lines[index + 2]
            page_value = page_line[len(_PAGE_NUMBER_PREFIX):]
            if not page_line.startswith(_PAGE_NUMBER_PREFIX) or not _PAGE_NUMBER_RE.match(page_value):
                raise FrameParseError(f"Malformed page number at line {index + 2}: {page_line!r}")
            if start_line != f"{_START_PREFIX}{identifier}":
                raise FrameParseError(f"Malformed start marker at line {index + 3}: {start_line!r}")
            current = ParsedPage(identifier=identifier, page_number=int(page_value))
            index += 3
            continue

        if line == f"{_END_PREFIX}{current.identifier}":
            pages.append(current)
            current = None
        else:
            current.lines.append(line)
        index += 1

    if current is not None:
        raise FrameParseError(f"Page {current.page_number} of {current.identifier} has no end marker")
    return pages
