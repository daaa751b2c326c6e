"""Grid model for extratable.

A store holds pages in insertion order. Each page is a rectangular grid of
cells. Merged regions are kept in place: the top-left cell of the region is
the anchor and carries the span, every other member is a covered cell with an
empty value and the sentinel span ``(0, 0)``. Rows are never shortened by a
merge, so storage coordinates stay stable for external addressing.
"""

from __future__ import annotations

import copy
import re
from dataclasses import dataclass, field
from typing import Any

from extratable.exceptions import AddressingMiss

Span = tuple[int, int]

COVERED_SPAN: Span = (0, 0)
UNIT_SPAN: Span = (1, 1)

_POSITION_RE = re.compile(r"^\s*(\d+)\s*;\s*(\d+)\s*$")


@dataclass(frozen=True, order=True)
class Position:
    """Zero-based storage coordinate of a cell.

    The textual identity is ``"<column>;<row>"``. A position does not have to
    name a visible cell; it may point at a covered one.
    """

    column: int
    row: int

    def __str__(self) -> str:
        return f"{self.column};{self.row}"

    @classmethod
    def parse(cls, text: str) -> Position:
        """Parse ``"<column>;<row>"``.

        Examples:
            "0;0" -> Position(0, 0), "3;12" -> Position(3, 12)
        """
        match = _POSITION_RE.match(text)
        if not match:
            raise ValueError(f"Invalid cell position: {text!r}")
        return cls(int(match.group(1)), int(match.group(2)))


@dataclass
class Cell:
    """A single storage slot of a page."""

    value: str = ""
    id: str | None = None
    is_header: bool | None = None
    span: Span | None = None
    column: int = 0
    row: int = 0

    @property
    def is_covered(self) -> bool:
        return self.span == COVERED_SPAN

    @property
    def is_anchor(self) -> bool:
        if self.span is None or self.is_covered:
            return False
        width, height = self.span
        return width > 1 or height > 1

    @property
    def extent(self) -> Span:
        """Span with defaults applied: absent and covered both mean (1, 1)."""
        if self.span is None or self.is_covered:
            return UNIT_SPAN
        return self.span

    @property
    def position(self) -> Position:
        return Position(self.column, self.row)


@dataclass
class Page:
    """One sheet of a store: an optional title and a grid of rows."""

    title: str | None = None
    rows: list[list[Cell]] = field(default_factory=list)

    @property
    def height(self) -> int:
        return len(self.rows)

    @property
    def width(self) -> int:
        return max((len(row) for row in self.rows), default=0)

    def reindex(self) -> None:
        """Rewrite every cell's logical coordinates to its storage slot."""
        for row_index, row in enumerate(self.rows):
            for column_index, cell in enumerate(row):
                cell.column = column_index
                cell.row = row_index

    def positions(self) -> list[Position]:
        """All storage positions, row-major."""
        return [
            Position(column_index, row_index)
            for row_index, row in enumerate(self.rows)
            for column_index in range(len(row))
        ]


@dataclass
class Store:
    """Parsed content of one table block.

    ``typings``, ``expressions`` and ``styles`` hold the format's script
    sub-languages. They are carried through edits untouched.
    """

    pages: dict[str, Page] = field(default_factory=dict)
    typings: list[Any] = field(default_factory=list)
    expressions: list[Any] = field(default_factory=list)
    styles: list[Any] = field(default_factory=list)

    def copy(self) -> Store:
        """Deep copy, so an edit can be applied without touching the original."""
        return copy.deepcopy(self)

    def page(self, page_id: str) -> Page | None:
        return self.pages.get(page_id)

    def require_page(self, page_id: str) -> Page:
        """Like page(), but a missing page is an AddressingMiss."""
        page = self.pages.get(page_id)
        if page is None:
            raise AddressingMiss(f"page {page_id}")
        return page


def empty_cell(column: int, row: int, is_header: bool | None = None) -> Cell:
    """Create an empty, unspanned cell at the given slot."""
    return Cell(value="", column=column, row=row, is_header=is_header)


def cell_at(page: Page, column: int, row: int) -> Cell | None:
    """Bounds-checked lookup. Returns None instead of raising."""
    if row < 0 or row >= len(page.rows):
        return None
    cells = page.rows[row]
    if column < 0 or column >= len(cells):
        return None
    return cells[column]


def ensure_row_width(row: list[Cell], min_length: int) -> None:
    """Pad a row with empty cells up to ``min_length``.

    Padding cells inherit ``is_header`` from the row's first cell, or False
    when the row is empty.
    """
    if len(row) >= min_length:
        return
    is_header = bool(row[0].is_header) if row else False
    row_index = row[0].row if row else 0
    for column_index in range(len(row), min_length):
        row.append(empty_cell(column_index, row_index, is_header=is_header))


def find_inconsistencies(page: Page) -> list[str]:
    """List violations of the grid invariants for a page.

    Checked: equal row lengths, span rectangles inside the page, well-formed
    spans, and empty covered cells. A covered cell outside every anchor
    rectangle is tolerated; it renders as an ordinary cell.
    """
    problems: list[str] = []
    width = page.width
    height = page.height

    for row_index, row in enumerate(page.rows):
        if len(row) != width:
            problems.append(f"row {row_index} has {len(row)} cells, expected {width}")

        for column_index, cell in enumerate(row):
            where = Position(column_index, row_index)
            if cell.span is None:
                continue
            span_width, span_height = cell.span
            if span_width < 0 or span_height < 0:
                problems.append(f"cell {where} has negative span {cell.span}")
                continue
            if (span_width == 0) != (span_height == 0):
                problems.append(f"cell {where} has malformed span {cell.span}")
                continue
            if cell.is_covered:
                if cell.value:
                    problems.append(f"covered cell {where} carries a value")
                continue
            if column_index + span_width > width or row_index + span_height > height:
                problems.append(
                    f"span {cell.span} of cell {where} extends past "
                    f"{width}x{height} page"
                )

    return problems
