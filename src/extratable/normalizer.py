"""Visible-cell normalization for rendering and hit-testing.

A page stores every slot of its grid, including the covered members of merged
regions. Renderers need only the cells that are actually drawn. This module
walks a page once, row-major, and drops every slot claimed by an anchor seen
earlier in the walk. An anchor always sits at the top-left of its rectangle,
so it is visited before any cell it covers.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from extratable.models import UNIT_SPAN, Page, Position, Span


@dataclass(frozen=True)
class VisibleCell:
    """A cell that is drawn, annotated with its storage position."""

    position: Position
    value: str
    is_header: bool
    span: Span = UNIT_SPAN
    id: str | None = None

    @property
    def index_string(self) -> str:
        return str(self.position)

    @property
    def colspan(self) -> int:
        return self.span[0]

    @property
    def rowspan(self) -> int:
        return self.span[1]

    @property
    def is_merged(self) -> bool:
        return self.span != UNIT_SPAN


def iter_visible_rows(page: Page) -> Iterator[list[VisibleCell]]:
    """Yield each row's visible cells, top to bottom.

    One list is yielded per storage row, so display rows and storage rows
    line up even when a row is fully covered (that row yields an empty list).
    The generator is restartable: call it again for every render.
    """
    ignored: set[Position] = set()
    width = page.width
    height = page.height

    for row_index, row in enumerate(page.rows):
        visible: list[VisibleCell] = []
        for column_index, cell in enumerate(row):
            position = Position(column_index, row_index)
            if position in ignored:
                ignored.discard(position)
                continue

            # Spans read from malformed text may reach past the page
            span_width = max(1, min(cell.extent[0], width - column_index))
            span_height = max(1, min(cell.extent[1], height - row_index))
            span = (span_width, span_height)
            visible.append(
                VisibleCell(
                    position=position,
                    value=cell.value,
                    is_header=bool(cell.is_header),
                    span=span,
                    id=cell.id,
                )
            )

            for row_offset in range(span_height):
                for column_offset in range(span_width):
                    if row_offset or column_offset:
                        ignored.add(
                            Position(column_index + column_offset, row_index + row_offset)
                        )
        yield visible


def visible_cells(page: Page) -> list[VisibleCell]:
    """All visible cells of a page, row-major then column-major."""
    return [cell for row in iter_visible_rows(page) for cell in row]
