"""Merging a selection into one spanning cell, and splitting it again.

A merge acts on the bounding rectangle of the selected positions, not on the
exact selected shape. Unselected cells inside the rectangle are absorbed. The
rectangle also grows until it fully contains every merged region it touches,
so an existing region is never left partly covered by a new one.

Merging is lossy: covered cells are cleared, and a later split restores them
as empty cells.
"""

from __future__ import annotations

from collections.abc import Iterable

from loguru import logger

from extratable.exceptions import AddressingMiss
from extratable.models import (
    COVERED_SPAN,
    UNIT_SPAN,
    Page,
    Position,
    cell_at,
    ensure_row_width,
)

# (min_column, min_row, max_column, max_row), all inclusive
Box = tuple[int, int, int, int]


def bounding_box(positions: Iterable[Position]) -> Box:
    """Smallest rectangle containing all positions."""
    items = list(positions)
    if not items:
        raise ValueError("bounding_box() needs at least one position")
    return (
        min(p.column for p in items),
        min(p.row for p in items),
        max(p.column for p in items),
        max(p.row for p in items),
    )


def _intersects(a: Box, b: Box) -> bool:
    return a[0] <= b[2] and b[0] <= a[2] and a[1] <= b[3] and b[1] <= a[3]


def _grow_to_regions(page: Page, box: Box) -> Box:
    """Grow ``box`` until no merged region crosses its border."""
    changed = True
    while changed:
        changed = False
        for row_index, row in enumerate(page.rows):
            for column_index, cell in enumerate(row):
                if not cell.is_anchor:
                    continue
                span_width, span_height = cell.extent
                region = (
                    column_index,
                    row_index,
                    column_index + span_width - 1,
                    row_index + span_height - 1,
                )
                if not _intersects(box, region):
                    continue
                grown = (
                    min(box[0], region[0]),
                    min(box[1], region[1]),
                    max(box[2], region[2]),
                    max(box[3], region[3]),
                )
                if grown != box:
                    box = grown
                    changed = True
    return box


def merge_cells(page: Page, positions: Iterable[Position]) -> bool:
    """Merge the bounding rectangle of ``positions`` into one anchor cell.

    The rectangle is not always the plain bounding box of the selection: it
    is grown until every existing merged region it intersects lies fully
    inside it, and those regions are absorbed into the new one. No region is
    left with part of its cover inside the new rectangle and part outside.

    Returns False (and changes nothing) for fewer than two positions.
    """
    selected = set(positions)
    if len(selected) < 2:
        return False

    for position in selected:
        if cell_at(page, position.column, position.row) is None:
            raise AddressingMiss(f"cell {position}")

    width = page.width
    for row in page.rows:
        ensure_row_width(row, width)
    page.reindex()

    min_column, min_row, max_column, max_row = _grow_to_regions(page, bounding_box(selected))
    # A region read from malformed text may claim slots past the page
    max_column = min(max_column, page.width - 1)
    max_row = min(max_row, page.height - 1)
    span = (max_column - min_column + 1, max_row - min_row + 1)

    for row_index in range(min_row, max_row + 1):
        for column_index in range(min_column, max_column + 1):
            cell = page.rows[row_index][column_index]
            if column_index == min_column and row_index == min_row:
                cell.span = span
            else:
                cell.value = ""
                cell.span = COVERED_SPAN

    logger.debug("Merged {} cells into {};{} span {}", len(selected), min_column, min_row, span)
    return True


def split_cell(page: Page, position: Position) -> bool:
    """Restore a merged region to independent cells.

    Returns False when the cell is not an anchor. The anchor keeps its
    value; every other cell of the region comes back empty.
    """
    cell = cell_at(page, position.column, position.row)
    if cell is None:
        raise AddressingMiss(f"cell {position}")
    if not cell.is_anchor:
        return False

    span_width = min(cell.extent[0], page.width - position.column)
    span_height = min(cell.extent[1], page.height - position.row)
    cell.span = UNIT_SPAN
    for row_offset in range(span_height):
        for column_offset in range(span_width):
            if not row_offset and not column_offset:
                continue
            member = cell_at(
                page, position.column + column_offset, position.row + row_offset
            )
            if member is None:
                continue
            member.span = UNIT_SPAN
            member.value = ""

    logger.debug("Split {} ({}x{})", position, span_width, span_height)
    return True
