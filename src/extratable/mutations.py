"""Structural edits on a page: rows, columns and cell values.

These operations change the shape of a page and keep every row the same
length. They do not move merged regions: a span keeps its anchor and its
width/height across an insert or delete, even if that now claims different
rows or columns than before. The only adjustment is clamping, so that no span
reaches past the page after a deletion.
"""

from __future__ import annotations

from loguru import logger

from extratable.exceptions import AddressingMiss
from extratable.models import (
    Cell,
    Page,
    Position,
    cell_at,
    empty_cell,
    ensure_row_width,
)


def insert_row(page: Page, after_index: int) -> None:
    """Insert an empty row right after ``after_index``.

    ``after_index == -1`` inserts at the top. The new row is as wide as the
    first row, or one cell wide for an empty page.
    """
    if after_index < -1 or after_index >= page.height:
        raise AddressingMiss(f"row {after_index}")

    _pad_rows(page, page.width)
    cells_count = len(page.rows[0]) if page.rows else 1
    target = after_index + 1
    new_row: list[Cell] = [empty_cell(i, target) for i in range(cells_count)]
    page.rows.insert(target, new_row)

    page.reindex()
    logger.debug("Inserted row at {} ({} cells)", target, cells_count)


def remove_row(page: Page, index: int) -> None:
    """Delete the row at ``index``."""
    if index < 0 or index >= page.height:
        raise AddressingMiss(f"row {index}")

    del page.rows[index]
    _pad_rows(page, page.width)
    clamp_spans(page)
    page.reindex()
    logger.debug("Removed row {}", index)


def insert_column(page: Page, after_index: int) -> None:
    """Insert an empty column right after ``after_index``.

    Rows shorter than ``after_index + 1`` are padded first, so inserting
    after column 5 into a 3-cell row yields a 7-cell row. The new cell takes
    its header flag from the row's first cell.
    """
    if after_index < -1:
        raise AddressingMiss(f"column {after_index}")

    _pad_rows(page, max(page.width, after_index + 1))
    target = after_index + 1
    for row_index, row in enumerate(page.rows):
        is_header = row[0].is_header if row else None
        row.insert(target, empty_cell(target, row_index, is_header=is_header))

    page.reindex()
    logger.debug("Inserted column at {}", target)


def remove_column(page: Page, index: int) -> None:
    """Delete the column at ``index`` from every row.

    Rows shorter than ``index + 1`` are padded before the delete.
    """
    if index < 0:
        raise AddressingMiss(f"column {index}")

    _pad_rows(page, max(page.width, index + 1))
    for row in page.rows:
        del row[index]

    clamp_spans(page)
    page.reindex()
    logger.debug("Removed column {}", index)


def set_cell_value(page: Page, position: Position, value: str) -> bool:
    """Replace the value of a cell.

    Returns False when the value is unchanged. Covered cells are not
    addressable for edits.
    """
    cell = cell_at(page, position.column, position.row)
    if cell is None or cell.is_covered:
        raise AddressingMiss(f"cell {position}")
    if cell.value == value:
        return False
    cell.value = value
    return True


def clamp_spans(page: Page) -> None:
    """Shrink any anchor span that reaches past the page bounds."""
    width = page.width
    height = page.height
    for row_index, row in enumerate(page.rows):
        for column_index, cell in enumerate(row):
            if not cell.is_anchor or cell.span is None:
                continue
            span_width, span_height = cell.span
            clamped = (
                min(span_width, width - column_index),
                min(span_height, height - row_index),
            )
            if clamped != cell.span:
                logger.debug(
                    "Clamped span of {};{} from {} to {}",
                    column_index,
                    row_index,
                    cell.span,
                    clamped,
                )
                cell.span = clamped


def _pad_rows(page: Page, width: int) -> None:
    for row in page.rows:
        ensure_row_width(row, width)


def tidy_page(page: Page) -> None:
    """Bring a page read from loose text back within the grid invariants.

    Short rows are padded to the page width and spans reaching past the page
    are clamped. Text written by other tools may have either.
    """
    width = page.width
    if any(len(row) != width for row in page.rows):
        _pad_rows(page, width)
        page.reindex()
        logger.debug("Padded short rows to width {}", width)
    clamp_spans(page)
