"""Tests for merging and splitting cells."""

import pytest

from extratable.exceptions import AddressingMiss
from extratable.merge import bounding_box, merge_cells, split_cell
from extratable.models import COVERED_SPAN, Page, Position
from extratable.normalizer import visible_cells
from tests.helpers import grid_values, make_page, row_lengths


def _spans(page: Page) -> list[list[tuple[int, int] | None]]:
    return [[cell.span for cell in row] for row in page.rows]


class TestBoundingBox:
    """Tests for bounding_box."""

    def test_box(self) -> None:
        box = bounding_box([Position(2, 1), Position(0, 3), Position(1, 0)])
        assert box == (0, 0, 2, 3)

    def test_empty(self) -> None:
        with pytest.raises(ValueError):
            bounding_box([])


class TestMerge:
    """Tests for merge_cells."""

    def test_two_by_two(self, grid: Page) -> None:
        assert merge_cells(grid, {Position(1, 1), Position(2, 2)}) is True
        anchor = grid.rows[1][1]
        assert anchor.span == (2, 2)
        assert anchor.value == "r1c1"
        for column, row in [(2, 1), (1, 2), (2, 2)]:
            cell = grid.rows[row][column]
            assert cell.span == COVERED_SPAN
            assert cell.value == ""

    def test_single_position_is_noop(self, grid: Page) -> None:
        before = grid_values(grid)
        assert merge_cells(grid, {Position(0, 0)}) is False
        assert grid_values(grid) == before
        assert all(cell.span is None for row in grid.rows for cell in row)

    def test_empty_selection_is_noop(self, grid: Page) -> None:
        assert merge_cells(grid, set()) is False

    def test_absorbs_unselected_interior(self, grid: Page) -> None:
        merge_cells(grid, {Position(0, 0), Position(2, 2)})
        assert grid.rows[0][0].span == (3, 3)
        assert grid.rows[1][1].is_covered
        assert grid.rows[1][1].value == ""

    def test_outside_cells_untouched(self, grid: Page) -> None:
        merge_cells(grid, {Position(0, 0), Position(1, 0)})
        assert grid.rows[0][2].value == "r0c2"
        assert grid.rows[1][0].span is None

    def test_grows_to_include_existing_region(self, grid: Page) -> None:
        merge_cells(grid, {Position(1, 1), Position(2, 2)})
        # Touches the existing region's anchor but not its lower half
        merge_cells(grid, {Position(0, 1), Position(1, 1)})
        assert grid.rows[1][0].span == (3, 2)
        assert grid.rows[1][1].is_covered
        assert grid.rows[2][2].is_covered
        assert len(visible_cells(grid)) == 16 - 5

    def test_grows_when_touching_covered_cell(self, grid: Page) -> None:
        merge_cells(grid, {Position(0, 0), Position(1, 1)})
        merge_cells(grid, {Position(1, 1), Position(2, 1)})
        assert grid.rows[0][0].span == (3, 2)

    def test_missing_position(self, grid: Page) -> None:
        with pytest.raises(AddressingMiss):
            merge_cells(grid, {Position(0, 0), Position(9, 9)})

    def test_keeps_rows_rectangular(self) -> None:
        page = make_page([["a", "b", "c"], ["d"]])
        merge_cells(page, {Position(0, 0), Position(0, 1)})
        assert row_lengths(page) == {3}
        assert page.rows[0][0].span == (1, 2)


class TestSplit:
    """Tests for split_cell."""

    def test_round_trip(self, grid: Page) -> None:
        before_shape = row_lengths(grid), grid.height
        merge_cells(grid, {Position(1, 1), Position(2, 2)})
        assert split_cell(grid, Position(1, 1)) is True

        assert (row_lengths(grid), grid.height) == before_shape
        assert grid.rows[1][1].value == "r1c1"
        for column, row in [(2, 1), (1, 2), (2, 2)]:
            assert grid.rows[row][column].value == ""
        for column, row in [(1, 1), (2, 1), (1, 2), (2, 2)]:
            assert grid.rows[row][column].span == (1, 1)
        assert len(visible_cells(grid)) == 16

    def test_unit_span_is_noop(self, grid: Page) -> None:
        grid.rows[0][0].span = (1, 1)
        before = _spans(grid), grid_values(grid)
        assert split_cell(grid, Position(0, 0)) is False
        assert (_spans(grid), grid_values(grid)) == before

    def test_plain_cell_is_noop(self, grid: Page) -> None:
        before = _spans(grid), grid_values(grid)
        assert split_cell(grid, Position(2, 2)) is False
        assert (_spans(grid), grid_values(grid)) == before

    def test_covered_cell_is_noop(self, grid: Page) -> None:
        merge_cells(grid, {Position(0, 0), Position(1, 0)})
        assert split_cell(grid, Position(1, 0)) is False
        assert grid.rows[0][0].span == (2, 1)

    def test_missing_position(self, grid: Page) -> None:
        with pytest.raises(AddressingMiss):
            split_cell(grid, Position(4, 0))

    def test_span_partly_outside_page(self) -> None:
        page = make_page([["a", "b"]])
        page.rows[0][0].span = (3, 1)
        assert split_cell(page, Position(0, 0)) is True
        assert page.rows[0][1].span == (1, 1)

    def test_huge_span_is_bounded_by_page(self) -> None:
        page = make_page([["a", "b"], ["c", "d"]])
        page.rows[0][0].span = (20000, 20000)
        assert split_cell(page, Position(0, 0)) is True
        assert [[cell.span for cell in row] for row in page.rows] == [
            [(1, 1), (1, 1)],
            [(1, 1), (1, 1)],
        ]
