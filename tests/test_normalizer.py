"""Tests for visible-cell normalization."""

from extratable.merge import merge_cells
from extratable.models import COVERED_SPAN, Cell, Page, Position
from extratable.normalizer import iter_visible_rows, visible_cells
from tests.helpers import make_page


def _positions(page: Page) -> list[Position]:
    return [cell.position for cell in visible_cells(page)]


class TestWithoutSpans:
    """Pages without merged regions."""

    def test_every_cell_once_in_order(self, grid: Page) -> None:
        cells = visible_cells(grid)
        assert len(cells) == 16
        assert _positions(grid) == [Position(c, r) for r in range(4) for c in range(4)]

    def test_values_and_identity(self) -> None:
        page = make_page([["a", "b"], ["c", "d"]])
        cells = visible_cells(page)
        assert [c.value for c in cells] == ["a", "b", "c", "d"]
        assert [c.index_string for c in cells] == ["0;0", "1;0", "0;1", "1;1"]

    def test_span_defaults_to_unit(self) -> None:
        page = make_page([["a"]])
        (cell,) = visible_cells(page)
        assert cell.span == (1, 1)
        assert not cell.is_merged

    def test_header_flag(self) -> None:
        page = make_page([["h"], ["v"]])
        page.rows[0][0].is_header = True
        cells = visible_cells(page)
        assert cells[0].is_header is True
        assert cells[1].is_header is False

    def test_empty_page(self) -> None:
        assert visible_cells(Page()) == []


class TestWithSpans:
    """Merged regions hide their covered cells."""

    def test_horizontal_span(self) -> None:
        page = make_page([["a", "", "c"], ["d", "e", "f"]])
        page.rows[0][0].span = (2, 1)
        page.rows[0][1].span = COVERED_SPAN
        rows = list(iter_visible_rows(page))
        assert [c.position for c in rows[0]] == [Position(0, 0), Position(2, 0)]
        assert rows[0][0].colspan == 2
        assert len(rows[1]) == 3

    def test_vertical_span(self) -> None:
        page = make_page([["a", "b"], ["", "d"], ["e", "f"]])
        page.rows[0][0].span = (1, 2)
        page.rows[1][0].span = COVERED_SPAN
        rows = list(iter_visible_rows(page))
        assert [c.position for c in rows[1]] == [Position(1, 1)]
        assert rows[0][0].rowspan == 2
        assert len(rows[2]) == 2

    def test_merged_rectangle_emits_one_cell(self, grid: Page) -> None:
        merge_cells(grid, {Position(1, 1), Position(2, 2)})
        positions = _positions(grid)
        inside = [Position(c, r) for r in (1, 2) for c in (1, 2)]
        assert Position(1, 1) in positions
        assert all(p not in positions for p in inside if p != Position(1, 1))
        assert len(positions) == 16 - 3

    def test_fully_covered_row_still_yields(self) -> None:
        page = make_page([["a", ""], ["", ""], ["c", "d"]])
        page.rows[0][0].span = (2, 2)
        rows = list(iter_visible_rows(page))
        assert len(rows) == 3
        assert rows[1] == []

    def test_orphan_covered_cell_renders_as_plain(self) -> None:
        page = make_page([["a", ""]])
        page.rows[0][1].span = COVERED_SPAN
        cells = visible_cells(page)
        assert len(cells) == 2
        assert cells[1].span == (1, 1)

    def test_restartable(self, grid: Page) -> None:
        merge_cells(grid, {Position(0, 0), Position(1, 1)})
        assert visible_cells(grid) == visible_cells(grid)

    def test_span_past_page_is_clamped(self) -> None:
        page = Page(rows=[[Cell(value="a", span=(20000, 20000)), Cell(value="b")]])
        page.reindex()
        cells = visible_cells(page)
        assert [c.position for c in cells] == [Position(0, 0)]
        assert cells[0].span == (2, 1)

    def test_malformed_span_renders_as_unit(self) -> None:
        page = make_page([["a", "b"]])
        page.rows[0][0].span = (0, 3)
        assert [c.span for c in visible_cells(page)] == [(1, 1), (1, 1)]
