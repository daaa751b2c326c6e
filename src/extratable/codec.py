"""Text codecs: turning block source text into a store and back.

Defines the Codec interface and the bundled implementation:
- JsonCodec: JSON rendition of a store, used by the CLI and the tests
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any

from extratable.exceptions import ParseError, SerializeError
from extratable.models import (
    COVERED_SPAN,
    Cell,
    Page,
    Position,
    Store,
    find_inconsistencies,
)


class Codec(ABC):
    """Abstract base class for table text codecs."""

    @abstractmethod
    async def parse(self, text: str) -> Store:
        """Parse block source text.

        Args:
            text: Inner text of a table block (no fence lines)

        Returns:
            Store with every cell's logical position set

        Raises:
            ParseError: If the text is malformed
        """
        ...

    @abstractmethod
    async def serialize(self, store: Store, show_indices: bool = False) -> str:
        """Write a store back to block source text.

        Args:
            store: Store to write
            show_indices: Whether each cell's "<col>;<row>" identity is emitted

        Raises:
            SerializeError: If the store violates the grid invariants
        """
        ...


class JsonCodec(Codec):
    """Codec for the JSON table notation.

    Expected shape:
        {
          "pages": {
            "<page id>": {
              "title": "optional",
              "rows": [[{"value": "a", "isHeader": true, "span": [2, 1]}, "b"]]
            }
          },
          "typings": [], "expressions": [], "styles": []
        }

    A cell may be written as a bare string, meaning a plain value.
    """

    def __init__(self, indent: int = 2) -> None:
        self._indent = indent

    async def parse(self, text: str) -> Store:
        if not text.strip():
            return Store()
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ParseError(e.msg, line=e.lineno) from e

        if not isinstance(data, dict):
            raise ParseError("top level must be an object")
        pages_data = data.get("pages", {})
        if not isinstance(pages_data, dict):
            raise ParseError("'pages' must be an object")

        store = Store(
            typings=_list_field(data, "typings"),
            expressions=_list_field(data, "expressions"),
            styles=_list_field(data, "styles"),
        )
        for page_id, page_data in pages_data.items():
            store.pages[str(page_id)] = _parse_page(str(page_id), page_data)
        return store

    async def serialize(self, store: Store, show_indices: bool = False) -> str:
        problems: list[str] = []
        for page_id, page in store.pages.items():
            problems.extend(f"{page_id}: {p}" for p in find_inconsistencies(page))
        if problems:
            raise SerializeError(problems)

        pages: dict[str, Any] = {}
        for page_id, page in store.pages.items():
            page_data: dict[str, Any] = {}
            if page.title:
                page_data["title"] = page.title
            page_data["rows"] = [
                [
                    _cell_to_json(cell, Position(column_index, row_index), show_indices)
                    for column_index, cell in enumerate(row)
                ]
                for row_index, row in enumerate(page.rows)
            ]
            pages[page_id] = page_data

        output: dict[str, Any] = {"pages": pages}
        for name in ("typings", "expressions", "styles"):
            value = getattr(store, name)
            if value:
                output[name] = value
        return json.dumps(output, indent=self._indent, ensure_ascii=False) + "\n"


def _list_field(data: dict[str, Any], name: str) -> list[Any]:
    value = data.get(name, [])
    if not isinstance(value, list):
        raise ParseError(f"'{name}' must be a list")
    return value


def _parse_page(page_id: str, page_data: Any) -> Page:
    if not isinstance(page_data, dict):
        raise ParseError(f"page '{page_id}' must be an object")
    title = page_data.get("title")
    if title is not None and not isinstance(title, str):
        raise ParseError(f"title of page '{page_id}' must be a string")
    rows_data = page_data.get("rows", [])
    if not isinstance(rows_data, list):
        raise ParseError(f"rows of page '{page_id}' must be a list")

    rows: list[list[Cell]] = []
    for row_index, row_data in enumerate(rows_data):
        if not isinstance(row_data, list):
            raise ParseError(f"row {row_index} of page '{page_id}' must be a list")
        rows.append(
            [
                _parse_cell(cell_data, Position(column_index, row_index), page_id)
                for column_index, cell_data in enumerate(row_data)
            ]
        )
    return Page(title=title, rows=rows)


def _parse_cell(cell_data: Any, position: Position, page_id: str) -> Cell:
    if isinstance(cell_data, str):
        return Cell(value=cell_data, column=position.column, row=position.row)
    if not isinstance(cell_data, dict):
        raise ParseError(f"cell {position} of page '{page_id}' must be an object")

    value = cell_data.get("value", "")
    if not isinstance(value, str):
        value = str(value)

    span_data = cell_data.get("span")
    span: tuple[int, int] | None = None
    if span_data is not None:
        if (
            not isinstance(span_data, list)
            or len(span_data) != 2
            or not all(isinstance(v, int) and not isinstance(v, bool) for v in span_data)
        ):
            raise ParseError(
                f"span of cell {position} in page '{page_id}' must be [width, height]"
            )
        span = (span_data[0], span_data[1])
        if span != COVERED_SPAN and min(span) < 1:
            raise ParseError(
                f"span of cell {position} in page '{page_id}' must be [0, 0] or positive"
            )

    cell_id = cell_data.get("id")
    is_header = cell_data.get("isHeader")
    return Cell(
        value=value,
        id=str(cell_id) if cell_id is not None else None,
        is_header=bool(is_header) if is_header is not None else None,
        span=span,
        column=position.column,
        row=position.row,
    )


def _cell_to_json(cell: Cell, position: Position, show_indices: bool) -> dict[str, Any]:
    result: dict[str, Any] = {}
    if show_indices:
        result["at"] = str(position)
    if cell.id is not None:
        result["id"] = cell.id
    result["value"] = cell.value
    if cell.is_header is not None:
        result["isHeader"] = cell.is_header
    if cell.span is not None:
        result["span"] = list(cell.span)
    return result
