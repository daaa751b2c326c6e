"""Builders for pages, stores and documents used across tests."""

from __future__ import annotations

import json
from typing import Any

from extratable.models import Cell, Page, Store

DOC_PATH = "notes.md"


def make_page(values: list[list[str]], title: str | None = None) -> Page:
    """Build a page of plain cells from a grid of values."""
    rows = [
        [Cell(value=value, column=c, row=r) for c, value in enumerate(row)]
        for r, row in enumerate(values)
    ]
    return Page(title=title, rows=rows)


def make_store(**pages: Page) -> Store:
    """Build a store; keyword names become page ids prefixed with '@'."""
    return Store(pages={f"@{name}": page for name, page in pages.items()})


def grid_values(page: Page) -> list[list[str]]:
    return [[cell.value for cell in row] for row in page.rows]


def row_lengths(page: Page) -> set[int]:
    return {len(row) for row in page.rows}


def block_document(data: dict[str, Any]) -> str:
    """A Markdown document with one table block between two paragraphs."""
    return (
        "# Notes\n"
        "\n"
        "```extratable\n"
        f"{json.dumps(data, indent=2)}\n"
        "```\n"
        "\n"
        "Trailing text.\n"
    )


SAMPLE_DATA: dict[str, Any] = {
    "pages": {
        "@1": {
            "title": "Budget",
            "rows": [
                [
                    {"value": "Item", "isHeader": True},
                    {"value": "Q1", "isHeader": True},
                    {"value": "Q2", "isHeader": True},
                ],
                ["Rent", "100", "100"],
                ["Food", "50", "60"],
            ],
        }
    }
}
