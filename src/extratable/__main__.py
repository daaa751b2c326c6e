"""CLI entry point for extratable.

Usage:
    python -m extratable show <file> [--block N] [--html]
    python -m extratable set <file> <page> <col;row> <value>
    python -m extratable insert-row <file> <page> <after>
    python -m extratable remove-row <file> <page> <index>
    python -m extratable insert-column <file> <page> <after>
    python -m extratable remove-column <file> <page> <index>
    python -m extratable merge <file> <page> <col;row> <col;row> [...]
    python -m extratable split <file> <page> <col;row>
    python -m extratable indices <file> {on,off}
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from dataclasses import dataclass

from extratable.actions import ActionKind
from extratable.codec import JsonCodec
from extratable.config import Settings, get_settings
from extratable.exceptions import ParseError
from extratable.host import BlockHandle, MarkdownFileHost
from extratable.logging import setup_logging
from extratable.merge import merge_cells, split_cell
from extratable.models import Position, Store
from extratable.mutations import (
    insert_column,
    insert_row,
    remove_column,
    remove_row,
    set_cell_value,
)
from extratable.render import render_html, render_text
from extratable.session import EditOutcome, EditSessionController, Mutation


@dataclass
class LoadedBlock:
    """A block read from disk and parsed."""

    block: BlockHandle
    host: MarkdownFileHost
    codec: JsonCodec
    store: Store


def parse_position(text: str) -> Position:
    """argparse type for "<col>;<row>" arguments."""
    try:
        return Position.parse(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


async def load_block(args: argparse.Namespace, settings: Settings) -> LoadedBlock | None:
    """Read and parse the addressed block, printing errors to stderr."""
    host = MarkdownFileHost(language=settings.block_language)
    codec = JsonCodec()
    block = BlockHandle(args.file, args.block)

    text = await host.read_block(block)
    if text is None:
        print(
            f"Error: no '{settings.block_language}' block #{args.block} in {args.file}",
            file=sys.stderr,
        )
        return None

    try:
        store = await codec.parse(text)
    except ParseError as e:
        print(f"Error: {e}", file=sys.stderr)
        return None
    return LoadedBlock(block=block, host=host, codec=codec, store=store)


async def run_edit(
    args: argparse.Namespace, mutate: Mutation | None, action: ActionKind
) -> int:
    """Apply one edit to the addressed block through an edit session."""
    settings = get_settings()
    loaded = await load_block(args, settings)
    if loaded is None:
        return 1

    controller = EditSessionController(loaded.codec, loaded.host, settings)
    outcome = await controller.apply(loaded.block, loaded.store, mutate, action=action)

    if outcome is EditOutcome.APPLIED:
        print(f"Updated {loaded.block}")
        return 0
    if outcome is EditOutcome.UNCHANGED:
        print("No changes.")
        return 0
    if outcome is EditOutcome.SKIPPED:
        print("Nothing to edit at that position.", file=sys.stderr)
        return 1
    print("Error: edit failed, see log for details", file=sys.stderr)
    return 1


async def cmd_show(args: argparse.Namespace) -> int:
    """Print the visible cells of a block."""
    settings = get_settings()
    loaded = await load_block(args, settings)
    if loaded is None:
        return 1
    if args.html:
        print(render_html(loaded.store, settings))
    else:
        print(render_text(loaded.store, settings), end="")
    return 0


async def cmd_set(args: argparse.Namespace) -> int:
    """Set the value of one cell."""

    def mutate(store: Store) -> bool:
        return set_cell_value(store.require_page(args.page), args.position, args.value)

    return await run_edit(args, mutate, ActionKind.SET_VALUE)


async def cmd_insert_row(args: argparse.Namespace) -> int:
    """Insert an empty row after a row index (-1 for the top)."""

    def mutate(store: Store) -> bool:
        insert_row(store.require_page(args.page), args.index)
        return True

    return await run_edit(args, mutate, ActionKind.ADD_ROW_AFTER)


async def cmd_remove_row(args: argparse.Namespace) -> int:
    """Delete a row."""

    def mutate(store: Store) -> bool:
        remove_row(store.require_page(args.page), args.index)
        return True

    return await run_edit(args, mutate, ActionKind.REMOVE_ROW)


async def cmd_insert_column(args: argparse.Namespace) -> int:
    """Insert an empty column after a column index (-1 for the left edge)."""

    def mutate(store: Store) -> bool:
        insert_column(store.require_page(args.page), args.index)
        return True

    return await run_edit(args, mutate, ActionKind.ADD_COLUMN_AFTER)


async def cmd_remove_column(args: argparse.Namespace) -> int:
    """Delete a column."""

    def mutate(store: Store) -> bool:
        remove_column(store.require_page(args.page), args.index)
        return True

    return await run_edit(args, mutate, ActionKind.REMOVE_COLUMN)


async def cmd_merge(args: argparse.Namespace) -> int:
    """Merge the bounding rectangle of the given cells."""

    def mutate(store: Store) -> bool:
        return merge_cells(store.require_page(args.page), args.positions)

    return await run_edit(args, mutate, ActionKind.MERGE)


async def cmd_split(args: argparse.Namespace) -> int:
    """Split a merged cell back into independent cells."""

    def mutate(store: Store) -> bool:
        return split_cell(store.require_page(args.page), args.position)

    return await run_edit(args, mutate, ActionKind.SPLIT)


async def cmd_indices(args: argparse.Namespace) -> int:
    """Rewrite a block with or without cell indices."""
    settings = get_settings()
    settings.show_indices = args.state == "on"
    action = ActionKind.SHOW_INDICES if settings.show_indices else ActionKind.HIDE_INDICES
    return await run_edit(args, None, action)


def _add_block_args(parser: argparse.ArgumentParser, with_page: bool = True) -> None:
    parser.add_argument("file", help="Markdown file containing table blocks")
    if with_page:
        parser.add_argument("page", help="Page id within the block (e.g. @1)")
    parser.add_argument(
        "--block",
        type=int,
        default=0,
        help="Index of the table block within the file (default: 0)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="extratable",
        description="View and edit table blocks embedded in Markdown files",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # show subcommand
    show_parser = subparsers.add_parser("show", help="Print a table block")
    _add_block_args(show_parser, with_page=False)
    show_parser.add_argument(
        "--html",
        action="store_true",
        help="Render as HTML instead of plain text",
    )
    show_parser.set_defaults(func=cmd_show)

    # set subcommand
    set_parser = subparsers.add_parser("set", help="Set a cell value")
    _add_block_args(set_parser)
    set_parser.add_argument("position", type=parse_position, help="Cell as col;row")
    set_parser.add_argument("value", help="New cell value")
    set_parser.set_defaults(func=cmd_set)

    # row and column subcommands
    for name, func, help_text, index_help in (
        ("insert-row", cmd_insert_row, "Insert an empty row", "Row to insert after (-1 for top)"),
        ("remove-row", cmd_remove_row, "Delete a row", "Row to delete"),
        (
            "insert-column",
            cmd_insert_column,
            "Insert an empty column",
            "Column to insert after (-1 for left edge)",
        ),
        ("remove-column", cmd_remove_column, "Delete a column", "Column to delete"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        _add_block_args(sub)
        sub.add_argument("index", type=int, help=index_help)
        sub.set_defaults(func=func)

    # merge subcommand
    merge_parser = subparsers.add_parser("merge", help="Merge cells")
    _add_block_args(merge_parser)
    merge_parser.add_argument(
        "positions",
        type=parse_position,
        nargs="+",
        help="Cells as col;row (their bounding rectangle is merged)",
    )
    merge_parser.set_defaults(func=cmd_merge)

    # split subcommand
    split_parser = subparsers.add_parser("split", help="Split a merged cell")
    _add_block_args(split_parser)
    split_parser.add_argument("position", type=parse_position, help="Anchor cell as col;row")
    split_parser.set_defaults(func=cmd_split)

    # indices subcommand
    indices_parser = subparsers.add_parser("indices", help="Show or hide cell indices")
    _add_block_args(indices_parser, with_page=False)
    indices_parser.add_argument("state", choices=["on", "off"])
    indices_parser.set_defaults(func=cmd_indices)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    setup_logging(json_logs=settings.json_logs, log_level=settings.log_level)

    result: int = asyncio.run(args.func(args))
    return result


if __name__ == "__main__":
    sys.exit(main())
