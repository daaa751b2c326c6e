"""extratable - Span-aware editing of table blocks embedded in documents.

This library keeps an in-document table format editable: cell values,
row/column inserts and deletes, merge/split and range selection, with every
edit written back to the block's source text.
"""

__version__ = "0.1.0"

from extratable.actions import ActionKind
from extratable.codec import Codec, JsonCodec
from extratable.dispatch import TableView
from extratable.exceptions import (
    AddressingMiss,
    ExtraTableError,
    HostReplaceError,
    ParseError,
    SerializeError,
)
from extratable.host import BlockHandle, BlockRange, HostDocument, MarkdownFileHost
from extratable.merge import merge_cells, split_cell
from extratable.models import Cell, Page, Position, Store, cell_at, ensure_row_width
from extratable.mutations import (
    insert_column,
    insert_row,
    remove_column,
    remove_row,
    set_cell_value,
    tidy_page,
)
from extratable.normalizer import VisibleCell, iter_visible_rows, visible_cells
from extratable.selection import SelectionState, SelectionTracker, page_key
from extratable.session import EditOutcome, EditSessionController, Notifier

__all__ = [
    "ActionKind",
    "AddressingMiss",
    "BlockHandle",
    "BlockRange",
    "Cell",
    "Codec",
    "EditOutcome",
    "EditSessionController",
    "ExtraTableError",
    "HostDocument",
    "HostReplaceError",
    "JsonCodec",
    "MarkdownFileHost",
    "Notifier",
    "Page",
    "ParseError",
    "Position",
    "SelectionState",
    "SelectionTracker",
    "SerializeError",
    "Store",
    "TableView",
    "VisibleCell",
    "__version__",
    "cell_at",
    "ensure_row_width",
    "insert_column",
    "insert_row",
    "iter_visible_rows",
    "merge_cells",
    "page_key",
    "remove_column",
    "remove_row",
    "set_cell_value",
    "split_cell",
    "tidy_page",
    "visible_cells",
]
