"""Drag selection shared by all tables rendered in one document."""

from __future__ import annotations

from collections.abc import Hashable
from enum import Enum

from loguru import logger

from extratable.host import BlockHandle
from extratable.models import Position

# Identifies one rendered page: the block it lives in and its page id
PageKey = tuple[BlockHandle | None, str]


def page_key(block: BlockHandle | None, page_id: str) -> PageKey:
    return (block, page_id)


class SelectionState(Enum):
    IDLE = "idle"
    SELECTING = "selecting"


class SelectionTracker:
    """Single active range selection across every table of a document.

    One tracker is created per document session and handed to each rendered
    table. Only one page can hold a selection at a time: pressing inside a
    different page drops the previous selection first.

    Pages are identified by a hashable key. Several blocks of a document
    usually reuse the same page ids, so views pass a ``page_key`` that
    includes the block.
    """

    def __init__(self) -> None:
        self._state = SelectionState.IDLE
        self._active_page: Hashable | None = None
        self._positions: dict[Position, None] = {}

    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def active_page(self) -> Hashable | None:
        return self._active_page

    @property
    def positions(self) -> frozenset[Position]:
        return frozenset(self._positions)

    @property
    def is_range(self) -> bool:
        return len(self._positions) > 1

    def clear(self) -> None:
        self._state = SelectionState.IDLE
        self._active_page = None
        self._positions = {}

    def pointer_down(self, page: Hashable, position: Position) -> None:
        """Start a new selection seeded with one cell."""
        if self._positions and self._active_page != page:
            logger.debug("Dropping selection on {} for {}", self._active_page, page)
        self.clear()
        self._active_page = page
        self._positions[position] = None
        self._state = SelectionState.SELECTING

    def pointer_move(self, page: Hashable, position: Position) -> None:
        """Extend the selection while dragging on the active page."""
        if self._state is not SelectionState.SELECTING:
            return
        if page != self._active_page:
            return
        self._positions[position] = None

    def pointer_up(self) -> None:
        """Finish dragging. A single-cell selection does not survive."""
        self._state = SelectionState.IDLE
        if len(self._positions) < 2:
            self.clear()

    def is_visually_selected(self, page: Hashable, position: Position) -> bool:
        return (
            self.is_range
            and page == self._active_page
            and position in self._positions
        )
