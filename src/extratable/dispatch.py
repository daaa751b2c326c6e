"""Addressed callbacks for one rendered table block.

A renderer attaches pointer and menu listeners to the cells it draws. Rather
than capturing cell data in each listener, it calls back into a TableView
with the page id and the cell's storage position. The view resolves that
address against the visible cells of the current render and turns the
request into an edit session. An address that no longer resolves is ignored.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from functools import partial

from loguru import logger

from extratable.actions import ActionKind
from extratable.host import BlockHandle
from extratable.merge import merge_cells, split_cell
from extratable.models import Page, Position, Store
from extratable.mutations import (
    insert_column,
    insert_row,
    remove_column,
    remove_row,
    set_cell_value,
)
from extratable.normalizer import VisibleCell, iter_visible_rows
from extratable.selection import SelectionTracker, page_key
from extratable.session import EditOutcome, EditSessionController, Mutation

CellAddress = tuple[str, Position]


class TableView:
    """Callback table for the cells of one rendered block."""

    def __init__(
        self,
        block: BlockHandle,
        store: Store,
        controller: EditSessionController,
        tracker: SelectionTracker,
    ) -> None:
        self.block = block
        self.store = store
        self._controller = controller
        self._tracker = tracker
        self._settings = controller.settings
        self._cells: dict[CellAddress, VisibleCell] = {}
        for page_id, page in store.pages.items():
            for row in iter_visible_rows(page):
                for cell in row:
                    self._cells[(page_id, cell.position)] = cell

    def resolve(self, page_id: str, position: Position) -> VisibleCell | None:
        return self._cells.get((page_id, position))

    def addresses(self) -> Iterable[CellAddress]:
        return self._cells.keys()

    @property
    def indices_shown(self) -> bool:
        return self._settings.show_indices

    # ------------------------------------------------------------------
    # Pointer events
    # ------------------------------------------------------------------

    def on_pointer_down(self, page_id: str, position: Position) -> None:
        if self.resolve(page_id, position) is None:
            return
        self._tracker.pointer_down(page_key(self.block, page_id), position)

    def on_pointer_move(self, page_id: str, position: Position) -> None:
        if self.resolve(page_id, position) is None:
            return
        self._tracker.pointer_move(page_key(self.block, page_id), position)

    def on_pointer_up(self) -> None:
        self._tracker.pointer_up()

    # ------------------------------------------------------------------
    # Cell editing
    # ------------------------------------------------------------------

    def on_cell_double_activate(self, page_id: str, position: Position) -> str | None:
        """Value to seed an inline editor with, or None if editing is off."""
        if not self._settings.enable_editing:
            return None
        cell = self.resolve(page_id, position)
        return cell.value if cell is not None else None

    async def commit_value(
        self, page_id: str, position: Position, value: str
    ) -> EditOutcome:
        """Write an edited value back. Unchanged values never reach the host."""
        cell = self.resolve(page_id, position)
        if cell is None:
            return EditOutcome.SKIPPED
        if cell.value == value:
            return EditOutcome.UNCHANGED

        def mutate(store: Store) -> bool:
            return set_cell_value(store.require_page(page_id), position, value)

        return await self._run(mutate, ActionKind.SET_VALUE)

    # ------------------------------------------------------------------
    # Context menu
    # ------------------------------------------------------------------

    def context_actions(self, page_id: str, position: Position) -> list[ActionKind]:
        """Menu entries available on a cell, in display order."""
        cell = self.resolve(page_id, position)
        if cell is None or not self._settings.enable_editing:
            return []

        actions: list[ActionKind] = []
        if self._tracker.is_visually_selected(page_key(self.block, page_id), position):
            actions.append(ActionKind.MERGE)
        if cell.is_merged:
            actions.append(ActionKind.SPLIT)
        actions.append(ActionKind.ADD_ROW_AFTER)
        if position.row > 0:
            actions.append(ActionKind.ADD_ROW_BEFORE)
        actions.append(ActionKind.ADD_COLUMN_AFTER)
        if position.column > 0:
            actions.append(ActionKind.ADD_COLUMN_BEFORE)
        actions.extend([ActionKind.REMOVE_ROW, ActionKind.REMOVE_COLUMN])
        actions.append(
            ActionKind.HIDE_INDICES if self.indices_shown else ActionKind.SHOW_INDICES
        )
        return actions

    async def on_cell_context_action(
        self, page_id: str, position: Position, action: ActionKind
    ) -> EditOutcome:
        """Run a context menu action on the addressed cell."""
        if self.resolve(page_id, position) is None:
            logger.debug("Ignoring {} on stale cell {} of {}", action.value, position, page_id)
            return EditOutcome.SKIPPED

        if action in (ActionKind.SHOW_INDICES, ActionKind.HIDE_INDICES):
            return await self.set_indices_visibility(action is ActionKind.SHOW_INDICES)

        mutate = self._mutation_for(page_id, position, action)
        if mutate is None:
            return EditOutcome.SKIPPED
        outcome = await self._run(mutate, action)
        if action is ActionKind.MERGE and outcome is EditOutcome.APPLIED:
            self._tracker.clear()
        return outcome

    async def set_indices_visibility(self, visible: bool) -> EditOutcome:
        """Toggle index display and rewrite the block with the new setting."""
        previous = self._settings.show_indices
        self._settings.show_indices = visible
        action = ActionKind.SHOW_INDICES if visible else ActionKind.HIDE_INDICES
        outcome = await self._run(None, action)
        if outcome is not EditOutcome.APPLIED:
            self._settings.show_indices = previous
        return outcome

    def _mutation_for(
        self, page_id: str, position: Position, action: ActionKind
    ) -> Mutation | None:
        column, row = position.column, position.row
        edit: Callable[[Page], bool]

        if action is ActionKind.MERGE:
            if self._tracker.active_page != page_key(self.block, page_id):
                return None
            selected = self._tracker.positions
            edit = partial(merge_cells, positions=selected)
        elif action is ActionKind.SPLIT:
            edit = partial(split_cell, position=position)
        elif action is ActionKind.ADD_ROW_AFTER:
            edit = _always(partial(insert_row, after_index=row))
        elif action is ActionKind.ADD_ROW_BEFORE:
            edit = _always(partial(insert_row, after_index=row - 1))
        elif action is ActionKind.ADD_COLUMN_AFTER:
            edit = _always(partial(insert_column, after_index=column))
        elif action is ActionKind.ADD_COLUMN_BEFORE:
            edit = _always(partial(insert_column, after_index=column - 1))
        elif action is ActionKind.REMOVE_ROW:
            edit = _always(partial(remove_row, index=row))
        elif action is ActionKind.REMOVE_COLUMN:
            edit = _always(partial(remove_column, index=column))
        else:
            return None
        return _on_page(page_id, edit)

    async def _run(self, mutate: Mutation | None, action: ActionKind) -> EditOutcome:
        return await self._controller.apply(self.block, self.store, mutate, action=action)


def _on_page(page_id: str, edit: Callable[[Page], bool]) -> Mutation:
    def mutate(store: Store) -> bool:
        return edit(store.require_page(page_id))

    return mutate


def _always(edit: Callable[[Page], None]) -> Callable[[Page], bool]:
    def run(page: Page) -> bool:
        edit(page)
        return True

    return run
