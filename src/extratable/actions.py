"""User-facing edit actions and their notification messages."""

from __future__ import annotations

from enum import Enum


class ActionKind(Enum):
    """Edits a user can trigger on a rendered table."""

    SET_VALUE = "set_value"
    MERGE = "merge"
    SPLIT = "split"
    ADD_ROW_AFTER = "add_row_after"
    ADD_ROW_BEFORE = "add_row_before"
    ADD_COLUMN_AFTER = "add_column_after"
    ADD_COLUMN_BEFORE = "add_column_before"
    REMOVE_ROW = "remove_row"
    REMOVE_COLUMN = "remove_column"
    SHOW_INDICES = "show_indices"
    HIDE_INDICES = "hide_indices"


MENU_TITLES: dict[ActionKind, str] = {
    ActionKind.SET_VALUE: "Edit cell",
    ActionKind.MERGE: "Merge cells",
    ActionKind.SPLIT: "Split cell",
    ActionKind.ADD_ROW_AFTER: "Add row below",
    ActionKind.ADD_ROW_BEFORE: "Add row above",
    ActionKind.ADD_COLUMN_AFTER: "Add column right",
    ActionKind.ADD_COLUMN_BEFORE: "Add column left",
    ActionKind.REMOVE_ROW: "Delete row",
    ActionKind.REMOVE_COLUMN: "Delete column",
    ActionKind.SHOW_INDICES: "Show indices",
    ActionKind.HIDE_INDICES: "Hide indices",
}

_FAILURE_MESSAGES: dict[ActionKind, str] = {
    ActionKind.SET_VALUE: "Failed to update the table",
    ActionKind.MERGE: "Failed to merge cells",
    ActionKind.SPLIT: "Failed to split the cell",
    ActionKind.ADD_ROW_AFTER: "Failed to add a row",
    ActionKind.ADD_ROW_BEFORE: "Failed to add a row",
    ActionKind.ADD_COLUMN_AFTER: "Failed to add a column",
    ActionKind.ADD_COLUMN_BEFORE: "Failed to add a column",
    ActionKind.REMOVE_ROW: "Failed to delete the row",
    ActionKind.REMOVE_COLUMN: "Failed to delete the column",
    ActionKind.SHOW_INDICES: "Failed to show indices",
    ActionKind.HIDE_INDICES: "Failed to hide indices",
}


def failure_message(action: ActionKind) -> str:
    return _FAILURE_MESSAGES[action]


def success_message(action: ActionKind) -> str:
    return f"{MENU_TITLES[action]}: done"
