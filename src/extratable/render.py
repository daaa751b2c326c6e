"""Rendering visible cells as HTML or plain text."""

from __future__ import annotations

from html import escape

from extratable.config import Settings
from extratable.host import BlockHandle
from extratable.models import Store
from extratable.normalizer import VisibleCell, iter_visible_rows
from extratable.selection import SelectionTracker, page_key


def show_page_title(store: Store, title: str | None, settings: Settings) -> bool:
    """Titles are shown when enabled, and always when there are several pages."""
    return bool(title) and (settings.show_titles or len(store.pages) > 1)


def render_html(
    store: Store,
    settings: Settings,
    selection: SelectionTracker | None = None,
    block: BlockHandle | None = None,
) -> str:
    """Render every page of a store as an HTML table.

    Each cell carries ``data-index="<col>;<row>"`` so pointer and menu
    events can be routed back to a TableView. Cells are marked selected when
    ``selection`` holds a range on the same page of ``block``.
    """
    parts: list[str] = ['<div class="extratable-container">']
    for page_id, page in store.pages.items():
        parts.append('<div class="extratable-page">')
        if show_page_title(store, page.title, settings):
            parts.append(f'<h4 class="extratable-page-title">{escape(page.title or "")}</h4>')
        parts.append(
            f'<table class="extratable-table" data-page="{escape(page_id)}"><tbody>'
        )
        for row in iter_visible_rows(page):
            parts.append("<tr>")
            for cell in row:
                selected = selection is not None and selection.is_visually_selected(
                    page_key(block, page_id), cell.position
                )
                parts.append(_render_cell(cell, settings.show_indices, selected))
            parts.append("</tr>")
        parts.append("</tbody></table>")
        parts.append("</div>")
    parts.append("</div>")
    return "".join(parts)


def _render_cell(cell: VisibleCell, show_indices: bool, selected: bool) -> str:
    tag = "th" if cell.is_header else "td"
    classes = "extratable-cell selected" if selected else "extratable-cell"
    attrs = [f'class="{classes}"', f'data-index="{cell.index_string}"']
    if cell.colspan > 1:
        attrs.append(f'colspan="{cell.colspan}"')
    if cell.rowspan > 1:
        attrs.append(f'rowspan="{cell.rowspan}"')

    content = ""
    if show_indices:
        content += f'<span class="extratable-cell-index">{cell.index_string}</span>'
    content += f'<span class="extratable-cell-value">{escape(cell.value)}</span>'
    return f"<{tag} {' '.join(attrs)}>{content}</{tag}>"


def render_text(store: Store, settings: Settings) -> str:
    """Plain-text listing of visible cells, one table row per line."""
    lines: list[str] = []
    for page_id, page in store.pages.items():
        header = f"== {page_id}"
        if show_page_title(store, page.title, settings):
            header += f": {page.title}"
        lines.append(header)
        for row in iter_visible_rows(page):
            lines.append(" | ".join(_cell_text(cell, settings.show_indices) for cell in row))
    return "\n".join(lines) + "\n"


def _cell_text(cell: VisibleCell, show_indices: bool) -> str:
    text = cell.value
    if cell.is_header:
        text = f"*{text}*"
    if show_indices:
        text = f"[{cell.index_string}] {text}"
    if cell.is_merged:
        text += f" ({cell.colspan}x{cell.rowspan})"
    return text
