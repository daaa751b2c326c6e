"""Host documents: where table blocks live and how their text is replaced.

Defines the HostDocument interface and implementations:
- MarkdownFileHost: Markdown files on disk with fenced table blocks
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from extratable.exceptions import HostReplaceError

DEFAULT_LANGUAGE = "extratable"

_FENCE_RE = re.compile(r"^ {0,3}(?P<fence>`{3,}|~{3,})\s*(?P<info>[^\s`]*)")


@dataclass(frozen=True)
class BlockHandle:
    """Addresses one table block: the index-th block of a file."""

    file_path: str
    index: int = 0

    def __str__(self) -> str:
        return f"{self.file_path}:{self.index}"


@dataclass(frozen=True)
class BlockRange:
    """Zero-based line numbers of a block's opening and closing fence."""

    start_line: int
    end_line: int

    @property
    def inner_start(self) -> int:
        return self.start_line + 1

    @property
    def inner_end(self) -> int:
        """Exclusive end of the inner lines (the closing fence line)."""
        return self.end_line


class HostDocument(ABC):
    """Abstract base class for documents that embed table blocks."""

    @abstractmethod
    async def get_block_range(self, block: BlockHandle) -> BlockRange | None:
        """Locate a block. Returns None when it no longer exists."""
        ...

    @abstractmethod
    async def read_block(self, block: BlockHandle) -> str | None:
        """Inner text of a block, without fence lines."""
        ...

    @abstractmethod
    async def replace_range(
        self, file_path: str, start_line: int, end_line: int, new_text: str
    ) -> None:
        """Replace lines ``[start_line, end_line)`` of a file with ``new_text``.

        Raises:
            HostReplaceError: If the range cannot be replaced
        """
        ...

    @abstractmethod
    async def get_scroll_position(self) -> int:
        ...

    @abstractmethod
    async def set_scroll_position(self, position: int) -> None:
        ...


class MarkdownFileHost(HostDocument):
    """Host backed by Markdown files with fenced blocks.

    A table block is a fenced code block whose info string is ``language``:

        ```extratable
        {"pages": {...}}
        ```

    Blocks are counted per file in document order. Unclosed fences are not
    addressable.
    """

    def __init__(self, language: str = DEFAULT_LANGUAGE) -> None:
        self.language = language
        self._scroll = 0

    async def get_block_range(self, block: BlockHandle) -> BlockRange | None:
        lines = self._read_lines(block.file_path)
        if lines is None:
            return None
        ranges = find_blocks(lines, self.language)
        if block.index < 0 or block.index >= len(ranges):
            logger.debug("Block {} not found ({} blocks)", block, len(ranges))
            return None
        return ranges[block.index]

    async def read_block(self, block: BlockHandle) -> str | None:
        block_range = await self.get_block_range(block)
        if block_range is None:
            return None
        lines = self._read_lines(block.file_path) or []
        return "".join(lines[block_range.inner_start : block_range.inner_end])

    async def replace_range(
        self, file_path: str, start_line: int, end_line: int, new_text: str
    ) -> None:
        path = Path(file_path)
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise HostReplaceError(file_path, str(e)) from e

        lines = content.splitlines(keepends=True)
        if not 0 <= start_line <= end_line <= len(lines):
            raise HostReplaceError(
                file_path, f"line range {start_line}-{end_line} out of bounds"
            )

        replacement = new_text
        if replacement and not replacement.endswith("\n"):
            replacement += "\n"
        updated = "".join(lines[:start_line]) + replacement + "".join(lines[end_line:])

        try:
            path.write_text(updated, encoding="utf-8")
        except OSError as e:
            raise HostReplaceError(file_path, str(e)) from e
        logger.debug("Replaced lines {}-{} of {}", start_line, end_line, file_path)

    async def get_scroll_position(self) -> int:
        return self._scroll

    async def set_scroll_position(self, position: int) -> None:
        self._scroll = position

    def _read_lines(self, file_path: str) -> list[str] | None:
        try:
            return Path(file_path).read_text(encoding="utf-8").splitlines(keepends=True)
        except OSError as e:
            logger.warning("Cannot read {}: {}", file_path, e)
            return None


def find_blocks(lines: list[str], language: str) -> list[BlockRange]:
    """Find closed fenced blocks tagged with ``language``.

    Fences of other languages are skipped as a whole, so a table example
    quoted inside another fence is not counted.
    """
    blocks: list[BlockRange] = []
    i = 0
    while i < len(lines):
        match = _FENCE_RE.match(lines[i])
        if not match:
            i += 1
            continue

        fence = match.group("fence")
        info = match.group("info")
        close_at = _find_closing_fence(lines, i + 1, fence)
        if close_at is None:
            break
        if info == language:
            blocks.append(BlockRange(start_line=i, end_line=close_at))
        i = close_at + 1
    return blocks


def _find_closing_fence(lines: list[str], start: int, fence: str) -> int | None:
    char = fence[0]
    for j in range(start, len(lines)):
        stripped = lines[j].strip()
        if (
            len(stripped) >= len(fence)
            and set(stripped) == {char}
            and len(lines[j]) - len(lines[j].lstrip(" ")) <= 3
        ):
            return j
    return None
