"""Edit sessions: mutate, serialize, replace the host text.

Every user edit runs as one session:

    copy store -> mutate copy -> serialize -> replace block text
    -> restore scroll -> notify

Only one session runs at a time. A request that arrives while another
session is in flight is dropped, not queued, because the pending replace
invalidates the line range the new request was computed against. The
guard is released once the replace and the scroll restore have finished,
whether the session succeeded or failed.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Callable
from enum import Enum

from loguru import logger

from extratable.actions import ActionKind, failure_message, success_message
from extratable.codec import Codec
from extratable.config import Settings, get_settings
from extratable.exceptions import AddressingMiss, HostReplaceError, SerializeError
from extratable.host import BlockHandle, HostDocument
from extratable.logging import clear_block_context, set_block_context
from extratable.models import Store
from extratable.mutations import tidy_page

# Applies an edit to a store copy; returns whether anything changed
Mutation = Callable[[Store], bool]


class EditOutcome(Enum):
    """How an edit request ended."""

    APPLIED = "applied"
    UNCHANGED = "unchanged"  # mutation was a no-op, host untouched
    SKIPPED = "skipped"  # stale address or editing disabled
    DROPPED = "dropped"  # another session was in flight
    FAILED = "failed"  # user was notified


class Notifier(ABC):
    """Surfaces session results to the user."""

    @abstractmethod
    def info(self, message: str) -> None: ...

    @abstractmethod
    def error(self, message: str) -> None: ...


class LogNotifier(Notifier):
    """Notifier that writes to the log."""

    def info(self, message: str) -> None:
        logger.info(message)

    def error(self, message: str) -> None:
        logger.error(message)


class EditSessionController:
    """Runs edit sessions against one host document."""

    def __init__(
        self,
        codec: Codec,
        host: HostDocument,
        settings: Settings | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        self._codec = codec
        self._host = host
        self._settings = settings or get_settings()
        self._notifier = notifier or LogNotifier()
        self._in_flight = False
        self.last_text: str | None = None
        self.last_store: Store | None = None

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    @property
    def settings(self) -> Settings:
        return self._settings

    async def apply(
        self,
        block: BlockHandle,
        store: Store,
        mutate: Mutation | None,
        *,
        action: ActionKind = ActionKind.SET_VALUE,
    ) -> EditOutcome:
        """Run one edit session.

        The caller's store is never modified: the mutation runs on a copy.
        ``mutate=None`` re-serializes the store as is, e.g. after the
        indices setting changed. Never raises.

        Args:
            block: Block whose text is replaced
            store: Store parsed from the block's current text
            mutate: Edit to apply
            action: Which user action this is, for notifications

        Returns:
            EditOutcome describing how the request ended
        """
        if self._in_flight:
            logger.debug("Dropping {}: another edit is in flight", action.value)
            return EditOutcome.DROPPED
        if not self._settings.enable_editing:
            logger.debug("Skipping {}: editing is disabled", action.value)
            return EditOutcome.SKIPPED

        self._in_flight = True
        set_block_context(str(block))
        try:
            return await self._run(block, store, mutate, action)
        except Exception:
            logger.exception("Unexpected error during {}", action.value)
            self._notifier.error(failure_message(action))
            return EditOutcome.FAILED
        finally:
            self._in_flight = False
            clear_block_context()

    async def _run(
        self,
        block: BlockHandle,
        store: Store,
        mutate: Mutation | None,
        action: ActionKind,
    ) -> EditOutcome:
        working = store.copy()
        if mutate is not None:
            try:
                changed = mutate(working)
            except AddressingMiss as e:
                logger.debug("Skipping {}: {}", action.value, e)
                return EditOutcome.SKIPPED
            if not changed:
                return EditOutcome.UNCHANGED
        for page in working.pages.values():
            tidy_page(page)

        try:
            text = await self._codec.serialize(
                working, show_indices=self._settings.show_indices
            )
        except SerializeError as e:
            logger.error("Cannot serialize after {}: {}", action.value, e)
            self._notifier.error(failure_message(action))
            return EditOutcome.FAILED

        block_range = await self._host.get_block_range(block)
        if block_range is None:
            logger.warning("Block {} not found for {}", block, action.value)
            self._notifier.error(failure_message(action))
            return EditOutcome.FAILED

        scroll = await self._host.get_scroll_position()
        try:
            await self._host.replace_range(
                block.file_path, block_range.inner_start, block_range.inner_end, text
            )
        except HostReplaceError as e:
            logger.error("Host replace failed for {}: {}", action.value, e)
            self._notifier.error(failure_message(action))
            return EditOutcome.FAILED

        # The host re-renders after the replace; restore scroll on the next tick
        await asyncio.sleep(0)
        try:
            await self._host.set_scroll_position(scroll)
        except Exception as e:
            # The block text is already replaced at this point
            logger.warning("Cannot restore scroll position after {}: {}", action.value, e)

        self.last_text = text
        self.last_store = working
        logger.info("Applied {} to {}", action.value, block)
        self._notifier.info(success_message(action))
        return EditOutcome.APPLIED
