"""Editing sessions with delayed auto-save.

An EditSession wraps the character being edited. Every change marks the
session unsaved and restarts a timer; when the timer runs out and unsaved
changes remain, the character is saved. A manual save in the meantime
clears the unsaved flag, so the timer finds nothing to do and never
writes stale data over it.

Once an auto-save has started writing it is no longer cancelled. Saves
are serialized, so a manual save issued during that write waits for it
and then writes the current character last.
"""

from __future__ import annotations

import asyncio
import contextlib
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from dnd35_manager.core.config import get_settings
from dnd35_manager.core.exceptions import Dnd35Error, ValidationError
from dnd35_manager.core.logging import character_context, get_logger
from dnd35_manager.models.character import Character
from dnd35_manager.storage.service import CharacterStorage


logger = get_logger(__name__)


class EditSession:
    """Tracks unsaved edits to one character and auto-saves them.

    Auto-save timers are scheduled on the running event loop. Outside an
    event loop edits are still tracked, but only a manual save persists
    them.

    Example:
        >>> session = EditSession(storage, character, auto_save_delay=30)
        >>> session.update(name="Mialee", level=2)
        >>> await session.save()
    """

    def __init__(
        self,
        storage: CharacterStorage,
        character: Character,
        *,
        auto_save_delay: float | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            storage: Storage the character is saved to.
            character: Character being edited.
            auto_save_delay: Seconds of inactivity before auto-saving.
                Defaults to the configured delay.
        """
        if auto_save_delay is None:
            auto_save_delay = get_settings().game.auto_save_delay_seconds
        self._storage = storage
        self._character = character
        self._delay = auto_save_delay
        self._dirty = False
        self._revision = 0
        self._timer: asyncio.Task[None] | None = None
        # Auto-saves past their delay, which must run to completion.
        self._writes: set[asyncio.Task[None]] = set()
        self._lock = asyncio.Lock()

    @property
    def character(self) -> Character:
        return self._character

    @property
    def has_unsaved_changes(self) -> bool:
        return self._dirty

    @property
    def auto_save_pending(self) -> bool:
        timer_running = self._timer is not None and not self._timer.done()
        return timer_running or bool(self._writes)

    # -------------------------------------------------------------------------
    # Editing
    # -------------------------------------------------------------------------

    def update(self, **changes: Any) -> Character:
        """Apply field changes to the character.

        All changes are validated before any is applied.

        Args:
            **changes: Character fields and their new values.

        Returns:
            The edited character.

        Raises:
            ValidationError: If a field is unknown or a value is invalid.
        """
        for field_name in changes:
            if field_name not in Character.model_fields:
                raise ValidationError("Unknown character field", field_name=field_name)

        candidate = self._character.model_copy(deep=True)
        try:
            for field_name, value in changes.items():
                setattr(candidate, field_name, value)
        except PydanticValidationError as exc:
            raise ValidationError(
                "Invalid character value",
                details={"errors": exc.error_count()},
            ) from exc

        for field_name in changes:
            setattr(self._character, field_name, getattr(candidate, field_name))

        self.mark_dirty()
        return self._character

    def mark_dirty(self) -> None:
        """Record an edit made directly on the character and restart the timer."""
        self._dirty = True
        self._revision += 1
        self._schedule_auto_save()

    # -------------------------------------------------------------------------
    # Saving
    # -------------------------------------------------------------------------

    async def save(self) -> Character:
        """Save the character now and cancel any pending auto-save.

        An auto-save already writing is allowed to finish first, so this
        save always lands last.

        Raises:
            ValidationError: If the character cannot be saved as is.
            StorageError: If the write fails. Unsaved changes stay flagged.
        """
        self._cancel_timer()
        await self._save()
        return self._character

    async def close(self) -> None:
        """Stop the pending auto-save and wait for any write in progress."""
        timer = self._timer
        self._cancel_timer()
        if timer is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await timer
        if self._writes:
            await asyncio.gather(*self._writes)

    async def _save(self) -> None:
        async with self._lock:
            revision = self._revision
            await self._storage.save(self._character)
            # Edits made while the write was in flight stay unsaved.
            if self._revision == revision:
                self._dirty = False

    def _schedule_auto_save(self) -> None:
        self._cancel_timer()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop, auto-save not scheduled")
            return
        self._timer = loop.create_task(self._auto_save_after(self._delay))

    def _cancel_timer(self) -> None:
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None

    async def _auto_save_after(self, delay: float) -> None:
        await asyncio.sleep(delay)
        if not self._dirty:
            return

        # Detach from the timer so a later edit or manual save cannot
        # cancel this task halfway through a write.
        task = asyncio.current_task()
        if task is None:
            return
        if self._timer is task:
            self._timer = None
        self._writes.add(task)
        try:
            with character_context(self._character.id):
                try:
                    await self._save()
                except Dnd35Error as exc:
                    logger.warning("Auto-save failed", error=exc.message)
                    return
                except Exception:
                    logger.exception("Auto-save crashed")
                    return
                logger.info("Character auto-saved")
        finally:
            self._writes.discard(task)


__all__ = [
    "EditSession",
]
