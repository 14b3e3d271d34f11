"""Integration tests for editing sessions and auto-save."""

from __future__ import annotations

import asyncio
import time

import pytest

from dnd35_manager.core.exceptions import StorageError, ValidationError
from dnd35_manager.models.character import Character, CharacterProfile, Spell
from dnd35_manager.storage.database import CharacterRecord
from dnd35_manager.storage.service import CharacterStorage
from dnd35_manager.storage.session import EditSession


DELAY = 0.05


class TestEditSession:
    """Tests for edits, manual saves and the auto-save timer."""

    @pytest.mark.asyncio
    async def test_update_marks_unsaved(
        self,
        storage: CharacterStorage,
        sample_character: Character,
    ) -> None:
        session = EditSession(storage, sample_character, auto_save_delay=60)

        session.update(name="Tordek Ironfist", level=4)

        assert session.has_unsaved_changes
        assert session.auto_save_pending
        assert sample_character.name == "Tordek Ironfist"
        assert sample_character.level == 4
        await session.close()
        assert not session.auto_save_pending

    @pytest.mark.asyncio
    async def test_invalid_update_applies_nothing(
        self,
        storage: CharacterStorage,
        sample_character: Character,
    ) -> None:
        session = EditSession(storage, sample_character, auto_save_delay=60)

        with pytest.raises(ValidationError):
            session.update(name="Changed", level=0)
        with pytest.raises(ValidationError):
            session.update(favourite_colour="blue")

        assert sample_character.name == "Tordek"
        assert sample_character.level == 3
        assert not session.has_unsaved_changes

    @pytest.mark.asyncio
    async def test_auto_save_fires(
        self,
        storage: CharacterStorage,
        sample_character: Character,
    ) -> None:
        session = EditSession(storage, sample_character, auto_save_delay=DELAY)

        session.update(notes="Owes the innkeeper 5 gp")
        await asyncio.sleep(DELAY * 4)

        assert not session.has_unsaved_changes
        loaded = await storage.load(sample_character.id)
        assert loaded is not None
        assert loaded.notes == "Owes the innkeeper 5 gp"

    @pytest.mark.asyncio
    async def test_timer_restarts_on_each_edit(
        self,
        storage: CharacterStorage,
        sample_character: Character,
    ) -> None:
        session = EditSession(storage, sample_character, auto_save_delay=DELAY * 4)

        session.update(notes="one")
        await asyncio.sleep(DELAY * 2)
        session.update(notes="two")
        await asyncio.sleep(DELAY * 2)

        assert await storage.load(sample_character.id) is None
        await asyncio.sleep(DELAY * 4)
        loaded = await storage.load(sample_character.id)
        assert loaded is not None
        assert loaded.notes == "two"

    @pytest.mark.asyncio
    async def test_manual_save_supersedes_auto_save(
        self,
        storage: CharacterStorage,
        sample_character: Character,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        session = EditSession(storage, sample_character, auto_save_delay=DELAY)
        session.update(notes="saved by hand")

        await session.save()
        saves: list[str] = []
        original_save = storage.save

        async def counting_save(character: Character) -> Character:
            saves.append(character.id)
            return await original_save(character)

        monkeypatch.setattr(storage, "save", counting_save)
        await asyncio.sleep(DELAY * 4)

        assert not session.has_unsaved_changes
        assert not session.auto_save_pending
        assert saves == []

    @pytest.mark.asyncio
    async def test_direct_edits_tracked(
        self,
        storage: CharacterStorage,
        sample_character: Character,
    ) -> None:
        session = EditSession(storage, sample_character, auto_save_delay=DELAY)

        session.character.add_spell(Spell(name="Light"))
        session.mark_dirty()
        await asyncio.sleep(DELAY * 4)

        loaded = await storage.load(sample_character.id)
        assert loaded is not None
        assert [spell.name for spell in loaded.spells] == ["Light"]

    @pytest.mark.asyncio
    async def test_auto_save_failure_keeps_changes(
        self,
        storage: CharacterStorage,
        sample_character: Character,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        async def failing_save(character: Character) -> Character:
            raise StorageError("Disk full", operation="save", character_id=character.id)

        monkeypatch.setattr(storage, "save", failing_save)
        session = EditSession(storage, sample_character, auto_save_delay=DELAY)

        session.update(notes="lost?")
        await asyncio.sleep(DELAY * 4)

        assert session.has_unsaved_changes

    @pytest.mark.asyncio
    async def test_manual_save_failure(
        self,
        storage: CharacterStorage,
        sample_character: Character,
    ) -> None:
        session = EditSession(storage, sample_character, auto_save_delay=60)
        session.update(name="  ")

        with pytest.raises(ValidationError):
            await session.save()

        assert session.has_unsaved_changes

    def test_update_without_event_loop(
        self,
        storage: CharacterStorage,
        sample_character: Character,
    ) -> None:
        session = EditSession(storage, sample_character, auto_save_delay=DELAY)

        session.update(deity="Moradin")

        assert session.has_unsaved_changes
        assert not session.auto_save_pending

    @pytest.mark.asyncio
    async def test_manual_save_during_auto_save_write_lands_last(
        self,
        storage: CharacterStorage,
        sample_character: Character,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """A save issued mid auto-save waits for that write instead of racing it."""
        written: list[str] = []
        original_write = storage.database.save_character

        def slow_first_write(record: CharacterRecord, profile: CharacterProfile) -> None:
            if not written:
                time.sleep(DELAY * 6)
            original_write(record, profile)
            written.append(record.name)

        monkeypatch.setattr(storage.database, "save_character", slow_first_write)
        session = EditSession(storage, sample_character, auto_save_delay=DELAY)

        session.update(name="Stale")
        await asyncio.sleep(DELAY * 2)
        assert session.auto_save_pending

        session.update(name="Fresh")
        await session.save()
        await session.close()

        assert written[:2] == ["Stale", "Fresh"]
        assert not session.has_unsaved_changes
        assert not session.auto_save_pending
        loaded = await storage.load(sample_character.id)
        assert loaded is not None
        assert loaded.name == "Fresh"

    @pytest.mark.asyncio
    async def test_unexpected_auto_save_error_keeps_changes(
        self,
        storage: CharacterStorage,
        sample_character: Character,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        async def broken_save(character: Character) -> Character:
            raise RuntimeError("serializer exploded")

        monkeypatch.setattr(storage, "save", broken_save)
        session = EditSession(storage, sample_character, auto_save_delay=DELAY)

        session.update(notes="still here")
        await asyncio.sleep(DELAY * 4)

        assert session.has_unsaved_changes
        assert not session.auto_save_pending
        await session.close()
        assert sample_character.notes == "still here"
