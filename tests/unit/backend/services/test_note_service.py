"""
Unit Tests for Note Service.

Tests the NoteService business logic with mocked repositories.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from nowen_note.backend.core.exceptions import (
    NotFoundError,
    ValidationError,
    VersionConflictError,
)
from nowen_note.backend.models.note import DEFAULT_NOTE_TITLE, EMPTY_DOCUMENT
from nowen_note.backend.schemas.note import NoteCreate, NoteUpdate
from nowen_note.backend.services.note import NoteService, normalize_title


@pytest.fixture
def service(mock_db_session):
    """NoteService with every repository call mocked."""
    service = NoteService(mock_db_session)
    service.repo = MagicMock()
    service.notebooks = MagicMock()
    service.search = MagicMock()
    for repo in (service.repo, service.notebooks, service.search):
        for name in (
            "create",
            "owned_exists",
            "compare_and_swap",
            "current_version",
            "reload",
            "delete_owned",
            "trashed_ids",
            "delete_many",
            "list_for_user",
            "matching_note_ids",
            "replace",
            "remove",
            "remove_many",
        ):
            setattr(repo, name, AsyncMock())
    return service


def stored_note(**overrides):
    note = MagicMock()
    note.id = "note-1"
    note.title = "Q1 目标与 OKR"
    note.content_text = "2026 年 Q1 核心目标"
    note.version = 2
    for key, value in overrides.items():
        setattr(note, key, value)
    return note


class TestNormalizeTitle:
    """Blank titles fall back to the placeholder."""

    @pytest.mark.parametrize("title", [None, "", "   "])
    def test_blank(self, title):
        assert normalize_title(title) == DEFAULT_NOTE_TITLE

    def test_trimmed(self):
        assert normalize_title("  Plan  ") == "Plan"


class TestNoteServiceCreate:
    """Tests for note creation."""

    async def test_create_indexes_the_note(self, service):
        service.notebooks.owned_exists.return_value = True
        note = stored_note(version=1)
        service.repo.create.return_value = note

        result = await service.create_note("user-1", NoteCreate(notebook_id="nb-1"))

        assert result is note
        service.repo.create.assert_awaited_once_with(
            user_id="user-1",
            notebook_id="nb-1",
            title=DEFAULT_NOTE_TITLE,
            content=EMPTY_DOCUMENT,
            content_text="",
        )
        service.search.replace.assert_awaited_once_with(note.id, note.title, note.content_text)

    async def test_create_in_foreign_notebook_is_not_found(self, service):
        service.notebooks.owned_exists.return_value = False

        with pytest.raises(NotFoundError):
            await service.create_note("user-1", NoteCreate(notebook_id="nb-other"))

        service.repo.create.assert_not_awaited()


class TestNoteServiceUpdate:
    """Tests for versioned updates."""

    async def test_accepted_update_reindexes_changed_text(self, service):
        service.repo.compare_and_swap.return_value = True
        note = stored_note(version=2)
        service.repo.reload.return_value = note

        data = NoteUpdate(version=1, title="Q1 目标与 OKR（修订）")
        result = await service.update_note("user-1", "note-1", data)

        assert result is note
        service.repo.compare_and_swap.assert_awaited_once_with(
            "user-1", "note-1", 1, {"title": "Q1 目标与 OKR（修订）"}
        )
        service.search.replace.assert_awaited_once()

    async def test_flag_only_update_skips_reindex(self, service):
        service.repo.compare_and_swap.return_value = True
        service.repo.reload.return_value = stored_note()

        await service.update_note("user-1", "note-1", NoteUpdate(version=1, is_favorite=True))

        service.search.replace.assert_not_awaited()

    async def test_stale_version_raises_conflict_with_current(self, service):
        service.repo.compare_and_swap.return_value = False
        service.repo.current_version.return_value = 2

        with pytest.raises(VersionConflictError) as exc_info:
            await service.update_note("user-1", "note-1", NoteUpdate(version=1, title="late"))

        assert exc_info.value.current_version == 2
        assert exc_info.value.details["current_version"] == 2
        service.search.replace.assert_not_awaited()

    async def test_missing_note_raises_not_found(self, service):
        service.repo.compare_and_swap.return_value = False
        service.repo.current_version.return_value = None

        with pytest.raises(NotFoundError):
            await service.update_note("user-1", "gone", NoteUpdate(version=1))

    async def test_content_without_text_is_rejected(self, service):
        with pytest.raises(ValidationError):
            await service.update_note(
                "user-1", "note-1", NoteUpdate(version=1, content='{"type":"doc"}')
            )

        service.repo.compare_and_swap.assert_not_awaited()

    async def test_trashing_sets_trashed_at(self, service):
        service.repo.compare_and_swap.return_value = True
        service.repo.reload.return_value = stored_note()

        await service.trash_note("user-1", "note-1", version=3)

        changes = service.repo.compare_and_swap.await_args.args[3]
        assert changes["is_trashed"] is True
        assert changes["trashed_at"] is not None

    async def test_restoring_clears_trashed_at(self, service):
        service.repo.compare_and_swap.return_value = True
        service.repo.reload.return_value = stored_note()

        await service.restore_note("user-1", "note-1", version=4)

        changes = service.repo.compare_and_swap.await_args.args[3]
        assert changes == {"is_trashed": False, "trashed_at": None}


class TestNoteServiceList:
    """Filter precedence for list_notes."""

    async def test_search_wins_over_other_filters(self, service):
        service.search.matching_note_ids.return_value = ["note-1"]
        service.repo.list_for_user.return_value = ([], 0)

        await service.list_notes("user-1", search="tiptap", is_trashed=True, notebook_id="nb-1")

        service.repo.list_for_user.assert_awaited_once_with(
            "user-1", note_ids=["note-1"], limit=100, offset=0
        )

    async def test_trash_wins_over_notebook(self, service):
        service.repo.list_for_user.return_value = ([], 0)

        await service.list_notes("user-1", is_trashed=True, notebook_id="nb-1")

        service.repo.list_for_user.assert_awaited_once_with(
            "user-1", is_trashed=True, limit=100, offset=0
        )

    async def test_blank_search_is_ignored(self, service):
        service.repo.list_for_user.return_value = ([], 0)

        await service.list_notes("user-1", search="  ", tag_id="tag-1")

        service.search.matching_note_ids.assert_not_awaited()
        service.repo.list_for_user.assert_awaited_once_with(
            "user-1", tag_id="tag-1", limit=100, offset=0
        )


class TestNoteServiceDelete:
    """Tests for permanent deletion."""

    async def test_delete_removes_index_entry(self, service):
        service.repo.owned_exists.return_value = True
        service.repo.delete_owned.return_value = True

        await service.delete_note("user-1", "note-1")

        service.search.remove.assert_awaited_once_with("note-1")
        service.repo.delete_owned.assert_awaited_once_with("user-1", "note-1")

    async def test_delete_foreign_note_touches_nothing(self, service):
        service.repo.owned_exists.return_value = False

        with pytest.raises(NotFoundError):
            await service.delete_note("user-1", "note-1")

        service.search.remove.assert_not_awaited()
        service.repo.delete_owned.assert_not_awaited()

    async def test_empty_trash_purges_index_first(self, service):
        service.repo.trashed_ids.return_value = ["a", "b"]
        service.repo.delete_many.return_value = 2

        assert await service.empty_trash("user-1") == 2
        service.search.remove_many.assert_awaited_once_with(["a", "b"])
