"""
Unit tests for OrderedMembershipManager.

Runs the manager against in-memory repositories; storage-level atomicity is
covered by the integration tests.
"""

from collections.abc import Sequence
from uuid import UUID, uuid4

import pytest

from setlist_share.components.membership import (
    MembershipLimits,
    OrderedItemInput,
    OrderedMembershipManager,
    build_entries,
    validate_ordered_items,
)
from setlist_share.domain.entities import SetlistSong, Song
from setlist_share.domain.errors import ValidationError


class MockEntryRepo:
    """Mock membership repository."""

    def __init__(self):
        self.rows: dict[UUID, list[SetlistSong]] = {}
        self.calls: list[str] = []

    def list_by_setlist(self, setlist_id: UUID) -> list[SetlistSong]:
        return sorted(self.rows.get(setlist_id, []), key=lambda e: e.position)

    def delete_by_setlist(self, setlist_id: UUID) -> int:
        self.calls.append("delete")
        return len(self.rows.pop(setlist_id, []))

    def insert_many(self, entries: Sequence[SetlistSong]) -> None:
        self.calls.append("insert")
        for e in entries:
            self.rows.setdefault(e.setlist_id, []).append(e)


class MockCatalog:
    """Mock song catalog."""

    def __init__(self, songs: list[Song]):
        self.songs = {s.id: s for s in songs}

    def get_many(self, song_ids: Sequence[UUID]) -> dict[UUID, Song]:
        return {i: self.songs[i] for i in song_ids if i in self.songs}


def _items(*song_ids: UUID, notes: str = "") -> list[OrderedItemInput]:
    return [OrderedItemInput(song_id=s, notes=notes) for s in song_ids]


@pytest.fixture
def songs():
    return [Song(title=f"Song {i}", artist="The Band", duration_seconds=60 * i) for i in range(1, 5)]


@pytest.fixture
def entries():
    return MockEntryRepo()


@pytest.fixture
def manager(entries, songs):
    return OrderedMembershipManager(entries=entries, catalog=MockCatalog(songs))


# --- Validation ---


class TestValidateOrderedItems:
    def test_valid_list_has_no_errors(self, songs):
        ids = [s.id for s in songs]
        assert validate_ordered_items(_items(*ids), set(ids), MembershipLimits()) == []

    def test_empty_list_is_valid(self):
        assert validate_ordered_items([], set(), MembershipLimits()) == []

    def test_duplicate_song_reported_at_second_index(self, songs):
        a, b = songs[0].id, songs[1].id
        errors = validate_ordered_items(_items(a, b, a), {a, b}, MembershipLimits())
        assert [(e.code, e.field) for e in errors] == [("duplicate_song", "songs[2]")]

    def test_unknown_song(self, songs):
        unknown = uuid4()
        errors = validate_ordered_items(_items(unknown), {songs[0].id}, MembershipLimits())
        assert errors[0].code == "song_not_found"
        assert errors[0].field == "songs[0]"

    def test_too_many_songs(self, songs):
        ids = [s.id for s in songs]
        errors = validate_ordered_items(_items(*ids), set(ids), MembershipLimits(max_songs=3))
        assert [e.code for e in errors] == ["too_many_songs"]

    def test_notes_too_long(self, songs):
        a = songs[0].id
        errors = validate_ordered_items(
            _items(a, notes="x" * 11), {a}, MembershipLimits(notes_max_length=10)
        )
        assert errors[0].code == "notes_too_long"
        assert errors[0].field == "songs[0].notes"


def test_build_entries_uses_list_index():
    setlist_id = uuid4()
    a, b, c = uuid4(), uuid4(), uuid4()
    built = build_entries(setlist_id, _items(c, a, b))
    assert [(e.song_id, e.position) for e in built] == [(c, 0), (a, 1), (b, 2)]
    assert all(e.setlist_id == setlist_id for e in built)


# --- Replace All ---


class TestReplaceAll:
    def test_positions_are_dense_from_zero(self, manager, entries, songs):
        setlist_id = uuid4()
        ids = [songs[2].id, songs[0].id, songs[1].id]
        manager.replace_all(setlist_id, _items(*ids))

        stored = entries.list_by_setlist(setlist_id)
        assert [e.position for e in stored] == [0, 1, 2]
        assert [e.song_id for e in stored] == ids

    def test_replace_drops_previous_entries(self, manager, entries, songs):
        setlist_id = uuid4()
        manager.replace_all(setlist_id, _items(songs[0].id, songs[1].id, notes="old"))
        manager.replace_all(setlist_id, _items(songs[1].id))

        stored = entries.list_by_setlist(setlist_id)
        assert [(e.song_id, e.position, e.notes) for e in stored] == [(songs[1].id, 0, "")]

    def test_empty_list_clears(self, manager, entries, songs):
        setlist_id = uuid4()
        manager.replace_all(setlist_id, _items(songs[0].id))
        manager.replace_all(setlist_id, [])
        assert entries.list_by_setlist(setlist_id) == []

    def test_validation_failure_leaves_storage_untouched(self, manager, entries, songs):
        setlist_id = uuid4()
        manager.replace_all(setlist_id, _items(songs[0].id))
        entries.calls.clear()

        with pytest.raises(ValidationError) as exc:
            manager.replace_all(setlist_id, _items(songs[1].id, uuid4()))

        assert exc.value.errors[0].code == "song_not_found"
        assert entries.calls == []
        assert [e.song_id for e in entries.list_by_setlist(setlist_id)] == [songs[0].id]

    def test_duplicate_rejected(self, manager, songs):
        with pytest.raises(ValidationError) as exc:
            manager.replace_all(uuid4(), _items(songs[0].id, songs[0].id))
        assert exc.value.errors[0].code == "duplicate_song"

    def test_same_list_twice_is_idempotent(self, manager, entries, songs):
        setlist_id = uuid4()
        ids = [s.id for s in songs]
        manager.replace_all(setlist_id, _items(*ids))
        first = entries.list_by_setlist(setlist_id)
        manager.replace_all(setlist_id, _items(*ids))
        assert entries.list_by_setlist(setlist_id) == first


# --- Get Ordered ---


def test_get_ordered_hydrates_metadata(manager, songs):
    setlist_id = uuid4()
    manager.replace_all(setlist_id, [OrderedItemInput(song_id=songs[1].id, notes="capo 2")])

    ordered = manager.get_ordered(setlist_id)
    assert len(ordered) == 1
    assert ordered[0].song.title == "Song 2"
    assert ordered[0].position == 0
    assert ordered[0].notes == "capo 2"


def test_get_ordered_skips_missing_catalog_rows(entries, songs):
    setlist_id = uuid4()
    ghost = uuid4()
    entries.insert_many(
        [
            SetlistSong(setlist_id=setlist_id, song_id=ghost, position=0),
            SetlistSong(setlist_id=setlist_id, song_id=songs[0].id, position=1),
        ]
    )
    manager = OrderedMembershipManager(entries=entries, catalog=MockCatalog(songs))

    ordered = manager.get_ordered(setlist_id)
    assert [o.song.id for o in ordered] == [songs[0].id]


def test_get_ordered_unknown_setlist_is_empty(manager):
    assert manager.get_ordered(uuid4()) == []
