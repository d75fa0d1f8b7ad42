from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from huevify.adapters.state_repository import KeyValueStateRepository, StorageKey
from huevify.domain.model import (
    AccountStatus,
    ArtistAccount,
    ArtistPick,
    ArtistPickType,
    ChartState,
    DailyChartTrack,
    ModeratorAccount,
    ProfileEditRequest,
    ReleaseStatus,
)
from huevify.domain.seed import build_seed_catalog
from tests.helpers.hub import START, make_request, make_track

if TYPE_CHECKING:
    import pytest

    from huevify.adapters.memory import InMemoryKeyValueStore

TRACKS, _ = build_seed_catalog()


def test_missing_keys_load_as_defaults(repository: KeyValueStateRepository) -> None:
    assert repository.load_artists() == []
    assert repository.load_moderator() is None
    assert repository.load_release_requests() == []
    assert repository.load_play_counts() == {}
    assert repository.load_chart_state() == ChartState()
    assert repository.load_ambient_marker() is None
    assert repository.load_recently_played() == []


def test_release_requests_are_stored_as_camel_case_json(
    repository: KeyValueStateRepository, store: InMemoryKeyValueStore
) -> None:
    request = make_request(status=ReleaseStatus.APPROVED, deletion_requested=True)

    repository.save_release_requests([request])

    raw = json.loads(store.data[StorageKey.RELEASE_REQUESTS])
    assert raw[0]["artistName"] == "Artist A"
    assert raw[0]["deletionRequested"] is True
    assert raw[0]["status"] == "APPROVED"
    assert raw[0]["tracks"][0]["generatedHueq"] == "123AB4"
    assert repository.load_release_requests() == [request]


def test_release_dates_accept_z_suffix(
    repository: KeyValueStateRepository, store: InMemoryKeyValueStore
) -> None:
    store.set(
        StorageKey.RELEASE_REQUESTS,
        json.dumps(
            [
                {
                    "id": "rel_1",
                    "artistId": "artist_1",
                    "artistName": "Artist A",
                    "title": "X",
                    "type": "EP",
                    "releaseDate": "2025-06-01T12:00:00.000Z",
                    "tracks": [{"title": "T1", "fileUrl": "u", "duration": 12}],
                    "unknownField": 1,
                }
            ]
        ),
    )

    (request,) = repository.load_release_requests()

    assert request.release_date == START
    assert request.status is ReleaseStatus.PENDING
    assert request.tracks[0].duration == 12.0


def test_invalid_entries_are_skipped_with_a_warning(
    repository: KeyValueStateRepository,
    store: InMemoryKeyValueStore,
    caplog: pytest.LogCaptureFixture,
) -> None:
    good = {"id": "artist_1", "artistName": "A", "username": "a", "password": "p"}
    store.set(StorageKey.ARTISTS, json.dumps([good, {"id": "broken"}, "junk"]))

    with caplog.at_level(logging.WARNING):
        artists = repository.load_artists()

    assert [a.id for a in artists] == ["artist_1"]
    assert artists[0].status is AccountStatus.PENDING
    assert caplog.text.count("Skipping invalid entry") == 2


def test_corrupt_json_degrades_to_default(
    repository: KeyValueStateRepository,
    store: InMemoryKeyValueStore,
    caplog: pytest.LogCaptureFixture,
) -> None:
    store.set(StorageKey.RELEASE_REQUESTS, "{not json")
    store.set(StorageKey.PLAYS, json.dumps(["not", "a", "mapping"]))

    with caplog.at_level(logging.WARNING):
        assert repository.load_release_requests() == []
        assert repository.load_play_counts() == {}

    assert "Corrupt blob" in caplog.text
    assert "Expected an object" in caplog.text


def test_play_counts_drop_invalid_values(
    repository: KeyValueStateRepository, store: InMemoryKeyValueStore
) -> None:
    store.set(StorageKey.PLAYS, json.dumps({"t1": 10, "t2": -1, "t3": "7", "t4": True}))

    assert repository.load_play_counts() == {"t1": 10}


def test_accounts_and_profile_edits(repository: KeyValueStateRepository) -> None:
    pick = ArtistPick(type=ArtistPickType.TRACK, id="t1", image="cover.jpg")
    artist = ArtistAccount(
        id="artist_1",
        artist_name="A",
        username="a",
        password="p",
        status=AccountStatus.APPROVED,
        artist_pick=pick,
    )
    edit = ProfileEditRequest(id="edit_1", artist_id="artist_1", artist_name="A", new_bio="b")

    repository.save_artists([artist])
    repository.save_profile_edits([edit])
    repository.save_moderator(ModeratorAccount(username="mod", password="pw"))

    assert repository.load_artists() == [artist]
    assert repository.load_profile_edits() == [edit]
    assert repository.load_moderator() == ModeratorAccount(username="mod", password="pw")

    repository.save_moderator(None)
    assert repository.load_moderator() is None


def test_chart_state_persists_snapshot_baseline_and_rollover(
    repository: KeyValueStateRepository, store: InMemoryKeyValueStore
) -> None:
    state = ChartState(
        chart=[DailyChartTrack(track=TRACKS[0], daily_plays=42)],
        baseline={"t1": 100},
        last_rollover=START,
    )

    repository.save_chart_state(state)

    assert json.loads(store.data[StorageKey.DAILY_CHART])[0]["dailyPlays"] == 42
    assert repository.load_chart_state() == state


def test_last_listens_and_markers(repository: KeyValueStateRepository) -> None:
    moment = datetime(2025, 6, 1, 9, 30, tzinfo=UTC)

    repository.save_last_listens({"t1": moment})
    repository.save_ambient_marker("2025-06-01T09")

    assert repository.load_last_listens() == {"t1": moment}
    assert repository.load_ambient_marker() == "2025-06-01T09"


def test_history_accepts_legacy_track_objects(
    repository: KeyValueStateRepository, store: InMemoryKeyValueStore
) -> None:
    store.set(StorageKey.RECENTLY_PLAYED, json.dumps([{"id": "t2", "title": "x"}, "t1", 5]))

    assert repository.load_recently_played() == ["t2", "t1"]


def test_existing_hueq_survives_storage(repository: KeyValueStateRepository) -> None:
    request = make_request(tracks=[make_track(existing_hueq="001AB1")])

    repository.save_release_requests([request])

    (loaded,) = repository.load_release_requests()
    assert loaded.tracks[0].existing_hueq == "001AB1"
    assert loaded.tracks[0].generated_hueq is None
