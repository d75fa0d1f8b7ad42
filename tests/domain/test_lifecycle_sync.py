from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING

from huevify.adapters.memory import LocalInvalidationBus
from huevify.adapters.state_repository import KeyValueStateRepository
from huevify.domain.lifecycle import ReleaseLifecycle
from huevify.domain.model import ReleaseStatus, SyncTopic, album_id_for
from tests.helpers.hub import START, approved_artist, make_draft

if TYPE_CHECKING:
    from collections.abc import Callable

    import pytest

    from huevify.adapters.memory import InMemoryKeyValueStore
    from tests.helpers.hub import FixedClock


def test_sessions_reload_after_another_session_writes(
    moderator: ReleaseLifecycle, make_lifecycle: Callable[[], ReleaseLifecycle]
) -> None:
    observer = make_lifecycle()
    registered = make_lifecycle().register_artist("Artist B", "artist-b", "pw").value
    assert registered is not None

    assert [a.id for a in moderator.pending_artists()] == [registered.id]
    assert [a.id for a in observer.pending_artists()] == [registered.id]


def test_publisher_does_not_receive_its_own_events(
    bus: LocalInvalidationBus, make_lifecycle: Callable[[], ReleaseLifecycle]
) -> None:
    session = make_lifecycle()
    received: list[SyncTopic] = []
    bus.subscribe(received.append, origin=session.session_id)

    session.register_artist("Artist B", "artist-b", "pw")

    assert received == []


def test_each_action_publishes_one_artist_data_event(
    bus: LocalInvalidationBus, make_lifecycle: Callable[[], ReleaseLifecycle]
) -> None:
    session = make_lifecycle()
    received: list[SyncTopic] = []
    bus.subscribe(received.append)

    session.register_artist("Artist B", "artist-b", "pw")

    assert received == [SyncTopic.ARTIST_DATA]


def test_failed_actions_publish_nothing(
    bus: LocalInvalidationBus, make_lifecycle: Callable[[], ReleaseLifecycle]
) -> None:
    session = make_lifecycle()
    received: list[SyncTopic] = []
    bus.subscribe(received.append)

    assert not session.approve_release("rel_missing").ok
    assert received == []


def test_catalog_updates_in_every_session_on_publication(
    moderator: ReleaseLifecycle,
    make_lifecycle: Callable[[], ReleaseLifecycle],
    clock: FixedClock,
) -> None:
    artist = make_lifecycle()
    listener = make_lifecycle()
    approved_artist(moderator, artist)
    request = artist.submit_release(make_draft(release_date=START + timedelta(hours=1))).value
    assert request is not None
    moderator.approve_release(request.id)
    clock.advance(hours=1)

    make_lifecycle().publish_due_releases()

    for session in (moderator, artist, listener):
        assert any(a.id == album_id_for(request.id) for a in session.albums)
        stored = session.get_release(request.id)
        assert stored is not None
        assert stored.status is ReleaseStatus.LIVE


def test_mutations_read_persisted_state_first(
    store: InMemoryKeyValueStore,
    clock: FixedClock,
    moderator: ReleaseLifecycle,
) -> None:
    # Not on the shared bus, so it never hears about other writes.
    isolated = ReleaseLifecycle(
        KeyValueStateRepository(store), LocalInvalidationBus(), clock=clock
    )
    isolated.register_artist("Artist B", "artist-b", "pw")

    assert moderator.pending_artists() == []

    account = isolated.artist_accounts[0]
    result = moderator.approve_artist(account.id)

    assert result.ok
    assert isolated.login_artist("artist-b", "pw").ok


def test_listener_errors_do_not_break_publication(
    bus: LocalInvalidationBus,
    make_lifecycle: Callable[[], ReleaseLifecycle],
    caplog: pytest.LogCaptureFixture,
) -> None:
    def broken(_topic: SyncTopic) -> None:
        raise RuntimeError("listener exploded")

    observer = make_lifecycle()
    bus.subscribe(broken)
    session = make_lifecycle()

    with caplog.at_level("ERROR"):
        result = session.register_artist("Artist B", "artist-b", "pw")

    assert result.ok
    assert len(observer.pending_artists()) == 1
    assert "Invalidation listener failed" in caplog.text


def test_closed_sessions_stop_listening(
    bus: LocalInvalidationBus, make_lifecycle: Callable[[], ReleaseLifecycle]
) -> None:
    session = make_lifecycle()
    before = bus.subscriber_count

    session.close()

    assert bus.subscriber_count == before - 1


def test_unrelated_topics_are_ignored(
    bus: LocalInvalidationBus, make_lifecycle: Callable[[], ReleaseLifecycle]
) -> None:
    session = make_lifecycle()
    catalog = session.catalog

    bus.publish(SyncTopic.PLAYLISTS)

    assert session.catalog is catalog
