"""Builders and fakes shared by the hub tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from huevify.domain.model import (
    DistributionTrack,
    ReleaseDraft,
    ReleaseRequest,
    ReleaseStatus,
    ReleaseType,
)

if TYPE_CHECKING:
    from huevify.domain.lifecycle import ReleaseLifecycle
    from huevify.domain.model import ArtistAccount

MODERATOR_USERNAME = "mod"
MODERATOR_PASSWORD = "mod-pass"
START = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)


@dataclass(slots=True)
class FixedClock:
    now: datetime = field(default=START)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


def make_track(
    title: str = "T1",
    *,
    existing_hueq: str | None = None,
    duration: float = 200.0,
    **overrides: object,
) -> DistributionTrack:
    return DistributionTrack(
        title=title,
        existing_hueq=existing_hueq,
        duration=duration,
        file_url=f"https://cdn.example/{title}.mp3",
        **overrides,  # type: ignore[arg-type]
    )


def make_draft(
    title: str = "X",
    *,
    release_date: datetime,
    tracks: list[DistributionTrack] | None = None,
    **overrides: object,
) -> ReleaseDraft:
    return ReleaseDraft(
        title=title,
        release_date=release_date,
        genre="Pop",
        label="Self-released",
        covers=[f"https://img.example/{title}.jpg"],
        tracks=tracks if tracks is not None else [make_track()],
        **overrides,  # type: ignore[arg-type]
    )


def make_request(
    request_id: str = "rel_1",
    *,
    status: ReleaseStatus = ReleaseStatus.LIVE,
    release_date: datetime = START - timedelta(days=1),
    tracks: list[DistributionTrack] | None = None,
    artist_name: str = "Artist A",
    submission_time: datetime | None = None,
    **overrides: object,
) -> ReleaseRequest:
    return ReleaseRequest(
        id=request_id,
        artist_id="artist_1",
        artist_name=artist_name,
        title=f"Release {request_id}",
        type=ReleaseType.SINGLE,
        genre="Pop",
        label="Label",
        release_date=release_date,
        submission_time=submission_time or release_date,
        status=status,
        covers=["https://img.example/cover.jpg"],
        tracks=tracks if tracks is not None else [make_track(generated_hueq="123AB4")],
        **overrides,  # type: ignore[arg-type]
    )


def approved_artist(
    moderator: ReleaseLifecycle,
    session: ReleaseLifecycle,
    name: str = "Artist A",
    username: str = "artist-a",
    password: str = "secret",
) -> ArtistAccount:
    """Register ``name``, have ``moderator`` approve it and log ``session`` in."""

    registered = session.register_artist(name, username, password)
    assert registered.ok
    assert registered.value is not None
    assert moderator.approve_artist(registered.value.id).ok
    login = session.login_artist(username, password)
    assert login.ok, login.message
    assert login.value is not None
    return login.value
