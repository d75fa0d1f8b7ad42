"""Derive the effective catalog from the seed data and all visible releases.

``merge_catalog`` is a pure function: it never mutates its inputs, and calling
it twice with the same arguments yields equal results. Each request is staged
on its own so a malformed one is logged and skipped without leaving partial
tracks or albums behind.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from huevify.domain.model import Album, CatalogView, Track, album_id_for, track_id_for

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable, Mapping, Sequence
    from datetime import datetime

    from huevify.domain.model import DistributionTrack, ReleaseRequest

log = logging.getLogger(__name__)


@dataclass(slots=True)
class _Stage:
    """Changes one request contributes, applied only if staging succeeds."""

    album: Album | None = None
    new_tracks: list[Track] = field(default_factory=list[Track])
    updated_tracks: dict[str, Track] = field(default_factory=dict[str, Track])


def _dedupe(names: Iterable[str]) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for name in names:
        if name and name not in seen:
            seen[name] = None
    return tuple(seen)


def _hueq_index(tracks: Mapping[str, Track]) -> dict[str, str]:
    return {track.hueq: track.id for track in tracks.values() if track.hueq}


def _materialize(
    request: ReleaseRequest, index: int, draft: DistributionTrack, cover: str
) -> Track:
    return Track(
        id=track_id_for(request.id, index),
        title=draft.title,
        artist=draft.artist or request.artist_name,
        album=request.title,
        cover=cover,
        duration=float(draft.duration),
        url=draft.file_url,
        plays=0,
        genre=draft.genre or request.genre,
        explicit=bool(draft.explicit),
        feat=draft.feat or None,
        hueq=draft.hueq,
        main_artists=_dedupe([*request.additional_main_artists, *draft.main_artists]),
    )


def _stage_request(
    request: ReleaseRequest,
    working: Mapping[str, Track],
    codes: Mapping[str, str],
) -> _Stage:
    stage = _Stage()
    cover = request.covers[0] if request.covers else ""
    track_ids: list[str] = []

    for index, draft in enumerate(request.tracks):
        reused_id = codes.get(draft.existing_hueq) if draft.existing_hueq else None
        if reused_id is not None:
            existing = stage.updated_tracks.get(reused_id) or working[reused_id]
            stage.updated_tracks[reused_id] = replace(
                existing,
                genre=draft.genre or existing.genre,
                explicit=bool(draft.explicit),
                feat=draft.feat or existing.feat,
            )
            track_ids.append(reused_id)
            continue
        track = _materialize(request, index, draft, cover)
        stage.new_tracks.append(track)
        track_ids.append(track.id)

    stage.album = Album(
        id=album_id_for(request.id),
        title=request.title,
        artist=request.artist_name,
        covers=tuple(request.covers),
        track_ids=tuple(track_ids),
        year=request.release_date.year,
        release_date=request.release_date,
        record_label=request.label or None,
        type=request.type,
        main_artists=_dedupe(request.additional_main_artists),
    )
    return stage


def _visible_requests(
    requests: Iterable[ReleaseRequest], now: datetime
) -> list[ReleaseRequest]:
    visible: list[ReleaseRequest] = []
    for request in requests:
        try:
            if request.is_visible(now):
                visible.append(request)
        except (AttributeError, TypeError) as exc:
            log.warning("Skipping unreadable release request %r: %s", request, exc)
    # Submission order keeps existing-code references stable across merges.
    return sorted(visible, key=lambda r: (r.submission_time or r.release_date, r.id))


def _drop_hidden(
    base_tracks: Sequence[Track],
    base_albums: Sequence[Album],
    hidden_track_ids: Collection[str],
) -> tuple[list[Track], list[Album]]:
    if not hidden_track_ids:
        return list(base_tracks), list(base_albums)
    tracks = [t for t in base_tracks if t.id not in hidden_track_ids]
    albums: list[Album] = []
    for album in base_albums:
        kept = tuple(tid for tid in album.track_ids if tid not in hidden_track_ids)
        if kept:
            albums.append(replace(album, track_ids=kept))
    return tracks, albums


def merge_catalog(
    base_tracks: Sequence[Track],
    base_albums: Sequence[Album],
    requests: Iterable[ReleaseRequest],
    play_counts: Mapping[str, int],
    *,
    now: datetime,
    hidden_track_ids: Collection[str] = (),
) -> CatalogView:
    """Combine the seed catalog with every live or due release."""

    seed_tracks, seed_albums = _drop_hidden(base_tracks, base_albums, hidden_track_ids)
    working: dict[str, Track] = {track.id: track for track in seed_tracks}
    albums: dict[str, Album] = {album.id: album for album in seed_albums}
    artist_names: set[str] = {track.artist for track in seed_tracks}
    artist_names.update(album.artist for album in seed_albums)

    for request in _visible_requests(requests, now):
        if album_id_for(request.id) in albums:
            continue
        try:
            stage = _stage_request(request, working, _hueq_index(working))
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            log.warning("Skipping malformed release request %s during merge: %s", request.id, exc)
            continue

        working.update(stage.updated_tracks)
        for track in stage.new_tracks:
            working.setdefault(track.id, track)
        if stage.album is not None:
            albums[stage.album.id] = stage.album
        artist_names.add(request.artist_name)
        artist_names.update(request.additional_main_artists)
        for track in stage.new_tracks:
            artist_names.add(track.artist)

    tracks = tuple(
        replace(track, plays=play_counts[track.id]) if track.id in play_counts else track
        for track in working.values()
    )
    return CatalogView(
        tracks=tracks,
        albums=tuple(albums.values()),
        artist_names=tuple(sorted(name for name in artist_names if name)),
    )
