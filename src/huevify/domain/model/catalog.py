"""Catalog read models derived from the seed data and live releases."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

    from huevify.domain.model.enums import ReleaseType

ALBUM_ID_PREFIX = "dist_alb_"
TRACK_ID_PREFIX = "dist_trk_"


def album_id_for(request_id: str) -> str:
    return f"{ALBUM_ID_PREFIX}{request_id}"


def track_id_for(request_id: str, index: int) -> str:
    return f"{TRACK_ID_PREFIX}{request_id}_{index}"


@dataclass(frozen=True, slots=True, kw_only=True)
class Track:
    id: str
    title: str
    artist: str
    album: str
    cover: str
    duration: float
    url: str
    plays: int = 0
    genre: str = ""
    explicit: bool = False
    feat: str | None = None
    hueq: str | None = None
    main_artists: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class Album:
    id: str
    title: str
    artist: str
    covers: tuple[str, ...]
    track_ids: tuple[str, ...]
    year: int
    release_date: datetime | None = None
    record_label: str | None = None
    type: ReleaseType | None = None
    main_artists: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class DailyChartTrack:
    track: Track
    daily_plays: int


@dataclass(frozen=True, slots=True)
class CatalogView:
    """Effective catalog after a merge."""

    tracks: tuple[Track, ...] = ()
    albums: tuple[Album, ...] = ()
    artist_names: tuple[str, ...] = ()

    def track_by_hueq(self, code: str) -> Track | None:
        return next((t for t in self.tracks if t.hueq == code), None)

    def track_by_id(self, track_id: str) -> Track | None:
        return next((t for t in self.tracks if t.id == track_id), None)


@dataclass(slots=True)
class ChartState:
    """Persisted daily chart plus the absolute play counts it was computed against."""

    chart: list[DailyChartTrack] = field(default_factory=list[DailyChartTrack])
    baseline: dict[str, int] = field(default_factory=dict[str, int])
    last_rollover: datetime | None = None


@dataclass(frozen=True, slots=True)
class ArtistStats:
    monthly_plays: int
    global_rank: int
