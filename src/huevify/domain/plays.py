"""Play-count rules: listen credit, ambient growth and the daily chart."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from huevify.domain.clock import hour_marker, last_cutover
from huevify.domain.model import ArtistStats, ChartState, DailyChartTrack

if TYPE_CHECKING:
    import random
    from collections.abc import Iterable, Mapping, MutableMapping
    from datetime import datetime, time

    from huevify.domain.model import Track

LISTEN_THRESHOLD_SECONDS: Final = 30.0
MAX_SAMPLE_GAP_SECONDS: Final = 1.5
CHART_SIZE: Final = 25
UNRANKED: Final = 999
MONTHLY_SHARE: Final = 0.45

# (upper bound on current plays, maximum hourly increment)
AMBIENT_TIERS: Final = (
    (10_000, 1_000),
    (100_000, 6_000),
    (1_000_000, 12_000),
)
AMBIENT_TOP_INCREMENT: Final = 24_000


def listen_credit(rng: random.Random) -> int:
    return math.floor(100 + rng.random() * 9900)


@dataclass(slots=True)
class ListenCreditTracker:
    """Tracks active listening time for the current track assignment.

    Only progress gaps in (0, 1.5) seconds count, so seeking cannot fake a
    listen. Credit is one-shot per ``start`` call.
    """

    track: Track | None = None
    cumulative: float = 0.0
    last_position: float = 0.0
    counted: bool = False

    def start(self, track: Track) -> None:
        self.track = track
        self.cumulative = 0.0
        self.last_position = 0.0
        self.counted = False

    def seek(self, position: float) -> None:
        self.last_position = position

    def observe(self, position: float) -> bool:
        """Record a progress sample. Returns ``True`` exactly once per assignment."""

        diff = position - self.last_position
        if 0 < diff < MAX_SAMPLE_GAP_SECONDS:
            self.cumulative += diff
        self.last_position = position
        if self.track is None or self.counted:
            return False
        if self.cumulative > LISTEN_THRESHOLD_SECONDS:
            self.counted = True
            return True
        return False


def credit_cooldown_active(
    track: Track, last_credited: Mapping[str, datetime], now: datetime
) -> bool:
    """Whether ``track`` was already credited within its own duration."""

    previous = last_credited.get(track.id)
    if previous is None:
        return False
    return (now - previous).total_seconds() <= track.duration


def ambient_increment(plays: int, rng: random.Random) -> int:
    cap = AMBIENT_TOP_INCREMENT
    for upper, tier_cap in AMBIENT_TIERS:
        if plays < upper:
            cap = tier_cap
            break
    return math.floor(rng.random() * cap)


@dataclass(slots=True)
class AmbientOutcome:
    applied: bool
    marker: str | None
    play_counts: dict[str, int] = field(default_factory=dict[str, int])


def accrue_ambient_plays(
    tracks: Iterable[Track],
    *,
    last_marker: str | None,
    now: datetime,
    aligned_minute: int,
    rng: random.Random,
) -> AmbientOutcome:
    """Grow every track's counter once per clock hour after ``aligned_minute``."""

    marker = hour_marker(now)
    if now.minute < aligned_minute or marker == last_marker:
        return AmbientOutcome(applied=False, marker=last_marker)
    counts = {track.id: track.plays + ambient_increment(track.plays, rng) for track in tracks}
    return AmbientOutcome(applied=True, marker=marker, play_counts=counts)


def roll_daily_chart(
    tracks: Iterable[Track],
    state: ChartState,
    *,
    now: datetime,
    cutover: time,
) -> tuple[ChartState, bool]:
    """Recompute the chart if a cutover passed since the last rollover.

    Returns the (possibly unchanged) state and whether a rollover happened.
    """

    boundary = last_cutover(now, cutover)
    if state.last_rollover is not None and state.last_rollover >= boundary:
        return state, False

    current = list(tracks)
    entries = [
        DailyChartTrack(
            track=track,
            daily_plays=max(0, track.plays - state.baseline.get(track.id, 0)),
        )
        for track in current
    ]
    entries.sort(key=lambda entry: (-entry.daily_plays, entry.track.id))
    return (
        ChartState(
            chart=entries[:CHART_SIZE],
            baseline={track.id: track.plays for track in current},
            last_rollover=now,
        ),
        True,
    )


def artist_stats(tracks: Iterable[Track], artist_name: str) -> ArtistStats:
    totals: MutableMapping[str, int] = {}
    for track in tracks:
        totals[track.artist] = totals.get(track.artist, 0) + track.plays
    ranking = sorted(totals.items(), key=lambda item: (-item[1], item[0]))
    rank = next(
        (position for position, (name, _) in enumerate(ranking, start=1) if name == artist_name),
        UNRANKED,
    )
    return ArtistStats(
        monthly_plays=math.floor(totals.get(artist_name, 0) * MONTHLY_SHARE),
        global_rank=rank,
    )
