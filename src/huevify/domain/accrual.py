"""Play-count accrual for one session: listen credit, ambient growth and charts."""

from __future__ import annotations

import logging
import random
from datetime import UTC, time
from typing import TYPE_CHECKING, Final

from huevify.domain.errors import NotFoundError
from huevify.domain.model import SyncTopic
from huevify.domain.plays import (
    ListenCreditTracker,
    accrue_ambient_plays,
    artist_stats,
    credit_cooldown_active,
    listen_credit,
    roll_daily_chart,
)

if TYPE_CHECKING:
    from huevify.domain.lifecycle import ReleaseLifecycle
    from huevify.domain.model import ArtistStats, ChartState, DailyChartTrack, Track

log = logging.getLogger(__name__)

RECENTLY_PLAYED_LIMIT: Final = 10


class PlayAccrualService:
    """Owns play counts; the lifecycle's catalog view is re-merged after each change."""

    def __init__(
        self,
        lifecycle: ReleaseLifecycle,
        *,
        rng: random.Random | None = None,
        ambient_minute: int = 0,
        chart_cutover: time = time(0, 0, tzinfo=UTC),
    ) -> None:
        self.lifecycle = lifecycle
        self.repository = lifecycle.repository
        self.rng = rng or random.Random()  # noqa: S311
        self.ambient_minute = ambient_minute
        self.chart_cutover = chart_cutover
        self.tracker = ListenCreditTracker()

    # Listening

    def play(self, track_id: str) -> Track:
        """Assign ``track_id`` to the player and push it onto the history."""

        with self.lifecycle.lock:
            track = self.lifecycle.catalog.track_by_id(track_id)
            if track is None:
                raise NotFoundError("Track", track_id)
            current = self.tracker.track
            # Replaying the current track resumes it; only a track change re-arms credit.
            if current is None or current.id != track_id:
                self.tracker.start(track)
            history = [tid for tid in self.repository.load_recently_played() if tid != track_id]
            history.insert(0, track_id)
            self.repository.save_recently_played(history[:RECENTLY_PLAYED_LIMIT])
            return track

    def seek(self, position: float) -> None:
        self.tracker.seek(position)

    def on_progress(self, position: float) -> int:
        """Feed a playback position sample. Returns the plays credited, usually 0."""

        with self.lifecycle.lock:
            if not self.tracker.observe(position) or self.tracker.track is None:
                return 0
            track = self.tracker.track
            now = self.lifecycle.clock()
            last_listens = self.repository.load_last_listens()
            if credit_cooldown_active(track, last_listens, now):
                log.debug("Listen on %s within cooldown, not credited", track.id)
                return 0

            credit = listen_credit(self.rng)
            counts = self.repository.load_play_counts()
            current = self.lifecycle.catalog.track_by_id(track.id)
            base = counts.get(track.id, current.plays if current is not None else track.plays)
            counts[track.id] = base + credit
            last_listens[track.id] = now
            self.repository.save_play_counts(counts)
            self.repository.save_last_listens(last_listens)
            self.lifecycle.remerge()
        log.info("Credited %d plays to %s", credit, track.id)
        self.lifecycle.notify(SyncTopic.TRACKS)
        return credit

    def recently_played(self) -> list[Track]:
        catalog = self.lifecycle.catalog
        return [
            track
            for tid in self.repository.load_recently_played()
            if (track := catalog.track_by_id(tid)) is not None
        ]

    # Background accrual

    def ambient_tick(self) -> bool:
        """Apply the hourly ambient increment if it is due. Returns whether it ran."""

        with self.lifecycle.lock:
            now = self.lifecycle.clock()
            outcome = accrue_ambient_plays(
                self.lifecycle.tracks,
                last_marker=self.repository.load_ambient_marker(),
                now=now,
                aligned_minute=self.ambient_minute,
                rng=self.rng,
            )
            if not outcome.applied or outcome.marker is None:
                return False
            counts = self.repository.load_play_counts()
            counts.update(outcome.play_counts)
            self.repository.save_play_counts(counts)
            self.repository.save_ambient_marker(outcome.marker)
            self.lifecycle.remerge()
        log.info("Ambient plays applied for hour %s", outcome.marker)
        self.lifecycle.notify(SyncTopic.TRACKS)
        return True

    def refresh_chart(self) -> tuple[ChartState, bool]:
        with self.lifecycle.lock:
            state, rolled = roll_daily_chart(
                self.lifecycle.tracks,
                self.repository.load_chart_state(),
                now=self.lifecycle.clock(),
                cutover=self.chart_cutover,
            )
            if rolled:
                self.repository.save_chart_state(state)
                log.info("Daily chart rolled over with %d entries", len(state.chart))
            return state, rolled

    def daily_chart(self) -> list[DailyChartTrack]:
        state, _ = self.refresh_chart()
        return list(state.chart)

    def artist_stats(self, artist_name: str) -> ArtistStats:
        return artist_stats(self.lifecycle.tracks, artist_name)
