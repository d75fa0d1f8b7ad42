"""``StateRepository`` implementation over any ``KeyValueStore``.

Each slice is stored as one JSON blob. Loading never raises: a missing key
yields the default, a corrupt blob yields the default, and individually
invalid entries are skipped. Every fallback is logged at WARNING.
"""

from __future__ import annotations

import json
import logging
from enum import StrEnum
from typing import TYPE_CHECKING, cast

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from huevify.adapters.blobs.schema import (
    ArtistAccountBlob,
    BlobModel,
    ChartEntryBlob,
    ModeratorBlob,
    ProfileEditBlob,
    ReleaseRequestBlob,
)
from huevify.adapters.blobs.translator import (
    artist_to_blob,
    artist_to_domain,
    chart_entry_to_blob,
    chart_entry_to_domain,
    moderator_to_blob,
    moderator_to_domain,
    profile_edit_to_blob,
    profile_edit_to_domain,
    release_to_blob,
    release_to_domain,
)
from huevify.domain.clock import parse_iso_datetime
from huevify.domain.model import ChartState

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from datetime import datetime

    from huevify.domain.model import (
        ArtistAccount,
        ModeratorAccount,
        ProfileEditRequest,
        ReleaseRequest,
    )
    from huevify.domain.ports import KeyValueStore

log = logging.getLogger(__name__)


class StorageKey(StrEnum):
    ARTISTS = "huevify_artist_accounts"
    MODERATOR = "huevify_moderator"
    RELEASE_REQUESTS = "huevify_release_requests"
    PROFILE_EDITS = "huevify_profile_edit_requests"
    PLAYS = "huevify_plays"
    DAILY_CHART = "huevify_daily_chart"
    CHART_BASELINE = "huevify_chart_baseline"
    CHART_LAST_ROLLOVER = "huevify_chart_last_rollover"
    AMBIENT_LAST_HOUR = "huevify_ambient_last_hour"
    LAST_LISTEN = "huevify_last_listen"
    RECENTLY_PLAYED = "huevify_recent"
    HIDDEN_TRACKS = "huevify_deleted_legacy_tracks"


class KeyValueStateRepository:
    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    # Raw access

    def _read(self, key: StorageKey) -> object | None:
        raw = self.store.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            log.warning("Corrupt blob under %s, using default: %s", key, exc)
            return None

    def _write(self, key: StorageKey, value: object) -> None:
        self.store.set(key, json.dumps(value, separators=(",", ":")))

    def _read_list(self, key: StorageKey) -> list[object]:
        data = self._read(key)
        if data is None:
            return []
        if not isinstance(data, list):
            log.warning("Expected a list under %s, got %s", key, type(data).__name__)
            return []
        return cast(list[object], data)

    def _read_mapping(self, key: StorageKey) -> dict[str, object]:
        data = self._read(key)
        if data is None:
            return {}
        if not isinstance(data, dict):
            log.warning("Expected an object under %s, got %s", key, type(data).__name__)
            return {}
        return cast(dict[str, object], data)

    def _load_models[M: BaseModel, D](
        self, key: StorageKey, model: type[M], to_domain: Callable[[M], D]
    ) -> list[D]:
        items: list[D] = []
        for index, entry in enumerate(self._read_list(key)):
            try:
                items.append(to_domain(model.model_validate(entry)))
            except (PydanticValidationError, ValueError) as exc:
                log.warning("Skipping invalid entry %d under %s: %s", index, key, exc)
        return items

    def _save_models[D](
        self, key: StorageKey, items: Iterable[D], to_blob: Callable[[D], BlobModel]
    ) -> None:
        self._write(key, [to_blob(item).dump() for item in items])

    def _read_strings(self, key: StorageKey) -> list[str]:
        values: list[str] = []
        for entry in self._read_list(key):
            if isinstance(entry, str):
                values.append(entry)
            elif isinstance(entry, dict) and isinstance(entry.get("id"), str):
                # Older history blobs held whole track objects.
                values.append(cast(str, entry["id"]))
            else:
                log.warning("Skipping invalid entry under %s: %r", key, entry)
        return values

    def _read_counts(self, key: StorageKey) -> dict[str, int]:
        counts: dict[str, int] = {}
        for track_id, value in self._read_mapping(key).items():
            if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
                counts[track_id] = value
            else:
                log.warning("Skipping invalid count for %s under %s: %r", track_id, key, value)
        return counts

    def _read_timestamp(self, value: object, key: StorageKey) -> datetime | None:
        if not isinstance(value, str):
            log.warning("Skipping invalid timestamp under %s: %r", key, value)
            return None
        try:
            return parse_iso_datetime(value)
        except ValueError as exc:
            log.warning("Skipping invalid timestamp under %s: %s", key, exc)
            return None

    # Accounts

    def load_artists(self) -> list[ArtistAccount]:
        return self._load_models(StorageKey.ARTISTS, ArtistAccountBlob, artist_to_domain)

    def save_artists(self, artists: list[ArtistAccount]) -> None:
        self._save_models(StorageKey.ARTISTS, artists, artist_to_blob)

    def load_moderator(self) -> ModeratorAccount | None:
        data = self._read(StorageKey.MODERATOR)
        if data is None:
            return None
        try:
            return moderator_to_domain(ModeratorBlob.model_validate(data))
        except PydanticValidationError as exc:
            log.warning("Invalid moderator blob, ignoring: %s", exc)
            return None

    def save_moderator(self, moderator: ModeratorAccount | None) -> None:
        if moderator is None:
            self.store.delete(StorageKey.MODERATOR)
            return
        self._write(StorageKey.MODERATOR, moderator_to_blob(moderator).dump())

    # Requests

    def load_release_requests(self) -> list[ReleaseRequest]:
        return self._load_models(
            StorageKey.RELEASE_REQUESTS, ReleaseRequestBlob, release_to_domain
        )

    def save_release_requests(self, requests: list[ReleaseRequest]) -> None:
        self._save_models(StorageKey.RELEASE_REQUESTS, requests, release_to_blob)

    def load_profile_edits(self) -> list[ProfileEditRequest]:
        return self._load_models(StorageKey.PROFILE_EDITS, ProfileEditBlob, profile_edit_to_domain)

    def save_profile_edits(self, edits: list[ProfileEditRequest]) -> None:
        self._save_models(StorageKey.PROFILE_EDITS, edits, profile_edit_to_blob)

    # Plays and charts

    def load_play_counts(self) -> dict[str, int]:
        return self._read_counts(StorageKey.PLAYS)

    def save_play_counts(self, counts: dict[str, int]) -> None:
        self._write(StorageKey.PLAYS, counts)

    def load_chart_state(self) -> ChartState:
        last_rollover_raw = self._read(StorageKey.CHART_LAST_ROLLOVER)
        return ChartState(
            chart=self._load_models(StorageKey.DAILY_CHART, ChartEntryBlob, chart_entry_to_domain),
            baseline=self._read_counts(StorageKey.CHART_BASELINE),
            last_rollover=(
                None
                if last_rollover_raw is None
                else self._read_timestamp(last_rollover_raw, StorageKey.CHART_LAST_ROLLOVER)
            ),
        )

    def save_chart_state(self, state: ChartState) -> None:
        self._save_models(StorageKey.DAILY_CHART, state.chart, chart_entry_to_blob)
        self._write(StorageKey.CHART_BASELINE, state.baseline)
        if state.last_rollover is None:
            self.store.delete(StorageKey.CHART_LAST_ROLLOVER)
        else:
            self._write(StorageKey.CHART_LAST_ROLLOVER, state.last_rollover.isoformat())

    def load_ambient_marker(self) -> str | None:
        data = self._read(StorageKey.AMBIENT_LAST_HOUR)
        if data is None or isinstance(data, str):
            return data
        log.warning("Invalid ambient marker %r, ignoring", data)
        return None

    def save_ambient_marker(self, marker: str) -> None:
        self._write(StorageKey.AMBIENT_LAST_HOUR, marker)

    def load_last_listens(self) -> dict[str, datetime]:
        listens: dict[str, datetime] = {}
        for track_id, value in self._read_mapping(StorageKey.LAST_LISTEN).items():
            parsed = self._read_timestamp(value, StorageKey.LAST_LISTEN)
            if parsed is not None:
                listens[track_id] = parsed
        return listens

    def save_last_listens(self, last_listens: dict[str, datetime]) -> None:
        self._write(
            StorageKey.LAST_LISTEN,
            {track_id: moment.isoformat() for track_id, moment in last_listens.items()},
        )

    def load_recently_played(self) -> list[str]:
        return self._read_strings(StorageKey.RECENTLY_PLAYED)

    def save_recently_played(self, track_ids: list[str]) -> None:
        self._write(StorageKey.RECENTLY_PLAYED, list(track_ids))

    def load_hidden_tracks(self) -> list[str]:
        return self._read_strings(StorageKey.HIDDEN_TRACKS)

    def save_hidden_tracks(self, track_ids: list[str]) -> None:
        self._write(StorageKey.HIDDEN_TRACKS, list(track_ids))

