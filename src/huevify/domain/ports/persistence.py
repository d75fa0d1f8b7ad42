"""Ports for persisting hub state."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from datetime import datetime

    from huevify.domain.model import (
        ArtistAccount,
        ChartState,
        ModeratorAccount,
        ProfileEditRequest,
        ReleaseRequest,
    )


@runtime_checkable
class KeyValueStore(Protocol):
    """Durable string blobs addressed by key, shared by every session."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


@runtime_checkable
class StateRepository(Protocol):
    """Typed access to each persisted slice. Loads never fail; absent data is empty."""

    def load_artists(self) -> list[ArtistAccount]: ...

    def save_artists(self, artists: list[ArtistAccount]) -> None: ...

    def load_moderator(self) -> ModeratorAccount | None: ...

    def save_moderator(self, moderator: ModeratorAccount | None) -> None: ...

    def load_release_requests(self) -> list[ReleaseRequest]: ...

    def save_release_requests(self, requests: list[ReleaseRequest]) -> None: ...

    def load_profile_edits(self) -> list[ProfileEditRequest]: ...

    def save_profile_edits(self, edits: list[ProfileEditRequest]) -> None: ...

    def load_play_counts(self) -> dict[str, int]: ...

    def save_play_counts(self, counts: dict[str, int]) -> None: ...

    def load_chart_state(self) -> ChartState: ...

    def save_chart_state(self, state: ChartState) -> None: ...

    def load_ambient_marker(self) -> str | None: ...

    def save_ambient_marker(self, marker: str) -> None: ...

    def load_last_listens(self) -> dict[str, datetime]: ...

    def save_last_listens(self, last_listens: dict[str, datetime]) -> None: ...

    def load_recently_played(self) -> list[str]: ...

    def save_recently_played(self, track_ids: list[str]) -> None: ...

    def load_hidden_tracks(self) -> list[str]: ...

    def save_hidden_tracks(self, track_ids: list[str]) -> None: ...
