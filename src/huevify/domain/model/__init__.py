"""Domain model package exports."""

from __future__ import annotations

from .accounts import ArtistAccount, ArtistPick, ModeratorAccount, ProfileEditRequest
from .catalog import (
    ALBUM_ID_PREFIX,
    TRACK_ID_PREFIX,
    Album,
    ArtistStats,
    CatalogView,
    ChartState,
    DailyChartTrack,
    Track,
    album_id_for,
    track_id_for,
)
from .enums import (
    AccountStatus,
    ArtistPickType,
    Decision,
    ProfileEditStatus,
    ReleaseStatus,
    ReleaseType,
    ResolutionContext,
    SyncTopic,
)
from .releases import (
    VARIOUS_ARTISTS,
    ArtistOverride,
    DistributionTrack,
    ReleaseDraft,
    ReleasePatch,
    ReleaseRequest,
)

__all__ = [
    "ALBUM_ID_PREFIX",
    "TRACK_ID_PREFIX",
    "VARIOUS_ARTISTS",
    "AccountStatus",
    "Album",
    "ArtistAccount",
    "ArtistOverride",
    "ArtistPick",
    "ArtistPickType",
    "ArtistStats",
    "CatalogView",
    "ChartState",
    "DailyChartTrack",
    "Decision",
    "DistributionTrack",
    "ModeratorAccount",
    "ProfileEditRequest",
    "ProfileEditStatus",
    "ReleaseDraft",
    "ReleasePatch",
    "ReleaseRequest",
    "ReleaseStatus",
    "ReleaseType",
    "ResolutionContext",
    "SyncTopic",
    "Track",
    "album_id_for",
    "track_id_for",
]
