"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class AccountStatus(StrEnum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class ReleaseStatus(StrEnum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    LIVE = "LIVE"


class ProfileEditStatus(StrEnum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class ReleaseType(StrEnum):
    SINGLE = "Single"
    EP = "EP"
    ALBUM = "Album"
    MIXTAPE = "Mixtape"


class ArtistPickType(StrEnum):
    TRACK = "TRACK"
    ALBUM = "ALBUM"
    PLAYLIST = "PLAYLIST"


class Decision(StrEnum):
    APPROVE = "approve"
    REJECT = "reject"


class ResolutionContext(StrEnum):
    """What a moderator decision applies to, derived from ``deletion_requested``."""

    NEW_SUBMISSION = "new_submission"
    DELETION_REQUEST = "deletion_request"


class SyncTopic(StrEnum):
    PLAYLISTS = "playlists-changed"
    TRACKS = "tracks-changed"
    ARTIST_DATA = "artist-data-changed"
    SETTINGS = "settings-changed"
