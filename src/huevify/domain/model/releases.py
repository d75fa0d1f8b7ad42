"""Release requests and the track drafts they carry.

A ``ReleaseRequest`` owns its status machine:

- PENDING -> APPROVED | REJECTED (moderator decision)
- APPROVED -> LIVE (time-triggered only)

REJECTED and LIVE never change status again. ``deletion_requested`` is an
orthogonal flag that only LIVE or APPROVED requests may carry.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING

from huevify.domain.errors import StateConflictError, ValidationError
from huevify.domain.model.enums import ReleaseStatus, ReleaseType

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

VARIOUS_ARTISTS = "Various Artists"


def _require_aware(value: datetime) -> datetime:
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValidationError("Release date must include timezone information")
    return value


@dataclass(kw_only=True)
class DistributionTrack:
    title: str
    explicit: bool = False
    feat: str | None = None
    main_artists: list[str] = field(default_factory=list[str])
    genre: str | None = None
    file_url: str = ""
    duration: float = 0.0
    existing_hueq: str | None = None
    generated_hueq: str | None = None
    # Moderator-only, for multi-artist compilations.
    artist: str | None = None

    @property
    def hueq(self) -> str | None:
        return self.existing_hueq or self.generated_hueq

    @property
    def needs_code(self) -> bool:
        return not self.existing_hueq and not self.generated_hueq


@dataclass(kw_only=True)
class ReleaseDraft:
    """Artist input for a new release. Completeness is the caller's concern."""

    title: str
    type: ReleaseType = ReleaseType.SINGLE
    genre: str = ""
    label: str = ""
    covers: list[str] = field(default_factory=list[str])
    additional_main_artists: list[str] = field(default_factory=list[str])
    tracks: list[DistributionTrack] = field(default_factory=list[DistributionTrack])
    release_date: datetime
    release_message: str | None = None


@dataclass(frozen=True, slots=True)
class ArtistOverride:
    """Identity a moderator submits on behalf of."""

    artist_name: str = VARIOUS_ARTISTS
    artist_id: str | None = None


@dataclass(kw_only=True)
class ReleasePatch:
    """Field replacements for an existing request; ``None`` leaves a field as is."""

    title: str | None = None
    type: ReleaseType | None = None
    genre: str | None = None
    label: str | None = None
    covers: list[str] | None = None
    additional_main_artists: list[str] | None = None
    tracks: list[DistributionTrack] | None = None
    release_date: datetime | None = None
    release_message: str | None = None
    artist_name: str | None = None

    def present_fields(self) -> dict[str, object]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


@dataclass(kw_only=True)
class ReleaseRequest:
    id: str
    artist_id: str
    artist_name: str
    title: str
    type: ReleaseType
    genre: str
    label: str
    release_date: datetime
    submission_time: datetime | None = None
    status: ReleaseStatus = ReleaseStatus.PENDING
    deletion_requested: bool = False
    covers: list[str] = field(default_factory=list[str])
    additional_main_artists: list[str] = field(default_factory=list[str])
    tracks: list[DistributionTrack] = field(default_factory=list[DistributionTrack])
    release_message: str | None = None

    @classmethod
    def from_draft(
        cls,
        draft: ReleaseDraft,
        *,
        request_id: str,
        artist_id: str,
        artist_name: str,
        submitted_at: datetime,
    ) -> ReleaseRequest:
        return cls(
            id=request_id,
            artist_id=artist_id,
            artist_name=artist_name,
            title=draft.title,
            type=draft.type,
            genre=draft.genre,
            label=draft.label,
            release_date=_require_aware(draft.release_date),
            submission_time=submitted_at,
            covers=list(draft.covers),
            additional_main_artists=list(draft.additional_main_artists),
            tracks=list(draft.tracks),
            release_message=draft.release_message,
        )

    # Queries

    @property
    def is_published(self) -> bool:
        return self.status is ReleaseStatus.LIVE

    def is_due(self, now: datetime) -> bool:
        return self.status is ReleaseStatus.APPROVED and self.release_date <= now

    def is_visible(self, now: datetime) -> bool:
        """Whether the catalog merge should materialize this request."""

        return self.is_published or self.is_due(now)

    @property
    def accepts_deletion_request(self) -> bool:
        return self.status in (ReleaseStatus.LIVE, ReleaseStatus.APPROVED)

    def catalog_codes(self) -> set[str]:
        return {code for track in self.tracks if (code := track.hueq)}

    # Commands

    def apply_patch(self, patch: ReleasePatch) -> None:
        if patch.release_date is not None:
            _require_aware(patch.release_date)
        for name, value in patch.present_fields().items():
            setattr(self, name, value)

    def assign_codes(self, next_code: Callable[[], str]) -> int:
        """Give every track lacking a code a generated one. Returns the count."""

        assigned = 0
        for track in self.tracks:
            if track.needs_code:
                track.generated_hueq = next_code()
                assigned += 1
        return assigned

    def approve(self) -> bool:
        if self.status in (ReleaseStatus.APPROVED, ReleaseStatus.LIVE):
            return False
        if self.status is not ReleaseStatus.PENDING:
            raise StateConflictError(f"Release {self.id} is {self.status}, cannot approve")
        self.status = ReleaseStatus.APPROVED
        return True

    def reject(self) -> bool:
        if self.status is ReleaseStatus.REJECTED:
            return False
        if self.status is not ReleaseStatus.PENDING:
            raise StateConflictError(f"Release {self.id} is {self.status}, cannot reject")
        self.status = ReleaseStatus.REJECTED
        self.deletion_requested = False
        return True

    def go_live(self) -> None:
        if self.status is not ReleaseStatus.APPROVED:
            raise StateConflictError(f"Release {self.id} is {self.status}, cannot go live")
        if any(track.needs_code for track in self.tracks):
            raise StateConflictError(f"Release {self.id} has tracks without a catalog code")
        self.status = ReleaseStatus.LIVE

    def request_deletion(self) -> None:
        if not self.accepts_deletion_request:
            raise StateConflictError(
                f"Release {self.id} is {self.status}; only live or approved releases "
                "can be flagged for deletion"
            )
        self.deletion_requested = True

    def deny_deletion(self) -> None:
        self.deletion_requested = False
