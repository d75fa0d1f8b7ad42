"""Pydantic models describing the persisted JSON blobs (camelCase on the wire)."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from huevify.domain.clock import parse_iso_datetime

Status = Literal["PENDING", "APPROVED", "REJECTED"]
ReleaseStatusValue = Literal["PENDING", "APPROVED", "REJECTED", "LIVE"]
ReleaseTypeValue = Literal["Single", "EP", "Album", "Mixtape"]


def _parse_timestamp(value: object) -> object:
    if isinstance(value, str):
        return parse_iso_datetime(value)
    return value


class BlobModel(BaseModel):
    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def dump(self) -> dict[str, object]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ArtistPickBlob(BlobModel):
    type: Literal["TRACK", "ALBUM", "PLAYLIST"]
    id: str
    image: str | None = None
    subtitle: str | None = None


class ArtistAccountBlob(BlobModel):
    id: str
    artist_name: str
    username: str
    password: str
    avatar: str | None = None
    bio: str | None = None
    status: Status = "PENDING"
    artist_pick: ArtistPickBlob | None = None


class ModeratorBlob(BlobModel):
    username: str
    password: str


class DistributionTrackBlob(BlobModel):
    title: str
    explicit: bool = False
    feat: str | None = None
    main_artists: list[str] = Field(default_factory=list[str])
    genre: str | None = None
    file_url: str = ""
    duration: float = 0.0
    existing_hueq: str | None = None
    generated_hueq: str | None = None
    artist: str | None = None


class ReleaseRequestBlob(BlobModel):
    id: str
    artist_id: str
    artist_name: str
    status: ReleaseStatusValue = "PENDING"
    submission_time: datetime | None = None
    deletion_requested: bool = False
    title: str
    type: ReleaseTypeValue = "Single"
    genre: str = ""
    label: str = ""
    covers: list[str] = Field(default_factory=list[str])
    additional_main_artists: list[str] = Field(default_factory=list[str])
    tracks: list[DistributionTrackBlob] = Field(default_factory=list[DistributionTrackBlob])
    release_date: datetime
    release_message: str | None = None

    _parse_dates = field_validator("submission_time", "release_date", mode="before")(
        _parse_timestamp
    )


class ProfileEditBlob(BlobModel):
    id: str
    artist_id: str
    artist_name: str
    new_avatar: str | None = None
    new_bio: str | None = None
    new_artist_pick: ArtistPickBlob | None = None
    status: Status = "PENDING"


class ChartEntryBlob(BlobModel):
    """A chart row: the track snapshot plus its daily plays."""

    id: str
    title: str
    artist: str
    album: str = ""
    cover: str = ""
    duration: float = 0.0
    url: str = ""
    plays: int = 0
    genre: str = ""
    explicit: bool = False
    feat: str | None = None
    hueq: str | None = None
    main_artists: list[str] = Field(default_factory=list[str])
    daily_plays: int = 0
