"""Translate persisted blob models to domain objects and back."""

from __future__ import annotations

from huevify.domain.model import (
    AccountStatus,
    ArtistAccount,
    ArtistPick,
    ArtistPickType,
    DailyChartTrack,
    DistributionTrack,
    ModeratorAccount,
    ProfileEditRequest,
    ProfileEditStatus,
    ReleaseRequest,
    ReleaseStatus,
    ReleaseType,
    Track,
)

from .schema import (
    ArtistAccountBlob,
    ArtistPickBlob,
    ChartEntryBlob,
    DistributionTrackBlob,
    ModeratorBlob,
    ProfileEditBlob,
    ReleaseRequestBlob,
)


def _pick_to_domain(blob: ArtistPickBlob | None) -> ArtistPick | None:
    if blob is None:
        return None
    return ArtistPick(
        type=ArtistPickType(blob.type), id=blob.id, image=blob.image, subtitle=blob.subtitle
    )


def _pick_to_blob(pick: ArtistPick | None) -> ArtistPickBlob | None:
    if pick is None:
        return None
    return ArtistPickBlob(
        type=pick.type.value, id=pick.id, image=pick.image, subtitle=pick.subtitle
    )


def artist_to_domain(blob: ArtistAccountBlob) -> ArtistAccount:
    return ArtistAccount(
        id=blob.id,
        artist_name=blob.artist_name,
        username=blob.username,
        password=blob.password,
        avatar=blob.avatar,
        bio=blob.bio,
        status=AccountStatus(blob.status),
        artist_pick=_pick_to_domain(blob.artist_pick),
    )


def artist_to_blob(account: ArtistAccount) -> ArtistAccountBlob:
    return ArtistAccountBlob(
        id=account.id,
        artist_name=account.artist_name,
        username=account.username,
        password=account.password,
        avatar=account.avatar,
        bio=account.bio,
        status=account.status.value,
        artist_pick=_pick_to_blob(account.artist_pick),
    )


def moderator_to_domain(blob: ModeratorBlob) -> ModeratorAccount:
    return ModeratorAccount(username=blob.username, password=blob.password)


def moderator_to_blob(moderator: ModeratorAccount) -> ModeratorBlob:
    return ModeratorBlob(username=moderator.username, password=moderator.password)


def _track_draft_to_domain(blob: DistributionTrackBlob) -> DistributionTrack:
    return DistributionTrack(
        title=blob.title,
        explicit=blob.explicit,
        feat=blob.feat,
        main_artists=list(blob.main_artists),
        genre=blob.genre,
        file_url=blob.file_url,
        duration=blob.duration,
        existing_hueq=blob.existing_hueq,
        generated_hueq=blob.generated_hueq,
        artist=blob.artist,
    )


def _track_draft_to_blob(track: DistributionTrack) -> DistributionTrackBlob:
    return DistributionTrackBlob(
        title=track.title,
        explicit=track.explicit,
        feat=track.feat,
        main_artists=list(track.main_artists),
        genre=track.genre,
        file_url=track.file_url,
        duration=track.duration,
        existing_hueq=track.existing_hueq,
        generated_hueq=track.generated_hueq,
        artist=track.artist,
    )


def release_to_domain(blob: ReleaseRequestBlob) -> ReleaseRequest:
    return ReleaseRequest(
        id=blob.id,
        artist_id=blob.artist_id,
        artist_name=blob.artist_name,
        title=blob.title,
        type=ReleaseType(blob.type),
        genre=blob.genre,
        label=blob.label,
        release_date=blob.release_date,
        submission_time=blob.submission_time,
        status=ReleaseStatus(blob.status),
        deletion_requested=blob.deletion_requested,
        covers=list(blob.covers),
        additional_main_artists=list(blob.additional_main_artists),
        tracks=[_track_draft_to_domain(t) for t in blob.tracks],
        release_message=blob.release_message,
    )


def release_to_blob(request: ReleaseRequest) -> ReleaseRequestBlob:
    return ReleaseRequestBlob(
        id=request.id,
        artist_id=request.artist_id,
        artist_name=request.artist_name,
        status=request.status.value,
        submission_time=request.submission_time,
        deletion_requested=request.deletion_requested,
        title=request.title,
        type=request.type.value,
        genre=request.genre,
        label=request.label,
        covers=list(request.covers),
        additional_main_artists=list(request.additional_main_artists),
        tracks=[_track_draft_to_blob(t) for t in request.tracks],
        release_date=request.release_date,
        release_message=request.release_message,
    )


def profile_edit_to_domain(blob: ProfileEditBlob) -> ProfileEditRequest:
    return ProfileEditRequest(
        id=blob.id,
        artist_id=blob.artist_id,
        artist_name=blob.artist_name,
        new_avatar=blob.new_avatar,
        new_bio=blob.new_bio,
        new_artist_pick=_pick_to_domain(blob.new_artist_pick),
        status=ProfileEditStatus(blob.status),
    )


def profile_edit_to_blob(edit: ProfileEditRequest) -> ProfileEditBlob:
    return ProfileEditBlob(
        id=edit.id,
        artist_id=edit.artist_id,
        artist_name=edit.artist_name,
        new_avatar=edit.new_avatar,
        new_bio=edit.new_bio,
        new_artist_pick=_pick_to_blob(edit.new_artist_pick),
        status=edit.status.value,
    )


def chart_entry_to_domain(blob: ChartEntryBlob) -> DailyChartTrack:
    track = Track(
        id=blob.id,
        title=blob.title,
        artist=blob.artist,
        album=blob.album,
        cover=blob.cover,
        duration=blob.duration,
        url=blob.url,
        plays=blob.plays,
        genre=blob.genre,
        explicit=blob.explicit,
        feat=blob.feat,
        hueq=blob.hueq,
        main_artists=tuple(blob.main_artists),
    )
    return DailyChartTrack(track=track, daily_plays=blob.daily_plays)


def chart_entry_to_blob(entry: DailyChartTrack) -> ChartEntryBlob:
    track = entry.track
    return ChartEntryBlob(
        id=track.id,
        title=track.title,
        artist=track.artist,
        album=track.album,
        cover=track.cover,
        duration=track.duration,
        url=track.url,
        plays=track.plays,
        genre=track.genre,
        explicit=track.explicit,
        feat=track.feat,
        hueq=track.hueq,
        main_artists=list(track.main_artists),
        daily_plays=entry.daily_plays,
    )
