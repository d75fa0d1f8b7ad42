"""Artist and moderator accounts plus profile edit requests."""

from __future__ import annotations

from dataclasses import dataclass

from huevify.domain.errors import StateConflictError
from huevify.domain.model.enums import AccountStatus, ArtistPickType, ProfileEditStatus


@dataclass(frozen=True, slots=True)
class ArtistPick:
    """Item featured on an artist page, with denormalized display fields."""

    type: ArtistPickType
    id: str
    image: str | None = None
    subtitle: str | None = None


@dataclass(kw_only=True)
class ArtistAccount:
    id: str
    artist_name: str
    username: str
    # Stored and compared in the clear; not a security boundary.
    password: str
    avatar: str | None = None
    bio: str | None = None
    status: AccountStatus = AccountStatus.PENDING
    artist_pick: ArtistPick | None = None

    @property
    def is_approved(self) -> bool:
        return self.status is AccountStatus.APPROVED

    def decide(self, status: AccountStatus) -> bool:
        """Resolve a pending account. Returns ``False`` when already in ``status``."""

        if self.status is status:
            return False
        if self.status is not AccountStatus.PENDING:
            raise StateConflictError(
                f"Artist account {self.id} is already {self.status}, cannot set {status}"
            )
        self.status = status
        return True


@dataclass(kw_only=True)
class ModeratorAccount:
    username: str
    password: str


@dataclass(kw_only=True)
class ProfileEditRequest:
    id: str
    artist_id: str
    artist_name: str
    new_avatar: str | None = None
    new_bio: str | None = None
    new_artist_pick: ArtistPick | None = None
    status: ProfileEditStatus = ProfileEditStatus.PENDING

    def resolve(self, status: ProfileEditStatus) -> bool:
        if self.status is status:
            return False
        if self.status is not ProfileEditStatus.PENDING:
            raise StateConflictError(
                f"Profile edit {self.id} is already {self.status}, cannot set {status}"
            )
        self.status = status
        return True

    def apply_to(self, account: ArtistAccount) -> None:
        """Copy the fields present on this request onto ``account``."""

        if self.new_avatar is not None:
            account.avatar = self.new_avatar
        if self.new_bio is not None:
            account.bio = self.new_bio
        if self.new_artist_pick is not None:
            account.artist_pick = self.new_artist_pick
