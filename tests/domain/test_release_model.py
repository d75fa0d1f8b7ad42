from __future__ import annotations

from itertools import count
from typing import TYPE_CHECKING

import pytest

from huevify.domain.errors import StateConflictError
from huevify.domain.model import (
    AccountStatus,
    ArtistAccount,
    ArtistPick,
    ArtistPickType,
    ProfileEditRequest,
    ProfileEditStatus,
    ReleasePatch,
    ReleaseStatus,
)
from tests.helpers.hub import START, make_request, make_track

if TYPE_CHECKING:
    from collections.abc import Callable


def _codes() -> Callable[[], str]:
    sequence = count(100)
    return lambda: f"{next(sequence)}AA0"


def test_pending_request_can_be_approved_then_published() -> None:
    request = make_request(status=ReleaseStatus.PENDING, tracks=[make_track()])
    request.assign_codes(_codes())

    assert request.approve() is True
    request.go_live()

    assert request.status is ReleaseStatus.LIVE


def test_approve_is_a_no_op_once_approved_or_live() -> None:
    request = make_request(status=ReleaseStatus.LIVE)

    assert request.approve() is False
    assert request.status is ReleaseStatus.LIVE


def test_rejected_request_cannot_be_approved() -> None:
    request = make_request(status=ReleaseStatus.REJECTED)

    with pytest.raises(StateConflictError):
        request.approve()


@pytest.mark.parametrize("status", [ReleaseStatus.APPROVED, ReleaseStatus.LIVE])
def test_reject_refuses_resolved_requests(status: ReleaseStatus) -> None:
    request = make_request(status=status)

    with pytest.raises(StateConflictError):
        request.reject()

    assert request.status is status


def test_reject_twice_is_idempotent() -> None:
    request = make_request(status=ReleaseStatus.PENDING)

    assert request.reject() is True
    assert request.reject() is False
    assert request.status is ReleaseStatus.REJECTED


def test_go_live_requires_codes_on_every_track() -> None:
    request = make_request(status=ReleaseStatus.APPROVED, tracks=[make_track()])

    with pytest.raises(StateConflictError):
        request.go_live()


def test_assign_codes_leaves_existing_codes_alone() -> None:
    request = make_request(
        status=ReleaseStatus.PENDING,
        tracks=[make_track("a", existing_hueq="001AA1"), make_track("b")],
    )

    assigned = request.assign_codes(_codes())

    assert assigned == 1
    assert request.tracks[0].generated_hueq is None
    assert request.tracks[1].generated_hueq == "100AA0"


def test_deletion_flag_only_on_live_or_approved() -> None:
    pending = make_request(status=ReleaseStatus.PENDING)
    live = make_request(status=ReleaseStatus.LIVE)

    with pytest.raises(StateConflictError):
        pending.request_deletion()
    live.request_deletion()

    assert live.deletion_requested is True
    assert live.status is ReleaseStatus.LIVE


def test_patch_replaces_only_present_fields_and_keeps_status() -> None:
    request = make_request(status=ReleaseStatus.LIVE)
    original_genre = request.genre

    request.apply_patch(ReleasePatch(title="Renamed", release_date=START))

    assert request.title == "Renamed"
    assert request.release_date == START
    assert request.genre == original_genre
    assert request.status is ReleaseStatus.LIVE


def test_artist_decision_is_irreversible() -> None:
    account = ArtistAccount(id="a1", artist_name="A", username="a", password="p")

    assert account.decide(AccountStatus.REJECTED) is True
    assert account.decide(AccountStatus.REJECTED) is False
    with pytest.raises(StateConflictError):
        account.decide(AccountStatus.APPROVED)


def test_profile_edit_applies_only_present_fields() -> None:
    account = ArtistAccount(
        id="a1", artist_name="A", username="a", password="p", avatar="old.png", bio="old bio"
    )
    pick = ArtistPick(type=ArtistPickType.TRACK, id="t1")
    edit = ProfileEditRequest(id="e1", artist_id="a1", artist_name="A", new_artist_pick=pick)

    edit.apply_to(account)

    assert account.avatar == "old.png"
    assert account.bio == "old bio"
    assert account.artist_pick == pick
    assert edit.resolve(ProfileEditStatus.APPROVED) is True
    with pytest.raises(StateConflictError):
        edit.resolve(ProfileEditStatus.REJECTED)
