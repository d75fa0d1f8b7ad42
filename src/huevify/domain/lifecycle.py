"""Release lifecycle engine.

One ``ReleaseLifecycle`` exists per session (browser tab, CLI invocation,
scheduler). It keeps an in-memory copy of the shared hub state, re-reads the
persisted slice before every mutation, writes the result back synchronously
and then publishes an invalidation topic so other sessions reload.

Every public action returns an ``OperationResult``; ``HubError`` subclasses
raised while handling an action are converted into failures at the boundary.
"""

from __future__ import annotations

import functools
import logging
import random
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Concatenate

from huevify.domain.catalog_merge import merge_catalog
from huevify.domain.clock import utcnow
from huevify.domain.errors import (
    AccountPendingError,
    AccountRejectedError,
    DuplicateUsernameError,
    HubError,
    InvalidCredentialsError,
    ModeratorExistsError,
    NotAuthorizedError,
    NotFoundError,
    OperationResult,
    ValidationError,
)
from huevify.domain.identifiers import new_request_id, unique_catalog_code, unique_request_id
from huevify.domain.model import (
    AccountStatus,
    ArtistAccount,
    ArtistOverride,
    CatalogView,
    Decision,
    ModeratorAccount,
    ProfileEditRequest,
    ProfileEditStatus,
    ReleaseRequest,
    ReleaseStatus,
    ResolutionContext,
    SyncTopic,
    track_id_for,
)
from huevify.domain.seed import build_seed_catalog

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from huevify.domain.clock import Clock
    from huevify.domain.model import (
        Album,
        ArtistPick,
        ReleaseDraft,
        ReleasePatch,
        Track,
    )
    from huevify.domain.ports import InvalidationBus, StateRepository

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ArtistSession:
    artist_id: str


@dataclass(frozen=True, slots=True)
class ModeratorSession:
    username: str


type Actor = ArtistSession | ModeratorSession


@dataclass(frozen=True, slots=True)
class ReleaseResolution:
    """A moderator decision with the context it applies to made explicit."""

    request_id: str
    decision: Decision
    context: ResolutionContext

    @classmethod
    def for_request(cls, request: ReleaseRequest, decision: Decision) -> ReleaseResolution:
        context = (
            ResolutionContext.DELETION_REQUEST
            if request.deletion_requested
            else ResolutionContext.NEW_SUBMISSION
        )
        return cls(request_id=request.id, decision=decision, context=context)


def _reported[**P, T](
    action: Callable[Concatenate[ReleaseLifecycle, P], OperationResult[T]],
) -> Callable[Concatenate[ReleaseLifecycle, P], OperationResult[T]]:
    @functools.wraps(action)
    def wrapper(self: ReleaseLifecycle, *args: P.args, **kwargs: P.kwargs) -> OperationResult[T]:
        with self.lock:
            try:
                result = action(self, *args, **kwargs)
            except HubError as exc:
                log.info("%s rejected (%s): %s", action.__name__, exc.kind, exc)
                result = OperationResult.failure(exc)
            topics = self._drain_outbox()
        # Publish outside the lock; listeners in other sessions take their own.
        for topic in topics:
            self.notify(topic)
        return result

    return wrapper


class ReleaseLifecycle:
    """Accounts, release requests and profile edits for one session."""

    def __init__(
        self,
        repository: StateRepository,
        bus: InvalidationBus,
        *,
        clock: Clock = utcnow,
        rng: random.Random | None = None,
        base_catalog: tuple[Sequence[Track], Sequence[Album]] | None = None,
    ) -> None:
        self.repository = repository
        self.bus = bus
        self.clock = clock
        self.rng = rng or random.Random()  # noqa: S311
        self.lock = threading.RLock()
        self.session_id = new_request_id("session")
        self.base_tracks, self.base_albums = base_catalog or build_seed_catalog()

        self._actor: Actor | None = None
        self._artists: list[ArtistAccount] = []
        self._moderator: ModeratorAccount | None = None
        self._requests: list[ReleaseRequest] = []
        self._profile_edits: list[ProfileEditRequest] = []
        self._catalog = CatalogView()
        self._outbox: list[SyncTopic] = []

        self._reload_artist_data()
        self._remerge()
        self._unsubscribe = bus.subscribe(self._on_invalidation, origin=self.session_id)

    def close(self) -> None:
        self._unsubscribe()

    # ------------------------------------------------------------------
    # Read-only views

    @property
    def catalog(self) -> CatalogView:
        return self._catalog

    @property
    def tracks(self) -> tuple[Track, ...]:
        return self._catalog.tracks

    @property
    def albums(self) -> tuple[Album, ...]:
        return self._catalog.albums

    @property
    def artist_names(self) -> tuple[str, ...]:
        return self._catalog.artist_names

    @property
    def release_requests(self) -> tuple[ReleaseRequest, ...]:
        return tuple(self._requests)

    @property
    def artist_accounts(self) -> tuple[ArtistAccount, ...]:
        return tuple(self._artists)

    @property
    def profile_edits(self) -> tuple[ProfileEditRequest, ...]:
        return tuple(self._profile_edits)

    @property
    def has_moderator(self) -> bool:
        return self._moderator is not None

    @property
    def is_moderator(self) -> bool:
        return isinstance(self._actor, ModeratorSession)

    @property
    def current_artist(self) -> ArtistAccount | None:
        if isinstance(self._actor, ArtistSession):
            return self._find_artist(self._actor.artist_id)
        return None

    def pending_artists(self) -> list[ArtistAccount]:
        return [a for a in self._artists if a.status is AccountStatus.PENDING]

    def pending_releases(self) -> list[ReleaseRequest]:
        return [
            r for r in self._requests if r.status is ReleaseStatus.PENDING or r.deletion_requested
        ]

    def pending_profile_edits(self) -> list[ProfileEditRequest]:
        return [e for e in self._profile_edits if e.status is ProfileEditStatus.PENDING]

    def releases_for_current_artist(self) -> list[ReleaseRequest]:
        artist = self.current_artist
        if artist is None:
            return []
        return [r for r in self._requests if r.artist_id == artist.id]

    def get_track_by_hueq(self, code: str) -> Track | None:
        return self._catalog.track_by_hueq(code.strip().upper())

    def get_release(self, request_id: str) -> ReleaseRequest | None:
        return next((r for r in self._requests if r.id == request_id), None)

    # ------------------------------------------------------------------
    # Accounts

    @_reported
    def register_artist(
        self, artist_name: str, username: str, password: str
    ) -> OperationResult[ArtistAccount]:
        if not username.strip() or not password:
            raise ValidationError("Username and password are required")
        self._reload_artist_data()
        if any(a.username == username for a in self._artists):
            raise DuplicateUsernameError(username)
        account = ArtistAccount(
            id=unique_request_id("artist", {a.id for a in self._artists}),
            artist_name=artist_name.strip() or username,
            username=username,
            password=password,
        )
        self._artists.append(account)
        self._commit_artists()
        log.info("Registered artist %s (%s), awaiting approval", account.artist_name, account.id)
        return OperationResult.success("Registration sent for moderator approval", account)

    @_reported
    def login_artist(self, username: str, password: str) -> OperationResult[ArtistAccount]:
        self._reload_artist_data()
        account = next(
            (a for a in self._artists if a.username == username and a.password == password),
            None,
        )
        if account is None:
            raise InvalidCredentialsError
        if account.status is AccountStatus.PENDING:
            raise AccountPendingError
        if account.status is AccountStatus.REJECTED:
            raise AccountRejectedError
        self._actor = ArtistSession(artist_id=account.id)
        return OperationResult.success(f"Welcome back, {account.artist_name}", account)

    @_reported
    def register_moderator(self, username: str, password: str) -> OperationResult[None]:
        if not username.strip() or not password:
            raise ValidationError("Username and password are required")
        self._reload_artist_data()
        if self._moderator is not None:
            raise ModeratorExistsError
        self._moderator = ModeratorAccount(username=username, password=password)
        self.repository.save_moderator(self._moderator)
        self._notify(SyncTopic.ARTIST_DATA)
        log.info("Registered moderator %s", username)
        return OperationResult.success("Moderator account created")

    @_reported
    def login_moderator(self, username: str, password: str) -> OperationResult[None]:
        self._reload_artist_data()
        moderator = self._moderator
        if moderator is None or moderator.username != username or moderator.password != password:
            raise InvalidCredentialsError
        self._actor = ModeratorSession(username=username)
        return OperationResult.success("Logged in as moderator")

    def logout(self) -> None:
        with self.lock:
            self._actor = None

    @_reported
    def change_artist_password(self, new_password: str) -> OperationResult[None]:
        if not new_password:
            raise ValidationError("Password must not be empty")
        self._reload_artist_data()
        artist = self._require_artist()
        artist.password = new_password
        self._commit_artists()
        return OperationResult.success("Password updated")

    @_reported
    def change_moderator_password(self, new_password: str) -> OperationResult[None]:
        if not new_password:
            raise ValidationError("Password must not be empty")
        self._reload_artist_data()
        self._require_moderator()
        if self._moderator is None:
            raise NotFoundError("Moderator", "moderator")
        self._moderator.password = new_password
        self.repository.save_moderator(self._moderator)
        self._notify(SyncTopic.ARTIST_DATA)
        return OperationResult.success("Password updated")

    @_reported
    def approve_artist(self, artist_id: str) -> OperationResult[ArtistAccount]:
        return self._decide_artist(artist_id, AccountStatus.APPROVED)

    @_reported
    def reject_artist(self, artist_id: str) -> OperationResult[ArtistAccount]:
        return self._decide_artist(artist_id, AccountStatus.REJECTED)

    @_reported
    def delete_artist_account(self, artist_id: str) -> OperationResult[None]:
        self._require_moderator()
        self._reload_artist_data()
        account = self._get_artist(artist_id)
        self._artists.remove(account)
        self._commit_artists()
        log.info("Deleted artist account %s (%s)", account.artist_name, account.id)
        return OperationResult.success(f"Artist {account.artist_name} deleted")

    # ------------------------------------------------------------------
    # Artist-facing release operations

    @_reported
    def submit_release(
        self, draft: ReleaseDraft, override: ArtistOverride | None = None
    ) -> OperationResult[ReleaseRequest]:
        self._reload_artist_data()
        if self.is_moderator:
            identity = override or ArtistOverride()
            artist_id = identity.artist_id or new_request_id("va")
            artist_name = identity.artist_name
        else:
            if override is not None:
                raise NotAuthorizedError("Only the moderator can submit on behalf of an artist")
            artist = self._require_artist()
            artist_id, artist_name = artist.id, artist.artist_name

        request = ReleaseRequest.from_draft(
            draft,
            request_id=unique_request_id("rel", {r.id for r in self._requests}),
            artist_id=artist_id,
            artist_name=artist_name,
            submitted_at=self.clock(),
        )
        self._requests.append(request)
        self._commit_requests()
        log.info("Release %s '%s' submitted by %s", request.id, request.title, artist_name)
        return OperationResult.success("Release submitted", request)

    @_reported
    def update_release_request(
        self, request_id: str, patch: ReleasePatch
    ) -> OperationResult[ReleaseRequest]:
        self._reload_artist_data()
        request = self._get_release(request_id)
        self._require_release_owner(request)
        if patch.artist_name is not None and not self.is_moderator:
            raise NotAuthorizedError("Only the moderator can change a release's artist")

        now = self.clock()
        was_visible = request.is_visible(now)
        request.apply_patch(patch)
        if request.status in (ReleaseStatus.APPROVED, ReleaseStatus.LIVE):
            # Replacement tracks on an approved release need codes before the merge.
            request.assign_codes(self._code_factory())
        self._commit_requests(remerge=was_visible or request.is_visible(now))
        return OperationResult.success("Release updated", request)

    @_reported
    def submit_profile_edit(
        self,
        new_avatar: str | None = None,
        new_bio: str | None = None,
        new_artist_pick: ArtistPick | None = None,
    ) -> OperationResult[ProfileEditRequest]:
        self._reload_artist_data()
        artist = self._require_artist()
        edit = ProfileEditRequest(
            id=unique_request_id("edit", {e.id for e in self._profile_edits}),
            artist_id=artist.id,
            artist_name=artist.artist_name,
            new_avatar=new_avatar,
            new_bio=new_bio,
            new_artist_pick=new_artist_pick,
        )
        self._profile_edits.append(edit)
        self._commit_profile_edits()
        return OperationResult.success("Profile update sent for moderation approval", edit)

    @_reported
    def delete_release(self, request_id: str) -> OperationResult[ReleaseRequest]:
        self._reload_artist_data()
        request = self._get_release(request_id)
        self._require_release_owner(request)
        if request.accepts_deletion_request:
            if request.deletion_requested:
                return OperationResult.success(
                    "Deletion already requested", request, changed=False
                )
            request.request_deletion()
            self._commit_requests()
            return OperationResult.success("Deletion requested; awaiting moderator", request)
        self._retract(request)
        return OperationResult.success("Release deleted", request)

    # ------------------------------------------------------------------
    # Moderator-facing release operations

    @_reported
    def approve_release(self, request_id: str) -> OperationResult[ReleaseRequest]:
        return self._resolve(request_id, Decision.APPROVE)

    @_reported
    def reject_release(self, request_id: str) -> OperationResult[ReleaseRequest]:
        return self._resolve(request_id, Decision.REJECT)

    @_reported
    def approve_profile_edit(self, edit_id: str) -> OperationResult[ProfileEditRequest]:
        self._require_moderator()
        self._reload_artist_data()
        edit = self._get_profile_edit(edit_id)
        if edit.status is ProfileEditStatus.PENDING:
            edit.apply_to(self._get_artist(edit.artist_id))
        changed = edit.resolve(ProfileEditStatus.APPROVED)
        if changed:
            self.repository.save_artists(self._artists)
            self._commit_profile_edits()
        return OperationResult.success("Profile update approved", edit, changed=changed)

    @_reported
    def reject_profile_edit(self, edit_id: str) -> OperationResult[ProfileEditRequest]:
        self._require_moderator()
        self._reload_artist_data()
        edit = self._get_profile_edit(edit_id)
        changed = edit.resolve(ProfileEditStatus.REJECTED)
        if changed:
            self._commit_profile_edits()
        return OperationResult.success("Profile update rejected", edit, changed=changed)

    @_reported
    def publish_due_releases(self) -> OperationResult[list[str]]:
        """Promote every approved release whose date has passed. Run by the scheduler."""

        self._reload_artist_data()
        now = self.clock()
        promoted: list[str] = []
        for request in self._requests:
            if not request.is_due(now):
                continue
            if any(track.needs_code for track in request.tracks):
                request.assign_codes(self._code_factory())
            request.go_live()
            promoted.append(request.id)
        if promoted:
            self._commit_requests(remerge=True)
            log.info("Published %d scheduled release(s): %s", len(promoted), ", ".join(promoted))
        return OperationResult.success(
            f"{len(promoted)} release(s) published", promoted, changed=bool(promoted)
        )

    @_reported
    def delete_legacy_track(self, track_id: str) -> OperationResult[None]:
        self._require_moderator()
        if not any(t.id == track_id for t in self.base_tracks):
            raise NotFoundError("Catalog track", track_id)
        hidden = self.repository.load_hidden_tracks()
        if track_id in hidden:
            return OperationResult.success("Track already removed", changed=False)
        hidden.append(track_id)
        self.repository.save_hidden_tracks(hidden)
        self._drop_from_history([track_id])
        self._remerge()
        self._notify(SyncTopic.ARTIST_DATA)
        return OperationResult.success("Track removed from catalog")

    # ------------------------------------------------------------------
    # Resolution

    def _resolve(self, request_id: str, decision: Decision) -> OperationResult[ReleaseRequest]:
        self._require_moderator()
        self._reload_artist_data()
        request = self._get_release(request_id)
        resolution = ReleaseResolution.for_request(request, decision)

        match resolution.context, resolution.decision:
            case ResolutionContext.DELETION_REQUEST, Decision.APPROVE:
                self._retract(request)
                return OperationResult.success("Deletion confirmed; release removed", request)
            case ResolutionContext.DELETION_REQUEST, Decision.REJECT:
                request.deny_deletion()
                self._commit_requests()
                return OperationResult.success("Deletion denied; release stays live", request)
            case ResolutionContext.NEW_SUBMISSION, Decision.APPROVE:
                return self._approve_submission(request)
            case _:
                changed = request.reject()
                if changed:
                    self._commit_requests()
                return OperationResult.success("Release rejected", request, changed=changed)

    def _approve_submission(self, request: ReleaseRequest) -> OperationResult[ReleaseRequest]:
        if request.status is ReleaseStatus.PENDING:
            request.assign_codes(self._code_factory())
        if not request.approve():
            return OperationResult.success("Release already approved", request, changed=False)

        now = self.clock()
        if request.release_date <= now:
            request.go_live()
            self._commit_requests(remerge=True)
            return OperationResult.success("Release approved and live", request)
        self._commit_requests()
        return OperationResult.success("Release approved; scheduled for release date", request)

    def _code_factory(self) -> Callable[[], str]:
        taken = {t.hueq for t in self.base_tracks if t.hueq}
        taken.update(t.hueq for t in self._catalog.tracks if t.hueq)
        for request in self._requests:
            taken.update(request.catalog_codes())

        def next_code() -> str:
            code = unique_catalog_code(taken, self.rng)
            taken.add(code)
            return code

        return next_code

    def _decide_artist(
        self, artist_id: str, status: AccountStatus
    ) -> OperationResult[ArtistAccount]:
        self._require_moderator()
        self._reload_artist_data()
        account = self._get_artist(artist_id)
        changed = account.decide(status)
        if changed:
            self._commit_artists()
        return OperationResult.success(
            f"Artist {account.artist_name} {status.lower()}", account, changed=changed
        )

    def _retract(self, request: ReleaseRequest) -> None:
        """Remove ``request`` entirely and drop its materialized tracks everywhere."""

        self._requests.remove(request)
        self._commit_requests(remerge=True)
        self._drop_from_history(track_id_for(request.id, i) for i in range(len(request.tracks)))
        log.info("Release %s '%s' removed", request.id, request.title)

    def _drop_from_history(self, track_ids: Iterable[str]) -> None:
        doomed = set(track_ids)
        history = self.repository.load_recently_played()
        kept = [tid for tid in history if tid not in doomed]
        if len(kept) != len(history):
            self.repository.save_recently_played(kept)

    # ------------------------------------------------------------------
    # Session and lookup helpers

    def _require_artist(self) -> ArtistAccount:
        if not isinstance(self._actor, ArtistSession):
            raise NotAuthorizedError("An artist session is required")
        artist = self._find_artist(self._actor.artist_id)
        if artist is None:
            self._actor = None
            raise NotAuthorizedError("Your artist account no longer exists")
        return artist

    def _require_moderator(self) -> None:
        if not isinstance(self._actor, ModeratorSession):
            raise NotAuthorizedError("A moderator session is required")

    def _require_release_owner(self, request: ReleaseRequest) -> None:
        if self.is_moderator:
            return
        if self._require_artist().id != request.artist_id:
            raise NotAuthorizedError("This release belongs to another artist")

    def _find_artist(self, artist_id: str) -> ArtistAccount | None:
        return next((a for a in self._artists if a.id == artist_id), None)

    def _get_artist(self, artist_id: str) -> ArtistAccount:
        account = self._find_artist(artist_id)
        if account is None:
            raise NotFoundError("Artist account", artist_id)
        return account

    def _get_release(self, request_id: str) -> ReleaseRequest:
        request = self.get_release(request_id)
        if request is None:
            raise NotFoundError("Release request", request_id)
        return request

    def _get_profile_edit(self, edit_id: str) -> ProfileEditRequest:
        edit = next((e for e in self._profile_edits if e.id == edit_id), None)
        if edit is None:
            raise NotFoundError("Profile edit request", edit_id)
        return edit

    # ------------------------------------------------------------------
    # Persistence and sync

    def _commit_artists(self) -> None:
        self.repository.save_artists(self._artists)
        self._validate_session()
        self._notify(SyncTopic.ARTIST_DATA)

    def _commit_requests(self, *, remerge: bool = False) -> None:
        self.repository.save_release_requests(self._requests)
        if remerge:
            self._remerge()
        self._notify(SyncTopic.ARTIST_DATA)

    def _commit_profile_edits(self) -> None:
        self.repository.save_profile_edits(self._profile_edits)
        self._notify(SyncTopic.ARTIST_DATA)

    def _notify(self, topic: SyncTopic) -> None:
        if topic not in self._outbox:
            self._outbox.append(topic)

    def _drain_outbox(self) -> list[SyncTopic]:
        topics, self._outbox = self._outbox, []
        return topics

    def notify(self, topic: SyncTopic) -> None:
        """Tell every other session that ``topic`` changed in storage."""

        self.bus.publish(topic, origin=self.session_id)

    def _reload_artist_data(self) -> None:
        self._artists = self.repository.load_artists()
        self._moderator = self.repository.load_moderator()
        self._requests = self.repository.load_release_requests()
        self._profile_edits = self.repository.load_profile_edits()
        self._validate_session()

    def _validate_session(self) -> None:
        actor = self._actor
        if isinstance(actor, ArtistSession) and self._find_artist(actor.artist_id) is None:
            log.info("Artist session %s ended: account removed", actor.artist_id)
            self._actor = None
        elif isinstance(actor, ModeratorSession) and (
            self._moderator is None or self._moderator.username != actor.username
        ):
            self._actor = None

    def remerge(self) -> CatalogView:
        """Re-derive the catalog from persisted state."""

        with self.lock:
            return self._remerge()

    def _remerge(self) -> CatalogView:
        self._catalog = merge_catalog(
            self.base_tracks,
            self.base_albums,
            self._requests,
            self.repository.load_play_counts(),
            now=self.clock(),
            hidden_track_ids=set(self.repository.load_hidden_tracks()),
        )
        return self._catalog

    def _on_invalidation(self, topic: SyncTopic) -> None:
        with self.lock:
            if topic is SyncTopic.ARTIST_DATA:
                self._reload_artist_data()
                self._remerge()
            elif topic is SyncTopic.TRACKS:
                self._remerge()
            else:
                log.debug("Ignoring %s in release lifecycle", topic)
