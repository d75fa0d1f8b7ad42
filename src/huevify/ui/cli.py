from __future__ import annotations

import argparse
import logging
import sys
import threading
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from huevify.app import open_session
from huevify.config import configure_logging

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from types import FrameType

    from huevify.app import HubSession
    from huevify.domain.errors import OperationResult

log = logging.getLogger(__name__)

type SessionFactory = Callable[[], HubSession]


class CommandFailedError(RuntimeError):
    """Raised when a hub operation reports failure."""


def _add_moderator_credentials(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--username", required=True, help="Moderator username")
    parser.add_argument("--password", required=True, help="Moderator password")


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Huevify release hub")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    moderator = subparsers.add_parser("moderator", help="Moderator account commands")
    moderator_sub = moderator.add_subparsers(dest="moderator_command", required=True)
    moderator_register = moderator_sub.add_parser(
        "register", help="Create the single moderator account"
    )
    _add_moderator_credentials(moderator_register)

    artist = subparsers.add_parser("artist", help="Artist account commands")
    artist_sub = artist.add_subparsers(dest="artist_command", required=True)
    artist_register = artist_sub.add_parser("register", help="Register an artist account")
    artist_register.add_argument("--name", required=True, help="Artist display name")
    artist_register.add_argument("--username", required=True, help="Login username")
    artist_register.add_argument("--password", required=True, help="Login password")
    for decision in ("approve", "reject"):
        decide = artist_sub.add_parser(decision, help=f"{decision.capitalize()} a pending artist")
        decide.add_argument("artist_id", help="Artist account id")
        _add_moderator_credentials(decide)

    pending = subparsers.add_parser("pending", help="List items awaiting moderation")
    _add_moderator_credentials(pending)

    release = subparsers.add_parser("release", help="Release moderation commands")
    release_sub = release.add_subparsers(dest="release_command", required=True)
    for decision in ("approve", "reject"):
        decide = release_sub.add_parser(
            decision, help=f"{decision.capitalize()} a submission or deletion request"
        )
        decide.add_argument("request_id", help="Release request id")
        _add_moderator_credentials(decide)

    subparsers.add_parser("publish", help="Promote approved releases whose date has passed")
    subparsers.add_parser("tick", help="Apply due ambient plays and roll the daily chart")
    subparsers.add_parser("chart", help="Print the daily top chart")

    catalog = subparsers.add_parser("catalog", help="Print the effective catalog")
    catalog.add_argument("--hueq", type=str, help="Only show the track with this HUEQ code")

    subparsers.add_parser("serve", help="Run the background scheduler until interrupted")

    return parser.parse_args(list(argv))


def _check[T](result: OperationResult[T]) -> T | None:
    if not result.ok:
        raise CommandFailedError(result.message)
    log.info("%s", result.message)
    return result.value


def _login_moderator(session: HubSession, args: argparse.Namespace) -> None:
    _check(session.lifecycle.login_moderator(args.username, args.password))


def _print_pending(session: HubSession) -> None:
    lifecycle = session.lifecycle
    for account in lifecycle.pending_artists():
        print(f"artist\t{account.id}\t{account.artist_name}\t@{account.username}")
    for request in lifecycle.pending_releases():
        kind = "deletion" if request.deletion_requested else "release"
        print(f"{kind}\t{request.id}\t{request.artist_name}\t{request.title}\t{request.status}")
    for edit in lifecycle.pending_profile_edits():
        print(f"profile\t{edit.id}\t{edit.artist_name}")


def _print_catalog(session: HubSession, hueq: str | None) -> None:
    if hueq is not None:
        track = session.lifecycle.get_track_by_hueq(hueq)
        if track is None:
            raise CommandFailedError(f"No track with HUEQ {hueq}")
        tracks = [track]
    else:
        tracks = list(session.lifecycle.tracks)
    for track in tracks:
        print(f"{track.hueq or '-'}\t{track.id}\t{track.artist}\t{track.title}\t{track.plays}")


def _print_chart(session: HubSession) -> None:
    for position, entry in enumerate(session.accrual.daily_chart(), start=1):
        track = entry.track
        print(f"{position}\t{track.artist}\t{track.title}\t+{entry.daily_plays}")


def _serve(session: HubSession) -> None:
    stop = threading.Event()
    with session.scheduler():
        log.info("Scheduler running; press Ctrl+C to stop")
        try:
            while not stop.wait(1.0):
                pass
        except KeyboardInterrupt:
            log.info("Stopping scheduler")


def _run(session: HubSession, args: argparse.Namespace) -> None:  # noqa: C901, PLR0912
    lifecycle = session.lifecycle
    command = args.command
    if command == "moderator":
        _check(lifecycle.register_moderator(args.username, args.password))
    elif command == "artist" and args.artist_command == "register":
        account = _check(lifecycle.register_artist(args.name, args.username, args.password))
        if account is not None:
            print(account.id)
    elif command == "artist":
        _login_moderator(session, args)
        if args.artist_command == "approve":
            _check(lifecycle.approve_artist(args.artist_id))
        else:
            _check(lifecycle.reject_artist(args.artist_id))
    elif command == "pending":
        _login_moderator(session, args)
        _print_pending(session)
    elif command == "release":
        _login_moderator(session, args)
        if args.release_command == "approve":
            _check(lifecycle.approve_release(args.request_id))
        else:
            _check(lifecycle.reject_release(args.request_id))
    elif command == "publish":
        _check(lifecycle.publish_due_releases())
    elif command == "tick":
        applied = session.accrual.ambient_tick()
        _, rolled = session.accrual.refresh_chart()
        log.info("Ambient plays applied: %s; chart rolled over: %s", applied, rolled)
    elif command == "chart":
        _print_chart(session)
    elif command == "catalog":
        _print_catalog(session, args.hueq)
    elif command == "serve":
        _serve(session)
    else:
        raise ValueError(f"Unsupported command: {command}")


def main(
    argv: Sequence[str] | None = None,
    *,
    session_factory: SessionFactory = open_session,
) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        session = session_factory()
    except Exception:
        log.exception("Could not open the hub")
        sys.exit(1)

    try:
        _run(session, parsed_args)
    except CommandFailedError as exc:
        log.error("%s", exc)  # noqa: TRY400
        sys.exit(1)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)
    finally:
        session.close()


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
