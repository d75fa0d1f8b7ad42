"""Error taxonomy and the result type returned by hub actions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class ErrorKind(StrEnum):
    VALIDATION = "validation"
    STATE_CONFLICT = "state_conflict"
    NOT_FOUND = "not_found"
    AUTH_FAILURE = "auth_failure"


class HubError(Exception):
    """Base class for failures reported back to the caller as an ``OperationResult``."""

    kind: ErrorKind = ErrorKind.VALIDATION


class ValidationError(HubError):
    kind = ErrorKind.VALIDATION


class DuplicateUsernameError(ValidationError):
    def __init__(self, username: str) -> None:
        super().__init__(f"Username '{username}' is already taken")
        self.username = username


class CatalogCodeExhaustedError(ValidationError):
    """Raised when no free catalog code was found within the retry budget."""


class StateConflictError(HubError):
    kind = ErrorKind.STATE_CONFLICT


class ModeratorExistsError(StateConflictError):
    def __init__(self) -> None:
        super().__init__("A moderator account already exists")


class NotFoundError(HubError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, entity: str, entity_id: str) -> None:
        super().__init__(f"{entity} '{entity_id}' not found")
        self.entity = entity
        self.entity_id = entity_id


class AuthFailureError(HubError):
    kind = ErrorKind.AUTH_FAILURE


class InvalidCredentialsError(AuthFailureError):
    def __init__(self) -> None:
        super().__init__("Invalid username or password")


class AccountPendingError(AuthFailureError):
    def __init__(self) -> None:
        super().__init__("Your artist account is still awaiting moderator approval")


class AccountRejectedError(AuthFailureError):
    def __init__(self) -> None:
        super().__init__("Your artist account was rejected by the moderator")


class NotAuthorizedError(AuthFailureError):
    """Raised when the session lacks the role an action requires."""


@dataclass(frozen=True, slots=True)
class OperationResult[T]:
    """Outcome of a hub action; failures carry the originating ``HubError``."""

    ok: bool
    message: str
    value: T | None = None
    error: HubError | None = None
    changed: bool = True

    @classmethod
    def success(
        cls, message: str, value: T | None = None, *, changed: bool = True
    ) -> OperationResult[T]:
        return cls(ok=True, message=message, value=value, changed=changed)

    @classmethod
    def failure(cls, error: HubError) -> OperationResult[T]:
        return cls(ok=False, message=str(error), error=error, changed=False)

    @property
    def kind(self) -> ErrorKind | None:
        return self.error.kind if self.error is not None else None
