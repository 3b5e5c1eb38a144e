"""Domain errors raised by the assignment engine and the query facade.

Every error carries a closed ErrorKind, used by the retry coordinator to
decide whether to try again, and a stable code, used by the HTTP layer.
"""
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Kind of failure, independent of how it is represented."""
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    CONFLICT = "conflict"
    TRANSIENT = "transient"
    CANCELED = "canceled"
    INTERNAL = "internal"


class PRReviewerError(Exception):
    """Base class for all prreviewer errors."""

    kind: ErrorKind = ErrorKind.INTERNAL
    code: str = "INTERNAL"
    default_message: str = "internal error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(PRReviewerError):
    kind = ErrorKind.NOT_FOUND
    code = "NOT_FOUND"
    default_message = "resource not found"


class TeamNotFoundError(NotFoundError):
    default_message = "team not found"


class UserNotFoundError(NotFoundError):
    default_message = "user not found"


class PullRequestNotFoundError(NotFoundError):
    default_message = "pull request not found"


class AlreadyExistsError(PRReviewerError):
    kind = ErrorKind.ALREADY_EXISTS
    code = "ALREADY_EXISTS"
    default_message = "resource already exists"


class TeamExistsError(AlreadyExistsError):
    code = "TEAM_EXISTS"
    default_message = "team_name already exists"


class PullRequestExistsError(AlreadyExistsError):
    code = "PR_EXISTS"
    default_message = "PR id already exists"


class ConflictError(PRReviewerError):
    kind = ErrorKind.CONFLICT
    code = "CONFLICT"
    default_message = "conflict"


class PullRequestMergedError(ConflictError):
    code = "PR_MERGED"
    default_message = "cannot reassign on merged PR"


class ReviewerNotAssignedError(ConflictError):
    code = "NOT_ASSIGNED"
    default_message = "reviewer is not assigned to this PR"


class NoCandidateError(ConflictError):
    code = "NO_CANDIDATE"
    default_message = "no active replacement candidate in team"


class TransientStoreError(PRReviewerError):
    """Store-level contention; retried, surfaced once attempts run out."""

    kind = ErrorKind.TRANSIENT
    code = "RETRY_EXHAUSTED"
    default_message = "operation kept conflicting with concurrent updates"


class OperationCanceledError(PRReviewerError):
    """The caller's deadline expired before the operation finished."""

    kind = ErrorKind.CANCELED
    code = "CANCELED"
    default_message = "operation canceled"


class InternalStoreError(PRReviewerError):
    """Unclassified storage fault."""

    kind = ErrorKind.INTERNAL
    code = "INTERNAL"
    default_message = "internal error"
