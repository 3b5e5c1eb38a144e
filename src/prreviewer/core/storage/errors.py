"""Classification of raw storage exceptions into a closed set of kinds.

Drivers surface the same condition in different shapes: asyncpg and
psycopg expose a SQLSTATE code on the wrapped DBAPI error, while SQLite
only offers a message. Everything above the storage layer dispatches on
StoreErrorKind instead of inspecting exceptions itself.
"""
from enum import Enum
from typing import Optional

from sqlalchemy import exc as sa_exc

SQLSTATE_SERIALIZATION_FAILURE = "40001"
SQLSTATE_DEADLOCK_DETECTED = "40P01"
SQLSTATE_UNIQUE_VIOLATION = "23505"
SQLSTATE_FOREIGN_KEY_VIOLATION = "23503"


class StoreErrorKind(str, Enum):
    """Kind of a storage-level failure."""
    SERIALIZATION = "serialization"
    TRANSACTION_CLOSED = "transaction_closed"
    UNIQUE_VIOLATION = "unique_violation"
    FOREIGN_KEY_VIOLATION = "foreign_key_violation"
    OTHER = "other"


TRANSIENT_KINDS = frozenset({
    StoreErrorKind.SERIALIZATION,
    StoreErrorKind.TRANSACTION_CLOSED,
    StoreErrorKind.UNIQUE_VIOLATION,
})


def _sqlstate(error: BaseException) -> Optional[str]:
    """Find a SQLSTATE code on the DBAPI error or its driver cause."""
    candidates = [error, getattr(error, "orig", None)]
    orig = getattr(error, "orig", None)
    if orig is not None:
        candidates.append(getattr(orig, "__cause__", None))

    for candidate in candidates:
        if candidate is None:
            continue
        for attr in ("sqlstate", "pgcode"):
            code = getattr(candidate, attr, None)
            if isinstance(code, str) and code:
                return code
    return None


def _sqlite_kind(message: str) -> Optional[StoreErrorKind]:
    message = message.lower()
    if "is locked" in message or "database is busy" in message:
        return StoreErrorKind.SERIALIZATION
    if "unique constraint failed" in message:
        return StoreErrorKind.UNIQUE_VIOLATION
    if "foreign key constraint failed" in message:
        return StoreErrorKind.FOREIGN_KEY_VIOLATION
    return None


def classify_error(error: BaseException) -> StoreErrorKind:
    """Map a raw exception raised by SQLAlchemy or a driver to a kind.

    Args:
        error: Exception raised while talking to the store

    Returns:
        StoreErrorKind, OTHER when nothing more specific applies
    """
    if isinstance(error, sa_exc.ResourceClosedError):
        return StoreErrorKind.TRANSACTION_CLOSED
    if isinstance(error, sa_exc.InvalidRequestError) and "transaction" in str(error).lower():
        # e.g. "This transaction is inactive" / "transaction is closed"
        return StoreErrorKind.TRANSACTION_CLOSED

    code = _sqlstate(error)
    if code in (SQLSTATE_SERIALIZATION_FAILURE, SQLSTATE_DEADLOCK_DETECTED):
        return StoreErrorKind.SERIALIZATION
    if code == SQLSTATE_UNIQUE_VIOLATION:
        return StoreErrorKind.UNIQUE_VIOLATION
    if code == SQLSTATE_FOREIGN_KEY_VIOLATION:
        return StoreErrorKind.FOREIGN_KEY_VIOLATION

    if isinstance(error, sa_exc.DBAPIError):
        kind = _sqlite_kind(str(error.orig))
        if kind is not None:
            return kind

    return StoreErrorKind.OTHER


def is_transient(kind: StoreErrorKind) -> bool:
    """Whether an operation failing with this kind may succeed on retry."""
    return kind in TRANSIENT_KINDS
