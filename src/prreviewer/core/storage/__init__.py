"""Relational storage: engine, transactions and error classification."""
from .database import (
    SERIALIZABLE,
    Base,
    Database,
    get_db,
    init_db,
)
from .errors import StoreErrorKind, classify_error, is_transient

__all__ = [
    "Base",
    "Database",
    "get_db",
    "init_db",
    "SERIALIZABLE",
    "StoreErrorKind",
    "classify_error",
    "is_transient",
]
