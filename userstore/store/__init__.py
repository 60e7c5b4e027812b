"""Record store: keyed collection, CRUD operations and snapshot persistence."""

from .errors import (
    DuplicateKey,
    ImmutableKeyViolation,
    NotFound,
    PersistenceCorrupt,
    PersistenceError,
    PersistenceWriteFailure,
    StoreError,
)
from .snapshot import DEFAULT_DATA_FILENAME, Snapshot
from .store import RecordStore, UpdateIdPolicy
from .types import Record, Role

__all__ = [
    "DEFAULT_DATA_FILENAME",
    "DuplicateKey",
    "ImmutableKeyViolation",
    "NotFound",
    "PersistenceCorrupt",
    "PersistenceError",
    "PersistenceWriteFailure",
    "Record",
    "RecordStore",
    "Role",
    "Snapshot",
    "StoreError",
    "UpdateIdPolicy",
]
