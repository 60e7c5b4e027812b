import logging
import threading
from enum import Enum
from pathlib import Path

from .errors import DuplicateKey, ImmutableKeyViolation, NotFound
from .snapshot import Snapshot
from .types import Record

logger = logging.getLogger(__name__)


class UpdateIdPolicy(str, Enum):
    """What update does when the submitted record carries a different id."""
    REJECT = "reject"
    IGNORE = "ignore"


class RecordStore:
    """Keyed collection of records behind a single lock.

    Every operation holds the collection lock for its whole in-memory effect,
    so no caller sees a half-applied change. Mutations are followed by a full
    snapshot save once the collection lock has been released; saves are
    serialized among themselves and an older snapshot never replaces a newer
    one. A failed save leaves the in-memory change in place and raises
    PersistenceWriteFailure.

    Callers only ever get copies of stored records.
    """

    def __init__(
        self,
        records: dict[str, Record] | None = None,
        snapshot: Snapshot | None = None,
        id_policy: UpdateIdPolicy | str = UpdateIdPolicy.REJECT,
    ):
        self._records: dict[str, Record] = dict(records or {})
        self._lock = threading.Lock()
        self._snapshot = snapshot
        self._save_lock = threading.Lock()
        self._generation = 0
        self._saved_generation = 0
        self.id_policy = UpdateIdPolicy(id_policy)

    @classmethod
    def open(cls, path: Path, id_policy: UpdateIdPolicy | str = UpdateIdPolicy.REJECT) -> "RecordStore":
        """Build a store from the snapshot at path, empty if the file is missing.

        Raises PersistenceCorrupt if the file exists but cannot be read back.
        """
        snapshot = Snapshot(Path(path))
        return cls(snapshot.load(), snapshot=snapshot, id_policy=id_policy)

    @property
    def path(self) -> Path | None:
        return self._snapshot.path if self._snapshot else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, record_id: str) -> bool:
        with self._lock:
            return record_id in self._records

    def create(self, record: Record) -> Record:
        with self._lock:
            if record.id in self._records:
                raise DuplicateKey(record.id)
            stored = record.model_copy()
            self._records[record.id] = stored
            pending = self._pending_snapshot()

        logger.info(f"Created user {record.id}")
        self._save(pending)
        return stored.model_copy()

    def read(self, record_id: str) -> Record:
        with self._lock:
            record = self._records.get(record_id)
            if record is None:
                raise NotFound(record_id)
            return record.model_copy()

    def read_all(self) -> dict[str, Record]:
        with self._lock:
            return {key: record.model_copy() for key, record in self._records.items()}

    def update(self, record_id: str, new_record: Record) -> Record:
        with self._lock:
            if record_id not in self._records:
                raise NotFound(record_id)

            if new_record.id != record_id:
                if self.id_policy == UpdateIdPolicy.REJECT:
                    raise ImmutableKeyViolation(record_id, new_record.id)
                logger.info(f"Ignoring id change {record_id} -> {new_record.id}")
                new_record = new_record.model_copy(update={"id": record_id})

            stored = new_record.model_copy()
            self._records[record_id] = stored
            pending = self._pending_snapshot()

        logger.info(f"Updated user {record_id}")
        self._save(pending)
        return stored.model_copy()

    def delete(self, record_id: str) -> None:
        with self._lock:
            if self._records.pop(record_id, None) is None:
                raise NotFound(record_id)
            pending = self._pending_snapshot()

        logger.info(f"Deleted user {record_id}")
        self._save(pending)

    def save(self) -> None:
        """Write the current collection to the snapshot file."""
        with self._lock:
            pending = self._pending_snapshot()
        self._save(pending)

    def _pending_snapshot(self) -> tuple[int, dict[str, Record]]:
        # Caller holds self._lock.
        self._generation += 1
        return self._generation, dict(self._records)

    def _save(self, pending: tuple[int, dict[str, Record]]) -> None:
        if self._snapshot is None:
            return

        generation, records = pending
        with self._save_lock:
            if generation <= self._saved_generation:
                logger.debug(f"Skipping stale snapshot {generation}")
                return
            self._snapshot.save(records)
            self._saved_generation = generation
