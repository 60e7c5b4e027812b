import json
import logging
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from .errors import PersistenceCorrupt, PersistenceWriteFailure
from .types import Record

logger = logging.getLogger(__name__)

DEFAULT_DATA_FILENAME = "users_data.txt"

_RECORDS_ADAPTER = TypeAdapter(dict[str, Record])


class Snapshot:
    """Whole-collection persistence to a single JSON document.

    The file holds one object mapping each id to its record. Every save
    rewrites the full document; there is no incremental format.
    """

    def __init__(self, path: Path):
        self.path = path

    def load(self) -> dict[str, Record]:
        if not self.path.exists():
            logger.info(f"No data file at {self.path}, starting empty")
            return {}

        try:
            content = self.path.read_bytes()
        except OSError as e:
            raise PersistenceCorrupt(self.path, str(e)) from e

        try:
            records = _RECORDS_ADAPTER.validate_json(content)
        except ValidationError as e:
            raise PersistenceCorrupt(self.path, _describe(e)) from e

        for key, record in records.items():
            if key != record.id:
                raise PersistenceCorrupt(
                    self.path, f"entry {key!r} holds a record with id {record.id!r}"
                )

        logger.info(f"Loaded {len(records)} users from {self.path}")
        return records

    def save(self, records: dict[str, Record]) -> None:
        payload = {key: record.to_json_dict() for key, record in records.items()}
        content = json.dumps(payload, ensure_ascii=False, indent=2)

        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(content, encoding="utf-8")
            tmp.replace(self.path)
        except OSError as e:
            logger.error(f"Failed to save {self.path}: {e}")
            try:
                tmp.unlink()
            except OSError:
                pass
            raise PersistenceWriteFailure(self.path, str(e)) from e

        logger.debug(f"Saved {len(records)} users to {self.path}")


def _describe(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    if location:
        return f"{location}: {first['msg']}"
    return first["msg"]
