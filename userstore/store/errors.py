from pathlib import Path


class StoreError(Exception):
    pass


class DuplicateKey(StoreError):
    record_id: str

    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__(f"A user with ID {record_id} already exists")


class NotFound(StoreError):
    record_id: str

    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__(f"User not found: {record_id}")


class ImmutableKeyViolation(StoreError):
    record_id: str
    new_id: str

    def __init__(self, record_id: str, new_id: str):
        self.record_id = record_id
        self.new_id = new_id
        super().__init__(f"The ID of user {record_id} cannot be changed (got {new_id})")


class PersistenceError(StoreError):
    path: Path
    reason: str

    def __init__(self, message: str, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(message)


class PersistenceCorrupt(PersistenceError):
    def __init__(self, path: Path, reason: str):
        super().__init__(f"Data file {path} is corrupt: {reason}", path, reason)


class PersistenceWriteFailure(PersistenceError):
    def __init__(self, path: Path, reason: str):
        super().__init__(f"Failed to save data file {path}: {reason}", path, reason)
