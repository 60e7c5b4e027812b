import threading
from datetime import date

import pytest

from userstore.store import (
    DuplicateKey,
    ImmutableKeyViolation,
    NotFound,
    PersistenceWriteFailure,
    RecordStore,
    Role,
    UpdateIdPolicy,
)


class TestCreate:
    def test_create_returns_record(self, record):
        store = RecordStore()
        assert store.create(record) == record
        assert len(store) == 1
        assert record.id in store

    def test_create_duplicate_fails(self, record, record_factory):
        store = RecordStore()
        store.create(record)

        with pytest.raises(DuplicateKey) as exc_info:
            store.create(record_factory(full_name="Someone Else Entirely"))

        assert exc_info.value.record_id == record.id
        assert len(store) == 1
        assert store.read(record.id).full_name == "Test User Name"

    def test_read_after_create(self, record):
        store = RecordStore()
        store.create(record)
        assert store.read(record.id) == record


class TestRead:
    def test_read_missing(self):
        store = RecordStore()
        with pytest.raises(NotFound):
            store.read("00000000000")

    def test_read_all_empty(self):
        store = RecordStore()
        assert store.read_all() == {}

    def test_read_all_returns_copy(self, record, record_factory):
        store = RecordStore()
        store.create(record)
        store.create(record_factory("98765432100"))

        records = store.read_all()
        assert set(records) == {"12345678901", "98765432100"}

        records.clear()
        assert len(store) == 2


class TestUpdate:
    def test_update_replaces_every_field(self, record, record_factory):
        store = RecordStore()
        store.create(record)
        replacement = record_factory(
            full_name="Another Full Name",
            email="other.person@example.br",
            birth_date=date(1980, 1, 31),
            role=Role.Admin,
        )

        assert store.update(record.id, replacement) == replacement
        assert store.read(record.id) == replacement

    def test_update_missing(self, record):
        store = RecordStore()
        with pytest.raises(NotFound):
            store.update(record.id, record)

    def test_update_rejects_id_change_by_default(self, record, record_factory):
        store = RecordStore()
        store.create(record)

        with pytest.raises(ImmutableKeyViolation) as exc_info:
            store.update(record.id, record_factory("99999999999", full_name="Changed Name Here"))

        assert exc_info.value.new_id == "99999999999"
        assert store.read(record.id) == record
        assert "99999999999" not in store

    def test_update_ignore_policy_keeps_original_id(self, record, record_factory):
        store = RecordStore(id_policy=UpdateIdPolicy.IGNORE)
        store.create(record)

        updated = store.update(record.id, record_factory("99999999999", full_name="Changed Name Here"))

        assert updated.id == record.id
        assert updated.full_name == "Changed Name Here"
        assert store.read(record.id) == updated
        assert "99999999999" not in store
        assert len(store) == 1

    def test_policy_accepts_string(self):
        assert RecordStore(id_policy="ignore").id_policy is UpdateIdPolicy.IGNORE

    def test_unknown_policy(self):
        with pytest.raises(ValueError):
            RecordStore(id_policy="merge")


class TestDelete:
    def test_delete_then_read(self, record):
        store = RecordStore()
        store.create(record)

        store.delete(record.id)

        with pytest.raises(NotFound):
            store.read(record.id)
        assert len(store) == 0

    def test_delete_missing(self):
        store = RecordStore()
        with pytest.raises(NotFound):
            store.delete("12345678901")


class TestScenario:
    @pytest.mark.parametrize("policy", [UpdateIdPolicy.REJECT, UpdateIdPolicy.IGNORE])
    def test_duplicate_update_delete(self, policy, record, record_factory):
        store = RecordStore(id_policy=policy)
        store.create(record)

        with pytest.raises(DuplicateKey):
            store.create(record)
        assert len(store) == 1

        changed_id = record_factory("99999999999")
        if policy is UpdateIdPolicy.REJECT:
            with pytest.raises(ImmutableKeyViolation):
                store.update("12345678901", changed_id)
        else:
            assert store.update("12345678901", changed_id).id == "12345678901"

        store.delete("12345678901")
        with pytest.raises(NotFound):
            store.read("12345678901")


class TestPersistence:
    def test_open_missing_file_is_empty(self, temp_dir):
        store = RecordStore.open(temp_dir / "users_data.txt")
        assert store.read_all() == {}
        assert not (temp_dir / "users_data.txt").exists()

    def test_mutations_are_saved(self, temp_dir, record, record_factory):
        path = temp_dir / "users_data.txt"
        store = RecordStore.open(path)
        store.create(record)
        store.create(record_factory("98765432100"))
        store.update("98765432100", record_factory("98765432100", role=Role.Guest))
        store.delete(record.id)

        reopened = RecordStore.open(path)
        assert reopened.read_all() == store.read_all()
        assert reopened.read("98765432100").role is Role.Guest

    def test_failed_save_keeps_memory_change(self, temp_dir, record):
        blocker = temp_dir / "not_a_dir"
        blocker.write_text("")
        store = RecordStore.open(blocker / "users_data.txt")

        with pytest.raises(PersistenceWriteFailure):
            store.create(record)

        assert store.read(record.id) == record

    def test_failed_read_does_not_save(self, temp_dir):
        path = temp_dir / "users_data.txt"
        store = RecordStore.open(path)
        with pytest.raises(NotFound):
            store.delete("12345678901")
        assert not path.exists()

    def test_in_memory_store_has_no_path(self):
        assert RecordStore().path is None


class TestConcurrency:
    def test_concurrent_creates_keep_ids_unique(self, temp_dir, record_factory):
        store = RecordStore.open(temp_dir / "users_data.txt")
        errors = []

        def worker():
            for i in range(20):
                try:
                    store.create(record_factory(f"{i:011d}"))
                except DuplicateKey as e:
                    errors.append(e)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(store) == 20
        assert len(errors) == 60
        assert RecordStore.open(temp_dir / "users_data.txt").read_all() == store.read_all()
