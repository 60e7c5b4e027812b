import tempfile
from datetime import date
from pathlib import Path

import pytest

from userstore.store import Record, Role


@pytest.fixture
def temp_dir():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def isolated_config(temp_dir, monkeypatch):
    cache_dir = temp_dir / "cache"
    config_dir = temp_dir / "config"
    data_dir = temp_dir / "data"
    cache_dir.mkdir()
    config_dir.mkdir()
    data_dir.mkdir()

    monkeypatch.setenv("XDG_CACHE_HOME", str(cache_dir))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_dir))
    monkeypatch.setenv("XDG_DATA_HOME", str(data_dir))

    return {"cache": cache_dir, "config": config_dir, "data": data_dir}


def make_record(record_id: str = "12345678901", **overrides) -> Record:
    fields = {
        "id": record_id,
        "full_name": "Test User Name",
        "email": "person.one@example.com",
        "birth_date": date(1995, 5, 15),
        "role": Role.User,
    }
    fields.update(overrides)
    return Record(**fields)


@pytest.fixture
def record_factory():
    return make_record


@pytest.fixture
def record():
    return make_record()
