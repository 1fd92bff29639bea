import json
import os
import sys
import pytest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from db import LegacyStorage, WorkoutStore
from migrate import LEGACY_STORAGE_KEY, LegacyStoreBridge, migrate

LEGACY_WORKOUTS = [
    {"id": "w1", "title": "Leg Day", "date": "2026-01-01", "userId": "u1", "muscleGroup": []},
    {"id": "w2", "title": "Arm Day", "date": "2026-01-03", "userId": "u1", "muscleGroup": []},
]


def make_store(tmp_path, payload=None):
    legacy = LegacyStorage(str(tmp_path / "legacy.db"))
    if payload is not None:
        legacy.set_item(LEGACY_STORAGE_KEY, payload)
    store = WorkoutStore(str(tmp_path / "replog.db"), legacy=legacy)
    return store, legacy


@pytest.mark.asyncio
async def test_first_load_migrates_legacy_payload(tmp_path):
    store, legacy = make_store(tmp_path, json.dumps(LEGACY_WORKOUTS))
    assert store.migrated is False
    assert await store.load() == LEGACY_WORKOUTS
    assert store.migrated is True
    assert legacy.get_item(LEGACY_STORAGE_KEY) is None


@pytest.mark.asyncio
async def test_second_run_discards_residual_payload(tmp_path):
    store, legacy = make_store(tmp_path, json.dumps(LEGACY_WORKOUTS))
    bridge = LegacyStoreBridge(legacy, store)
    assert await bridge.run() is True

    legacy.set_item(LEGACY_STORAGE_KEY, json.dumps([{"id": "other"}]))
    assert await bridge.run() is False
    assert await store.read_record() == LEGACY_WORKOUTS
    assert legacy.get_item(LEGACY_STORAGE_KEY) is None


@pytest.mark.asyncio
async def test_absent_payload_is_noop(tmp_path):
    store, legacy = make_store(tmp_path)
    assert await store.load() == []
    assert store.migrated is True
    assert await store.read_record() is None


@pytest.mark.asyncio
async def test_empty_list_payload_is_noop(tmp_path):
    store, legacy = make_store(tmp_path, "[]")
    assert await store.load() == []
    assert store.migrated is True
    assert legacy.get_item(LEGACY_STORAGE_KEY) == "[]"


@pytest.mark.asyncio
async def test_malformed_payload_retried_on_next_load(tmp_path):
    store, legacy = make_store(tmp_path, "{not json")
    assert await store.load() == []
    assert store.migrated is False

    legacy.set_item(LEGACY_STORAGE_KEY, json.dumps(LEGACY_WORKOUTS))
    assert await store.load() == LEGACY_WORKOUTS
    assert store.migrated is True


@pytest.mark.asyncio
async def test_crash_before_clearing_slot_does_not_duplicate(tmp_path, monkeypatch):
    store, legacy = make_store(tmp_path, json.dumps(LEGACY_WORKOUTS))
    real_remove = legacy.remove_item
    calls = {"n": 0}

    def flaky_remove(key):
        calls["n"] += 1
        if calls["n"] == 1:
            raise OSError("crashed")
        real_remove(key)

    monkeypatch.setattr(legacy, "remove_item", flaky_remove)

    assert await store.load() == LEGACY_WORKOUTS
    assert store.migrated is False
    assert legacy.get_item(LEGACY_STORAGE_KEY) is not None

    assert await store.load() == LEGACY_WORKOUTS
    assert store.migrated is True
    assert legacy.get_item(LEGACY_STORAGE_KEY) is None


@pytest.mark.asyncio
async def test_existing_store_wins(tmp_path):
    store, legacy = make_store(tmp_path, json.dumps(LEGACY_WORKOUTS))
    current = [{"id": "w9", "title": "Cardio", "date": "2026-02-01", "userId": "u1", "muscleGroup": []}]
    await store.write_record(current)
    assert await store.load() == current
    assert legacy.get_item(LEGACY_STORAGE_KEY) is None


@pytest.mark.asyncio
async def test_bridge_runs_once_per_store(tmp_path):
    store, legacy = make_store(tmp_path)
    await store.load()
    legacy.set_item(LEGACY_STORAGE_KEY, json.dumps(LEGACY_WORKOUTS))
    assert await store.load() == []


def test_migrate_script(tmp_path):
    legacy = LegacyStorage(str(tmp_path / "legacy.db"))
    legacy.set_item(LEGACY_STORAGE_KEY, json.dumps(LEGACY_WORKOUTS))
    assert migrate(str(tmp_path / "replog.db"), str(tmp_path / "legacy.db")) is True
    assert legacy.get_item(LEGACY_STORAGE_KEY) is None
