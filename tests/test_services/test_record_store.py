"""Tests for the JSON record store."""

import asyncio
import json

import pytest

from peakbook.database import RecordStore
from peakbook.services.errors import InternalError


async def test_load_missing_file_returns_empty_list(tmp_path) -> None:
    store = RecordStore(tmp_path / "nothing.json")

    assert await store.load() == []


async def test_save_creates_parent_directories(tmp_path) -> None:
    store = RecordStore(tmp_path / "nested" / "dir" / "records.json")

    await store.save([{"id": 1}])

    assert json.loads(store.path.read_text(encoding="utf-8")) == [{"id": 1}]


async def test_round_trip_preserves_records(tmp_path) -> None:
    store = RecordStore(tmp_path / "records.json")
    records = [
        {"id": 1, "name": "Eiger", "images": ["uploads/mountains/1_1.png"], "needsEquipment": True},
        {"id": 2, "name": "Ōyama", "images": [], "needsEquipment": False},
    ]

    await store.save(records)

    assert await store.load() == records


async def test_save_leaves_no_temp_files(tmp_path) -> None:
    store = RecordStore(tmp_path / "records.json")

    await store.save([{"id": 1}])
    await store.save([{"id": 2}])

    assert sorted(p.name for p in tmp_path.iterdir()) == ["records.json"]


async def test_malformed_file_raises(tmp_path) -> None:
    path = tmp_path / "records.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(InternalError):
        await RecordStore(path).load()


async def test_non_list_file_raises(tmp_path) -> None:
    path = tmp_path / "records.json"
    path.write_text('{"id": 1}', encoding="utf-8")

    with pytest.raises(InternalError):
        await RecordStore(path).load()


async def test_transaction_saves_on_success(tmp_path) -> None:
    store = RecordStore(tmp_path / "records.json")

    async with store.transaction() as records:
        records.append({"id": 1})

    assert await store.load() == [{"id": 1}]


async def test_transaction_discards_on_error(tmp_path) -> None:
    store = RecordStore(tmp_path / "records.json")
    await store.save([{"id": 1}])

    with pytest.raises(RuntimeError):
        async with store.transaction() as records:
            records.append({"id": 2})
            raise RuntimeError("boom")

    assert await store.load() == [{"id": 1}]


async def test_concurrent_transactions_do_not_lose_updates(tmp_path) -> None:
    """Interleaved appends through separate store objects all survive."""
    path = tmp_path / "records.json"

    async def append(n: int) -> None:
        async with RecordStore(path).transaction() as records:
            await asyncio.sleep(0)
            records.append({"id": n})

    await asyncio.gather(*(append(n) for n in range(20)))

    stored = await RecordStore(path).load()
    assert sorted(r["id"] for r in stored) == list(range(20))
