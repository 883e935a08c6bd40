"""CRUD over the mountain collection."""

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Any

from peakbook.database import Record, RecordStore
from peakbook.models.mountain import Mountain
from peakbook.services.errors import NotFoundError, ValidationError
from peakbook.services.identity import next_mountain_id

logger = logging.getLogger(__name__)

SEQUENCE_NAME = "mountains"


class MountainStore:
    """Mountains persisted as a JSON list and keyed by integer id.

    The store never touches image files; callers commit uploads before
    inserting and purge the paths returned by ``delete``.
    """

    def __init__(self, records: RecordStore, sequences: RecordStore) -> None:
        self.records = records
        self.sequences = sequences

    async def all(self) -> list[Mountain]:
        return [Mountain.model_validate(r) for r in await self.records.load()]

    async def find_by_id(self, mountain_id: int) -> Mountain | None:
        for record in await self.records.load():
            if record.get("id") == mountain_id:
                return Mountain.model_validate(record)
        return None

    @asynccontextmanager
    async def hold(self, mountain_id: int) -> AsyncIterator[Mountain]:
        """Lock the mountain collection and yield one mountain; it cannot be deleted meanwhile.

        Raises:
            NotFoundError: If no mountain has that id.
        """
        async with self.records.locked() as records:
            for record in records:
                if record.get("id") == mountain_id:
                    yield Mountain.model_validate(record)
                    return
            raise NotFoundError("Mountain not found.")

    async def insert(self, build: Callable[[int], Mountain]) -> Mountain:
        """Allocate the next id, build the mountain with it and append it.

        ``build`` receives the new id and must return a mountain with at least
        one image already committed under that id.

        Raises:
            ValidationError: If the built mountain has no images.
        """
        async with self.records.transaction() as records, self.sequences.transaction() as seqs:
            counter = _sequence(seqs)
            new_id = next_mountain_id(records, floor=counter["lastId"])
            mountain = build(new_id)
            if mountain.id != new_id:
                raise ValueError(f"Mountain built with id {mountain.id}, expected {new_id}")
            if not mountain.images:
                raise ValidationError("At least one image is required.")
            records.append(mountain.to_record())
            counter["lastId"] = new_id
        logger.info("Created mountain %d (%s)", mountain.id, mountain.name)
        return mountain

    async def update(self, mountain_id: int, mutator: Callable[[Mountain], Any]) -> Mountain:
        """Apply ``mutator`` to the mountain with ``mountain_id`` and persist it.

        Raises:
            NotFoundError: If no mountain has that id.
        """
        async with self.records.transaction() as records:
            for index, record in enumerate(records):
                if record.get("id") == mountain_id:
                    mountain = Mountain.model_validate(record)
                    mutator(mountain)
                    records[index] = mountain.to_record()
                    return mountain
            raise NotFoundError("Mountain not found.")

    async def delete(
        self,
        mountain_id: int,
        guard: Callable[[Mountain], Any] | None = None,
    ) -> list[str]:
        """Remove a mountain and return the image paths the caller must purge.

        ``guard`` runs on the record before removal; raising from it aborts the
        delete.

        Raises:
            NotFoundError: If no mountain has that id.
        """
        async with self.records.transaction() as records:
            for index, record in enumerate(records):
                if record.get("id") == mountain_id:
                    mountain = Mountain.model_validate(record)
                    if guard is not None:
                        guard(mountain)
                    del records[index]
                    break
            else:
                raise NotFoundError("Mountain not found.")
        logger.info("Deleted mountain %d", mountain_id)
        return list(mountain.images)


def _sequence(seqs: list[Record]) -> Record:
    for entry in seqs:
        if entry.get("name") == SEQUENCE_NAME:
            return entry
    entry = {"name": SEQUENCE_NAME, "lastId": 0}
    seqs.append(entry)
    return entry
