"""Batch snapshot storage."""

import logging
from datetime import date

from stockprofit.errors import SerializationError, StorageWriteError
from stockprofit.models.position import Batch

from .objects import ObjectStore, ObjectStoreError


logger = logging.getLogger(__name__)


def format_snapshot_key(template: str, day: date) -> str:
    """Build the object key for a snapshot.

    The template may use ``{year}``, ``{month}``, ``{day}`` and ``{date}``
    (e.g. ``stock/{year}/{month:02d}.json``).
    """
    try:
        return template.format(
            year=day.year,
            month=day.month,
            day=day.day,
            date=day.isoformat(),
        )
    except (KeyError, IndexError, ValueError) as e:
        raise StorageWriteError(f"Invalid snapshot key template {template!r}: {e}") from e


def serialize_batch(batch: Batch) -> bytes:
    try:
        return batch.to_json()
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Failed to serialize batch: {e}") from e


class SnapshotStorage:
    """Writes batch snapshots to object storage."""

    def __init__(self, store: ObjectStore, bucket: str, key_template: str):
        self.store = store
        self.bucket = bucket
        self.key_template = key_template

    def write(self, payload: bytes, day: date) -> str:
        """Write a serialized batch and return its key.

        Raises:
            StorageWriteError: If the key can't be built or the write fails
        """
        key = format_snapshot_key(self.key_template, day)
        try:
            self.store.put(self.bucket, key, payload)
        except ObjectStoreError as e:
            raise StorageWriteError(str(e)) from e

        logger.info(f"Snapshot written: {self.bucket}/{key} ({len(payload)} bytes)")
        return key

    def read(self, day: date) -> Batch:
        key = format_snapshot_key(self.key_template, day)
        return Batch.from_json(self.store.get(self.bucket, key))
