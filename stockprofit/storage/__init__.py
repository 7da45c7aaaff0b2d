"""Storage layer for position lists and batch snapshots."""

from .objects import (
    LocalObjectStore,
    ObjectNotFoundError,
    ObjectStore,
    ObjectStoreError,
    S3ObjectStore,
)
from .snapshot import SnapshotStorage, format_snapshot_key, serialize_batch

__all__ = [
    "LocalObjectStore",
    "ObjectNotFoundError",
    "ObjectStore",
    "ObjectStoreError",
    "S3ObjectStore",
    "SnapshotStorage",
    "format_snapshot_key",
    "serialize_batch",
]
