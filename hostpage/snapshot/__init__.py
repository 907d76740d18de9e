"""Snapshot package: change-detection baseline per host."""

from hostpage.snapshot.detector import content_digest, has_changed
from hostpage.snapshot.store import (
    SNAPSHOT_SENTINEL,
    SnapshotError,
    SnapshotStore,
    host_key,
)

__all__ = [
    "content_digest",
    "has_changed",
    "host_key",
    "SNAPSHOT_SENTINEL",
    "SnapshotError",
    "SnapshotStore",
]
