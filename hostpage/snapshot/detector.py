"""Change detection between a freshly rendered document and the live snapshot."""

from __future__ import annotations

import hashlib

from hostpage.snapshot.store import SNAPSHOT_SENTINEL


def normalise(document: str) -> str:
    """Unify line endings and drop trailing newlines."""
    return document.replace("\r\n", "\n").replace("\r", "\n").rstrip("\n")


def content_digest(document: str) -> str:
    """Return the SHA-256 hex digest of the normalised *document*."""
    return hashlib.sha256(normalise(document).encode("utf-8")).hexdigest()


def has_changed(new_document: str, live: str) -> bool:
    """Return ``True`` if *new_document* differs from the *live* snapshot.

    A *live* value equal to the sentinel (no prior publish) always counts as
    changed.
    """
    if live == SNAPSHOT_SENTINEL:
        return True
    return content_digest(new_document) != content_digest(live)
