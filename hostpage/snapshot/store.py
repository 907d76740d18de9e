"""Two-slot, file-based snapshot storage.

Each host owns two plain-text files under the snapshot root::

    <root>/<host_key>.live.txt      last successfully published document
    <root>/<host_key>.pending.txt   document rendered by the current run

The pending slot is rewritten on every run and only replaces the live slot
through :meth:`SnapshotStore.promote`, after a publish has succeeded.

No locking is done: runs for the same host must not overlap.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

# Stored in the live slot before any real publish.  Never produced by the
# renderer, so the first comparison always reports a change.
SNAPSHOT_SENTINEL = "__hostpage_no_snapshot__\n"

_UNSAFE_KEY_CHARS = re.compile(r"[^a-z0-9._-]")


class SnapshotError(RuntimeError):
    """Raised when a snapshot slot cannot be read or written."""


def host_key(hostname: str) -> str:
    """Derive a filesystem-safe storage key from *hostname*."""
    key = _UNSAFE_KEY_CHARS.sub("_", hostname.strip().lower())
    if not key.strip("._"):
        raise SnapshotError(f"Cannot derive a snapshot key from hostname {hostname!r}")
    return key


class SnapshotStore:
    """Live/pending document slots for each host under *root*."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------
    def live_path(self, key: str) -> Path:
        return self.root / f"{key}.live.txt"

    def pending_path(self, key: str) -> Path:
        return self.root / f"{key}.pending.txt"

    # ------------------------------------------------------------------
    # Slot operations
    # ------------------------------------------------------------------
    def read_live(self, key: str) -> str:
        """Return the live document, seeding the slot with the sentinel if absent."""
        path = self.live_path(key)
        try:
            if not path.exists():
                self._write(path, SNAPSHOT_SENTINEL)
                return SNAPSHOT_SENTINEL
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise SnapshotError(f"Cannot read live snapshot {path}: {exc}") from exc

    def peek_live(self, key: str) -> str | None:
        """Return the live slot as stored, or ``None``.  Never seeds it."""
        return self._read_optional(self.live_path(key), "live")

    def read_pending(self, key: str) -> str | None:
        """Return the pending document, or ``None`` if there is none."""
        return self._read_optional(self.pending_path(key), "pending")

    def write_pending(self, key: str, document: str) -> None:
        path = self.pending_path(key)
        try:
            self._write(path, document)
        except (OSError, UnicodeEncodeError) as exc:
            raise SnapshotError(f"Cannot write pending snapshot {path}: {exc}") from exc

    def promote(self, key: str) -> None:
        """Make the pending document the live one.

        ``os.replace`` swaps the files atomically, so the old live document
        survives untouched until the pending one is fully on disk.
        """
        pending = self.pending_path(key)
        live = self.live_path(key)
        try:
            if not pending.exists():
                raise SnapshotError(f"No pending snapshot to promote for {key!r}")
            os.replace(pending, live)
        except OSError as exc:
            raise SnapshotError(f"Cannot promote snapshot {pending} -> {live}: {exc}") from exc

    def reset(self, key: str) -> bool:
        """Delete both slots for *key*.  Returns ``True`` if anything was removed."""
        removed = False
        for path in (self.live_path(key), self.pending_path(key)):
            try:
                path.unlink()
                removed = True
            except FileNotFoundError:
                continue
            except OSError as exc:
                raise SnapshotError(f"Cannot delete snapshot {path}: {exc}") from exc
        return removed

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _read_optional(self, path: Path, slot: str) -> str | None:
        try:
            if not path.exists():
                return None
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise SnapshotError(f"Cannot read {slot} snapshot {path}: {exc}") from exc

    def _write(self, path: Path, text: str) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="\n") as fh:
            fh.write(text)
            fh.flush()
            os.fsync(fh.fileno())
