"""Snapshot commands for inspecting the change-detection baseline."""

from __future__ import annotations

from typing import Optional

import typer

from hostpage.config import settings
from hostpage.facts import local_hostname
from hostpage.snapshot import SNAPSHOT_SENTINEL, SnapshotError, SnapshotStore, host_key

snapshot_app = typer.Typer(help="Inspect or reset stored snapshots.", no_args_is_help=True)


def _resolve(host: Optional[str]) -> tuple[SnapshotStore, str]:
    try:
        key = host_key(host or local_hostname())
    except SnapshotError as exc:
        typer.echo(f"❌ {exc}", err=True)
        raise typer.Exit(code=3)
    return SnapshotStore(settings.snapshot_dir), key


@snapshot_app.command("show")
def snapshot_show(
    host: Optional[str] = typer.Option(None, "--host", help="Hostname (defaults to this host)."),
    pending: bool = typer.Option(False, "--pending", help="Show the pending slot instead of live."),
) -> None:
    """Print the stored document for a host."""
    store, key = _resolve(host)
    try:
        document = store.read_pending(key) if pending else store.peek_live(key)
    except SnapshotError as exc:
        typer.echo(f"❌ {exc}", err=True)
        raise typer.Exit(code=3)

    if document is None or document == SNAPSHOT_SENTINEL:
        slot = "pending" if pending else "live"
        typer.echo(f"No {slot} snapshot for {key!r}.")
        return
    typer.echo(document, nl=False)


@snapshot_app.command("reset")
def snapshot_reset(
    host: Optional[str] = typer.Option(None, "--host", help="Hostname (defaults to this host)."),
) -> None:
    """Delete a host's snapshots so the next run publishes unconditionally."""
    store, key = _resolve(host)
    try:
        removed = store.reset(key)
    except SnapshotError as exc:
        typer.echo(f"❌ {exc}", err=True)
        raise typer.Exit(code=3)
    if removed:
        typer.echo(f"🗑️ Snapshots for {key!r} removed.")
    else:
        typer.echo(f"No snapshots stored for {key!r}.")
