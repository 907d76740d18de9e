"""hostpage CLI: entry-point for inventory and publishing.

Usage:
    python cli/main.py --help

Commands:
    run       collect, render, and publish the host page if it changed
    facts     print the collected host facts
    render    print the rendered page body
    snapshot  inspect or reset the stored change-detection baseline

Exit codes:
    0  nothing changed, page published, or dry run
    1  publish failed
    2  configuration error
    3  snapshot storage error
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from hostpage.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import dataclasses
import json
from typing import Optional

import typer

from cli.commands.snapshot import snapshot_app
from hostpage.config import ConfigError, settings
from hostpage.facts import collect_facts
from hostpage.markup import render
from hostpage.publish import PublishError, run_once
from hostpage.snapshot import SnapshotError

EXIT_PUBLISH_FAILED = 1
EXIT_CONFIG_ERROR = 2
EXIT_SNAPSHOT_ERROR = 3

app = typer.Typer(
    name="hostpage",
    help="Publish this host's inventory to a Confluence page.",
    no_args_is_help=True,
)
app.add_typer(snapshot_app, name="snapshot")


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------
@app.command("run")
def run(
    force: bool = typer.Option(False, "--force", help="Publish even if nothing changed."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Detect changes without publishing."),
    parent_id: Optional[str] = typer.Option(None, "--parent-id", help="Override the parent page ID."),
    snapshot_dir: Optional[Path] = typer.Option(None, "--snapshot-dir", help="Override the snapshot directory."),
) -> None:
    """Collect host facts and publish the page if it changed."""
    overrides: dict = {}
    if force:
        overrides["force_upload"] = True
    if parent_id:
        overrides["parent_page_id"] = parent_id
    if snapshot_dir:
        overrides["snapshot_dir"] = snapshot_dir
    run_settings = dataclasses.replace(settings, **overrides)

    facts = collect_facts()
    try:
        result = run_once(run_settings, facts=facts, dry_run=dry_run)
    except ConfigError as exc:
        typer.echo(f"[run] configuration error: {exc}", err=True)
        raise typer.Exit(EXIT_CONFIG_ERROR)
    except SnapshotError as exc:
        typer.echo(f"[run] snapshot error: {exc}", err=True)
        raise typer.Exit(EXIT_SNAPSHOT_ERROR)
    except PublishError as exc:
        typer.echo(f"[run] {exc}", err=True)
        raise typer.Exit(EXIT_PUBLISH_FAILED)

    if result.publish is not None:
        action = "created" if result.publish.created else "updated"
        typer.echo(f"[run] Page {action}: {result.publish.page_id}  title={result.hostname!r}")
        if result.publish.labels_added:
            typer.echo(f"[run] Labels added: {', '.join(result.publish.labels_added)}")
        if result.publish.labels_failed:
            typer.echo(
                f"[run] Labels not added: {', '.join(result.publish.labels_failed)}",
                err=True,
            )
            typer.echo(
                "[run] The snapshot was committed, so these labels are retried only "
                "when the page changes. Use `run --force` or `snapshot reset` to retry now.",
                err=True,
            )


# ---------------------------------------------------------------------------
# facts / render
# ---------------------------------------------------------------------------
@app.command("facts")
def facts(
    as_json: bool = typer.Option(False, "--json", help="Print as JSON."),
) -> None:
    """Print the facts collected from this host."""
    host = collect_facts()
    if as_json:
        typer.echo(json.dumps(host.as_dict(), indent=2))
        return
    for name, value in host.as_dict().items():
        typer.echo(f"  {name:<22} {'' if value is None else value}")


@app.command("render")
def render_cmd(
    escape: bool = typer.Option(False, "--escape", help="HTML-escape field values."),
) -> None:
    """Print the page body that would be published for this host."""
    typer.echo(render(collect_facts(), escape=escape), nl=False)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
