"""High-level runner for one inventory-and-publish pass.

``run_once`` wires together fact collection, rendering, the snapshot store
and the Confluence client so the CLI (or a scheduler) can drive a full run
with a single call.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from hostpage.config import Settings
from hostpage.confluence.client import ConfluenceClient
from hostpage.facts import HostFacts, collect_facts
from hostpage.markup import render
from hostpage.publish.orchestrator import PublishError, PublishResult, publish_page
from hostpage.snapshot import SnapshotStore, has_changed, host_key

ClientFactory = Callable[[Settings], ConfluenceClient]


@dataclass
class RunResult:
    hostname: str
    changed: bool
    published: bool
    document: str
    publish: PublishResult | None = None


def run_once(
    settings: Settings,
    facts: HostFacts | None = None,
    client_factory: ClientFactory = ConfluenceClient.from_settings,
    dry_run: bool = False,
) -> RunResult:
    """Inventory the host and publish its page if the content changed.

    The live snapshot is promoted only after :func:`publish_page` returns,
    so a failed publish leaves it untouched and the next run retries.

    Args:
        settings: Resolved configuration.
        facts: Pre-collected facts.  Collected from the local host if ``None``.
        client_factory: Builds the Confluence client for this run.
        dry_run: Detect changes but make no remote call and promote nothing.

    Raises:
        ConfigError: If an option is malformed, or Confluence options are
            missing and a publish is due.
        SnapshotError: If the snapshot store cannot be read or written.
        PublishError: If the page could not be published.
    """
    settings.validate()
    if facts is None:
        facts = collect_facts()
    if not facts.hostname:
        raise PublishError("Hostname could not be determined; nothing to publish.")

    document = render(facts)
    store = SnapshotStore(settings.snapshot_dir)
    key = host_key(facts.hostname)
    store.write_pending(key, document)

    if settings.force_upload:
        changed = True
    else:
        changed = has_changed(document, store.read_live(key))

    result = RunResult(
        hostname=facts.hostname, changed=changed, published=False, document=document
    )
    if not changed:
        print(f"[run] {facts.hostname!r} unchanged; nothing to publish.")
        return result
    if dry_run:
        print(f"[run] {facts.hostname!r} changed (dry run, not publishing).")
        return result

    settings.validate_for_publish()
    with client_factory(settings) as client:
        result.publish = publish_page(
            client,
            hostname=facts.hostname,
            document=document,
            parent_id=settings.parent_page_id,
            labels=settings.page_labels,
        )

    store.promote(key)
    result.published = True
    print(f"[run] {facts.hostname!r} published as page {result.publish.page_id}.")
    return result
