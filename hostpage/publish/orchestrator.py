"""Push a rendered host document to Confluence and reconcile its labels.

``publish_page`` is the single public function.  It finds the host's page
among the parent's children (exact, case-sensitive title match), updates it
or creates it, then adds any configured label the page is missing.  Labels
are never removed.

Any failure to list, create or update surfaces as :class:`PublishError`.
Label additions are best-effort: a failing label is reported and recorded,
and the remaining labels are still attempted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

import httpx

from hostpage.confluence.client import ConfluenceClient
from hostpage.confluence.models import PageRef


class PublishError(RuntimeError):
    """Raised when the host page could not be written."""


# Transport and HTTP failures, plus responses that are not the JSON shape
# expected (JSONDecodeError and pydantic ValidationError are ValueErrors).
_REMOTE_ERRORS = (httpx.HTTPError, ValueError, KeyError, TypeError, AttributeError)


@dataclass
class PublishResult:
    page_id: str
    created: bool
    labels_added: list[str] = field(default_factory=list)
    labels_failed: list[str] = field(default_factory=list)


def find_page(children: Iterable[PageRef], title: str) -> PageRef | None:
    """Return the first child whose title equals *title* exactly."""
    for child in children:
        if child.title == title:
            return child
    return None


def reconcile_labels(
    client: ConfluenceClient,
    page_id: str,
    labels: Iterable[str],
) -> tuple[list[str], list[str]]:
    """Add each of *labels* not already on *page_id*.

    Returns:
        ``(added, failed)`` label lists, in configured order.
    """
    present = set(client.get_labels(page_id))
    added: list[str] = []
    failed: list[str] = []
    for label in labels:
        if label in present:
            continue
        try:
            client.add_label(page_id, label)
        except httpx.HTTPError as exc:
            print(f"[labels] could not add {label!r} to page {page_id}: {exc}")
            failed.append(label)
            continue
        present.add(label)
        added.append(label)
    return added, failed


def publish_page(
    client: ConfluenceClient,
    hostname: str,
    document: str,
    parent_id: str,
    labels: Iterable[str],
) -> PublishResult:
    """Create or update the page titled *hostname* under *parent_id*.

    Args:
        client: An open Confluence client.
        hostname: Page title; matched exactly against existing children.
        document: Storage-format body; replaces the page body entirely.
        parent_id: ID of the parent page.
        labels: Labels the page must carry afterwards.

    Returns:
        A :class:`PublishResult` describing what was done.

    Raises:
        PublishError: If the page could not be listed, written, or no page
            ID came back.
    """
    try:
        existing = find_page(client.list_children(parent_id), hostname)
        if existing is not None:
            print(f"[publish] updating page {existing.id} ({hostname!r}) …")
            page_id = client.update_page(existing.id, document)
        else:
            print(f"[publish] creating page {hostname!r} under {parent_id} …")
            page_id = client.create_page(hostname, parent_id, document)
    except _REMOTE_ERRORS as exc:
        raise PublishError(f"Publishing {hostname!r} failed: {exc}") from exc

    if not page_id:
        raise PublishError(f"Publishing {hostname!r} failed: no page ID returned.")

    try:
        added, failed = reconcile_labels(client, page_id, labels)
    except _REMOTE_ERRORS as exc:
        raise PublishError(f"Reading labels of page {page_id} failed: {exc}") from exc

    return PublishResult(
        page_id=page_id,
        created=existing is None,
        labels_added=added,
        labels_failed=failed,
    )
