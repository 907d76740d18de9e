"""Thin Confluence REST (v1) client.

One :class:`ConfluenceClient` is built per run from configuration and passed
explicitly to whoever needs it; there is no module-level session.

Authentication
--------------
``user`` set
    HTTP basic auth with ``user`` / ``token`` (Confluence Cloud API tokens).
``user`` empty
    ``Authorization: Bearer <token>`` (Data Center personal access tokens).

Every call raises :class:`httpx.HTTPStatusError` on a 4xx/5xx response and
other :class:`httpx.HTTPError` subclasses on transport failures.
"""

from __future__ import annotations

from typing import Any, Iterator

import httpx

from hostpage.config import Settings
from hostpage.confluence.models import Label, PageRef

_PAGE_SIZE = 100


class ConfluenceClient:
    """Page and label operations against a single Confluence instance."""

    def __init__(
        self,
        base_url: str,
        token: str,
        user: str = "",
        space_key: str = "",
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        headers = {"Accept": "application/json"}
        auth: tuple[str, str] | None = None
        if user:
            auth = (user, token)
        else:
            headers["Authorization"] = f"Bearer {token}"

        self._space_key = space_key
        self._http = httpx.Client(
            base_url=base_url.rstrip("/"),
            headers=headers,
            auth=auth,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> ConfluenceClient:
        return cls(
            base_url=settings.confluence_base_url,
            token=settings.confluence_token,
            user=settings.confluence_user,
            space_key=settings.confluence_space_key,
            timeout=settings.request_timeout,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> ConfluenceClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        response = self._http.request(method, path, **kwargs)
        response.raise_for_status()
        return response

    def _space_for(self, parent_id: str) -> str:
        """Return the configured space key, or the parent page's space."""
        if not self._space_key:
            data = self._request(
                "GET", f"/rest/api/content/{parent_id}", params={"expand": "space"}
            ).json()
            self._space_key = data["space"]["key"]
        return self._space_key

    def _paginate(self, path: str) -> Iterator[dict[str, Any]]:
        """Yield every item of a paged listing, following ``_links.next``."""
        start = 0
        while True:
            data = self._request(
                "GET", path, params={"start": start, "limit": _PAGE_SIZE}
            ).json()
            results = data.get("results", [])
            yield from results
            if not results or "next" not in data.get("_links", {}):
                return
            start += len(results)

    @staticmethod
    def _storage_body(body: str) -> dict[str, Any]:
        return {"storage": {"value": body, "representation": "storage"}}

    # ------------------------------------------------------------------
    # Pages
    # ------------------------------------------------------------------
    def list_children(self, parent_id: str) -> list[PageRef]:
        """Return every direct child page of *parent_id*, following pagination."""
        return [
            PageRef.model_validate(item)
            for item in self._paginate(f"/rest/api/content/{parent_id}/child/page")
        ]

    def create_page(self, title: str, parent_id: str, body: str) -> str | None:
        """Create a child page of *parent_id* and return the new page ID."""
        payload = {
            "type": "page",
            "title": title,
            "space": {"key": self._space_for(parent_id)},
            "ancestors": [{"id": parent_id}],
            "body": self._storage_body(body),
        }
        data = self._request("POST", "/rest/api/content", json=payload).json()
        return data.get("id")

    def update_page(self, page_id: str, body: str) -> str | None:
        """Replace the body of *page_id*, keeping its title.

        Confluence requires the next version number, so the current one is
        read first.
        """
        current = self._request(
            "GET", f"/rest/api/content/{page_id}", params={"expand": "version"}
        ).json()
        payload = {
            "id": page_id,
            "type": "page",
            "title": current["title"],
            "version": {"number": current["version"]["number"] + 1},
            "body": self._storage_body(body),
        }
        data = self._request("PUT", f"/rest/api/content/{page_id}", json=payload).json()
        return data.get("id")

    # ------------------------------------------------------------------
    # Labels
    # ------------------------------------------------------------------
    def get_labels(self, page_id: str) -> list[str]:
        """Return the names of every label on *page_id*, following pagination."""
        return [
            Label.model_validate(item).name
            for item in self._paginate(f"/rest/api/content/{page_id}/label")
        ]

    def add_label(self, page_id: str, label: str) -> None:
        self._request(
            "POST",
            f"/rest/api/content/{page_id}/label",
            json=[Label(name=label).model_dump()],
        )
