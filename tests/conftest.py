"""Shared fixtures: an in-memory Confluence stand-in and sample host facts."""

from __future__ import annotations

import itertools

import httpx
import pytest

from hostpage.config import Settings
from hostpage.confluence.models import PageRef
from hostpage.facts import HostFacts


class FakeConfluence:
    """Records calls and keeps pages in a dict, mimicking ``ConfluenceClient``."""

    def __init__(self, parent_id: str = "100") -> None:
        self.parent_id = parent_id
        self.pages: dict[str, dict] = {}
        self.calls: list[tuple] = []
        self.fail_listing = False
        self.no_id = False
        self.failing_labels: set[str] = set()
        self._ids = itertools.count(1000)

    # Test helpers ------------------------------------------------------
    def add_existing(self, title: str, labels: list[str] | None = None) -> str:
        page_id = str(next(self._ids))
        self.pages[page_id] = {
            "title": title,
            "parent": self.parent_id,
            "body": "",
            "labels": list(labels or []),
        }
        return page_id

    def remote_calls(self, name: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == name]

    # Client surface ----------------------------------------------------
    def __enter__(self) -> FakeConfluence:
        return self

    def __exit__(self, *exc_info) -> None:
        self.calls.append(("close",))

    def list_children(self, parent_id: str) -> list[PageRef]:
        self.calls.append(("list_children", parent_id))
        if self.fail_listing:
            raise httpx.ConnectError("connection refused")
        return [
            PageRef(id=pid, title=page["title"])
            for pid, page in self.pages.items()
            if page["parent"] == parent_id
        ]

    def create_page(self, title: str, parent_id: str, body: str) -> str | None:
        self.calls.append(("create_page", title, parent_id))
        if self.no_id:
            return None
        page_id = str(next(self._ids))
        self.pages[page_id] = {"title": title, "parent": parent_id, "body": body, "labels": []}
        return page_id

    def update_page(self, page_id: str, body: str) -> str | None:
        self.calls.append(("update_page", page_id))
        if self.no_id:
            return None
        self.pages[page_id]["body"] = body
        return page_id

    def get_labels(self, page_id: str) -> list[str]:
        self.calls.append(("get_labels", page_id))
        return list(self.pages[page_id]["labels"])

    def add_label(self, page_id: str, label: str) -> None:
        self.calls.append(("add_label", page_id, label))
        if label in self.failing_labels:
            request = httpx.Request("POST", f"https://wiki.example.com/rest/api/content/{page_id}/label")
            raise httpx.HTTPStatusError(
                "403 Forbidden", request=request, response=httpx.Response(403, request=request)
            )
        if label not in self.pages[page_id]["labels"]:
            self.pages[page_id]["labels"].append(label)


@pytest.fixture
def fake_confluence() -> FakeConfluence:
    return FakeConfluence()


@pytest.fixture
def web01() -> HostFacts:
    return HostFacts(
        hostname="web01",
        domain="corp.example.com",
        ipv4="10.0.0.15",
        os_name="Ubuntu 22.04.4 LTS",
        os_version="5.15.0-105-generic",
        cpu_cores=4,
        memory_gb=16.00,
        virtualization_vendor="VMware, Inc.",
    )


@pytest.fixture
def run_settings(tmp_path) -> Settings:
    return Settings(
        snapshot_dir=tmp_path / "snapshots",
        confluence_base_url="https://wiki.example.com",
        confluence_user="",
        confluence_token="secret-token",
        confluence_space_key="OPS",
        parent_page_id="100",
        page_labels=["custom_tag", "auto_generated"],
        request_timeout=5.0,
        force_upload=False,
    )
