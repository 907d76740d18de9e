"""Data models for host fact collection."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class HostFacts:
    """Characteristics of the local host, gathered once per run.

    String facts are ``""`` and numeric facts are ``None`` when the
    underlying lookup could not provide a value.
    """

    hostname: str
    domain: str = ""
    ipv4: str = ""
    os_name: str = ""
    os_version: str = ""
    cpu_cores: int | None = None
    memory_gb: float | None = None
    virtualization_vendor: str = ""

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)
