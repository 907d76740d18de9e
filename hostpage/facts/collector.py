"""Best-effort collection of local host facts.

Every lookup runs independently: a lookup that raises is reported on stdout
and its field is left empty, so a single unavailable fact never aborts the
run.
"""

from __future__ import annotations

import platform
import re
import socket
import subprocess
from pathlib import Path
from typing import Callable, TypeVar

import psutil

from hostpage.facts.models import HostFacts

T = TypeVar("T")

# Address prefixes considered "the" host address, checked in this order per
# interface.
PRIVATE_PREFIXES = ("192.168.", "10.", "172.16.")

_SYS_VENDOR_PATH = Path("/sys/class/dmi/id/sys_vendor")

# "Size: 16 GB" lines of a dmidecode memory-device dump.  Anchored so that
# "Volatile Size:", "Cache Size:" etc. are not counted.
_MODULE_SIZE_RE = re.compile(r"^\s*Size:\s*(\d+)\s*(kB|KB|MB|GB|TB)\s*$", re.MULTILINE)

_UNIT_BYTES = {
    "kB": 1024,
    "KB": 1024,
    "MB": 1024 ** 2,
    "GB": 1024 ** 3,
    "TB": 1024 ** 4,
}


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _best_effort(name: str, lookup: Callable[[], T], default: T) -> T:
    """Run *lookup* and return its value, or *default* if it fails."""
    try:
        value = lookup()
    except Exception as exc:
        print(f"[facts] {name} unavailable: {exc}")
        return default
    return default if value is None else value


def local_hostname() -> str:
    """Return the short, lowercased name of this host."""
    return socket.gethostname().split(".", 1)[0].lower()


def _domain() -> str:
    """Return the FQDN with its leading host label stripped."""
    fqdn = socket.getfqdn()
    if "." not in fqdn:
        return ""
    return fqdn.split(".", 1)[1].lower()


def _ipv4() -> str:
    """Return the first private IPv4 address bound to a local interface.

    Interfaces are visited in name order so the choice is stable when more
    than one address qualifies.
    """
    interfaces = psutil.net_if_addrs()
    for name in sorted(interfaces):
        for addr in interfaces[name]:
            if addr.family != socket.AF_INET:
                continue
            if addr.address.startswith(PRIVATE_PREFIXES):
                return addr.address
    return ""


def _os_name() -> str:
    try:
        release = platform.freedesktop_os_release()
    except OSError:
        return platform.system()
    return release.get("PRETTY_NAME") or release.get("NAME") or platform.system()


def _os_version() -> str:
    return platform.release()


def _cpu_cores() -> int | None:
    # Physical cores across every socket; None when psutil cannot tell.
    return psutil.cpu_count(logical=False)


def parse_module_sizes(dump: str) -> int:
    """Return the total bytes of every populated module in a dmidecode dump."""
    total = 0
    for match in _MODULE_SIZE_RE.finditer(dump):
        total += int(match.group(1)) * _UNIT_BYTES[match.group(2)]
    return total


def _installed_memory_bytes() -> int:
    """Sum physical memory module capacities, falling back to usable RAM.

    ``dmidecode`` usually needs root; when it is missing or reports no
    modules the total visible to the kernel is used instead.
    """
    try:
        result = subprocess.run(
            ["dmidecode", "--type", "17"],
            capture_output=True,
            text=True,
            check=True,
        )
        total = parse_module_sizes(result.stdout)
    except (OSError, subprocess.CalledProcessError):
        total = 0
    if total:
        return total
    return psutil.virtual_memory().total


def _memory_gb() -> float:
    return round(_installed_memory_bytes() / 1024 ** 3, 2)


def _virtualization_vendor() -> str:
    return _SYS_VENDOR_PATH.read_text(encoding="utf-8").strip()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def collect_facts() -> HostFacts:
    """Gather a :class:`HostFacts` record for the local host.

    Only reads local OS and network state.  Each fact is read separately;
    failures leave that fact empty (``""`` or ``None``).
    """
    return HostFacts(
        hostname=_best_effort("hostname", local_hostname, ""),
        domain=_best_effort("domain", _domain, ""),
        ipv4=_best_effort("ipv4", _ipv4, ""),
        os_name=_best_effort("os name", _os_name, ""),
        os_version=_best_effort("os version", _os_version, ""),
        cpu_cores=_best_effort("cpu cores", _cpu_cores, None),
        memory_gb=_best_effort("memory", _memory_gb, None),
        virtualization_vendor=_best_effort(
            "virtualization vendor", _virtualization_vendor, ""
        ),
    )
