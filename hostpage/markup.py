"""Render :class:`HostFacts` into a Confluence storage-format table.

The template is declarative: ``ROWS`` lists every row label with the
function that formats its cell.  Rendering is pure, so the same facts
always produce a byte-identical document.

Field values are inserted verbatim by default.  A hostname or OS caption
containing ``<`` or ``&`` will therefore produce invalid storage markup;
pass ``escape=True`` to HTML-escape every cell instead.
"""

from __future__ import annotations

import html
from typing import Callable

from hostpage.facts.models import HostFacts


def _memory(facts: HostFacts) -> str:
    if facts.memory_gb is None:
        return ""
    return f"{facts.memory_gb:.2f} GB"


def _cpu(facts: HostFacts) -> str:
    if facts.cpu_cores is None:
        return ""
    return str(facts.cpu_cores)


ROWS: tuple[tuple[str, Callable[[HostFacts], str]], ...] = (
    ("Hostname", lambda f: f.hostname),
    ("Domain", lambda f: f.domain),
    ("IPv4", lambda f: f.ipv4),
    ("OS", lambda f: f.os_name),
    ("System Release", lambda f: f.os_version),
    ("CPU", _cpu),
    ("Memory", _memory),
    ("Virtual", lambda f: f.virtualization_vendor),
)

_ROW_TEMPLATE = "<tr><th>{label}</th><td>{value}</td></tr>"


def render(facts: HostFacts, escape: bool = False) -> str:
    """Return the storage-format document for *facts*.

    Args:
        facts: The collected host facts.
        escape: HTML-escape cell values.  Off by default, so values are
            written exactly as collected.

    Returns:
        A newline-terminated ``<table>`` with one row per entry in ``ROWS``.
    """
    lines = ["<table>", "<tbody>"]
    for label, cell in ROWS:
        value = cell(facts)
        if escape:
            value = html.escape(value)
        lines.append(_ROW_TEMPLATE.format(label=label, value=value))
    lines.extend(["</tbody>", "</table>"])
    return "\n".join(lines) + "\n"
