"""Facts package: local host inventory."""

from hostpage.facts.collector import collect_facts, local_hostname
from hostpage.facts.models import HostFacts

__all__ = ["collect_facts", "local_hostname", "HostFacts"]
