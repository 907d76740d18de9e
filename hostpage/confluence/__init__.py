"""Confluence package: REST adapter for the documentation space."""

from hostpage.confluence.client import ConfluenceClient
from hostpage.confluence.models import Label, PageRef

__all__ = ["ConfluenceClient", "Label", "PageRef"]
