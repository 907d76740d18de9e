"""Response models for the Confluence REST API.

Only the fields hostpage reads are declared; everything else in the
payload is ignored.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class PageRef(BaseModel):
    """A page as listed among a parent's children."""

    model_config = ConfigDict(extra="ignore")

    id: str
    title: str


class Label(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    prefix: str = "global"
