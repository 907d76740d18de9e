"""Publish package: page write, label reconciliation and the run workflow."""

from hostpage.publish.orchestrator import PublishError, PublishResult, publish_page
from hostpage.publish.runner import RunResult, run_once

__all__ = ["publish_page", "PublishError", "PublishResult", "run_once", "RunResult"]
