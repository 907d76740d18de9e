"""Centralised settings for hostpage.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

DEFAULT_LABELS = ("custom_tag", "auto_generated")

_TRUTHY = {"1", "true", "yes", "on"}


class ConfigError(ValueError):
    """Raised when a required option is missing or malformed."""


def parse_labels(raw: str) -> list[str]:
    """Split a comma-separated label list, dropping blanks and duplicates.

    Order is preserved so labels are added in the order they were configured.
    """
    labels: list[str] = []
    for part in raw.split(","):
        label = part.strip()
        if label and label not in labels:
            labels.append(label)
    return labels


def _env_float(name: str, default: float) -> float | None:
    """Read a float option; ``None`` marks a malformed value for validate()."""
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError:
        return None


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Snapshot storage
    # ------------------------------------------------------------------
    snapshot_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("SNAPSHOT_DIR", Path.home() / ".hostpage" / "snapshots")
        )
    )

    # ------------------------------------------------------------------
    # Confluence
    # ------------------------------------------------------------------
    confluence_base_url: str = field(
        default_factory=lambda: os.environ.get("CONFLUENCE_BASE_URL", "")
    )
    confluence_user: str = field(
        default_factory=lambda: os.environ.get("CONFLUENCE_USER", "")
    )
    confluence_token: str = field(
        default_factory=lambda: os.environ.get("CONFLUENCE_TOKEN", "")
    )
    confluence_space_key: str = field(
        default_factory=lambda: os.environ.get("CONFLUENCE_SPACE_KEY", "")
    )
    parent_page_id: str = field(
        default_factory=lambda: os.environ.get("CONFLUENCE_PARENT_PAGE_ID", "")
    )
    page_labels: list[str] = field(
        default_factory=lambda: parse_labels(
            os.environ.get("PAGE_LABELS", ",".join(DEFAULT_LABELS))
        )
    )
    request_timeout: float | None = field(
        default_factory=lambda: _env_float("REQUEST_TIMEOUT", 30.0)
    )

    # ------------------------------------------------------------------
    # Workflow
    # ------------------------------------------------------------------
    force_upload: bool = field(
        default_factory=lambda: _env_flag("FORCE_UPLOAD")
    )

    def ensure_snapshot_dir(self) -> None:
        """Create the snapshot directory if it does not exist."""
        self.snapshot_dir.mkdir(parents=True, exist_ok=True)

    def validate(self) -> None:
        """Check options every run depends on.

        Raises:
            ConfigError: If a value read from the environment is malformed.
        """
        if self.request_timeout is None or self.request_timeout <= 0:
            raw = os.environ.get("REQUEST_TIMEOUT", "")
            raise ConfigError(
                f"REQUEST_TIMEOUT must be a positive number of seconds, got {raw!r}."
            )

    def validate_for_publish(self) -> None:
        """Check that every option needed to talk to Confluence is set.

        Raises:
            ConfigError: Listing every missing option at once.
        """
        self.validate()
        missing = []
        if not self.confluence_base_url:
            missing.append("CONFLUENCE_BASE_URL")
        if not self.confluence_token:
            missing.append("CONFLUENCE_TOKEN")
        if not self.parent_page_id:
            missing.append("CONFLUENCE_PARENT_PAGE_ID")
        if missing:
            raise ConfigError(
                "Missing required configuration: " + ", ".join(missing)
            )


# Module-level singleton - import this everywhere:
#   from hostpage.config import settings
settings = Settings()
