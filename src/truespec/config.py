"""Configuration values shared by the CLI and the document loader."""

import os
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from truespec.diff.models import DiffSummary

DEFAULT_CACHE_DIR = Path.home() / ".cache" / "truespec"
DEFAULT_CACHE_TTL = 300


class OutputFormat(str, Enum):
    TEXT = "text"
    MARKDOWN = "markdown"
    JSON = "json"


class FailOn(str, Enum):
    NONE = "none"
    BREAKING = "breaking"
    WARNING = "warning"


def exceeds_threshold(summary: DiffSummary, fail_on: FailOn | str) -> bool:
    """True when the summary meets the --fail-on level.

    `warning` trips on warnings and on breaking changes.
    """
    fail_on = FailOn(fail_on)
    if fail_on == FailOn.WARNING:
        return summary.breaking > 0 or summary.warning > 0
    if fail_on == FailOn.BREAKING:
        return summary.breaking > 0
    return False


class FetchOptions(BaseModel):
    """How remote documents are fetched and cached."""

    cache_dir: Path = Field(default=DEFAULT_CACHE_DIR, description="Directory for cached remote documents")
    ttl_seconds: int = Field(default=DEFAULT_CACHE_TTL, ge=0, description="Freshness window of a cached copy")
    no_store: bool = Field(default=False, description="Neither read nor write the cache")
    authorization: str | None = Field(default=None, description="Value of the Authorization header")
    headers: dict[str, str] = Field(default_factory=dict, description="Extra request headers")
    timeout: float = Field(default=30.0, gt=0)

    @classmethod
    def from_env(cls, **overrides) -> "FetchOptions":
        """Read TRUESPEC_* variables, then apply explicit overrides."""
        values: dict = {}
        if os.getenv("TRUESPEC_CACHE_DIR"):
            values["cache_dir"] = Path(os.environ["TRUESPEC_CACHE_DIR"])
        if os.getenv("TRUESPEC_CACHE_TTL"):
            values["ttl_seconds"] = os.environ["TRUESPEC_CACHE_TTL"]
        if os.getenv("TRUESPEC_NO_CACHE", "").lower() in ("1", "true", "yes"):
            values["no_store"] = True
        if os.getenv("TRUESPEC_AUTHORIZATION"):
            values["authorization"] = os.environ["TRUESPEC_AUTHORIZATION"]
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def request_headers(self) -> dict[str, str]:
        headers = dict(self.headers)
        if self.authorization:
            headers["Authorization"] = self.authorization
        return headers
