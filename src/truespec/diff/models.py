"""Data models for comparison results.

Every finding is a DiffItem; a DiffResult bundles the items in discovery
order together with per-severity counts.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class Severity(str, Enum):
    BREAKING = "breaking"
    WARNING = "warning"
    INFO = "info"


SEVERITY_ORDER = (Severity.BREAKING, Severity.WARNING, Severity.INFO)


class OperationRef(BaseModel):
    """The operation a finding belongs to."""

    model_config = ConfigDict(frozen=True)

    path: str  # /pets/{id}
    method: str  # GET / POST / ...


class DiffItem(BaseModel):
    """A single classified contract change."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    severity: Severity
    code: str  # operation-removed / schema-type-changed / ...
    message: str
    operation: OperationRef | None = None


class DiffSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    breaking: int = 0
    warning: int = 0
    info: int = 0
    total: int = 0


class DiffResult(BaseModel):
    """Outcome of one base/head comparison."""

    model_config = ConfigDict(frozen=True)

    summary: DiffSummary
    items: tuple[DiffItem, ...]

    @classmethod
    def from_items(cls, items: list[DiffItem]) -> "DiffResult":
        """Build a result whose summary is counted from the given items."""
        counts = {severity.value: 0 for severity in SEVERITY_ORDER}
        for item in items:
            counts[item.severity] += 1
        summary = DiffSummary(total=len(items), **counts)
        return cls(summary=summary, items=tuple(items))

    def by_severity(self, severity: Severity | str) -> list[DiffItem]:
        value = Severity(severity).value
        return [item for item in self.items if item.severity == value]
