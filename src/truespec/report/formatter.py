"""Renders a DiffResult as text, Markdown or JSON."""

import json
from datetime import datetime, timezone

from truespec.config import OutputFormat
from truespec.diff.models import SEVERITY_ORDER, DiffResult

NO_DIFFERENCES = "No differences found."


def format_text(result: DiffResult) -> str:
    s = result.summary
    lines = [
        "Summary",
        f"Breaking: {s.breaking} | Warning: {s.warning} | Info: {s.info}",
    ]
    if not result.items:
        lines += ["", NO_DIFFERENCES]
        return "\n".join(lines)

    for severity in SEVERITY_ORDER:
        items = result.by_severity(severity)
        if not items:
            continue
        lines += ["", f"{severity.value.upper()} ({len(items)})"]
        lines += [f"- {item.message}" for item in items]
    return "\n".join(lines)


def format_markdown(result: DiffResult) -> str:
    s = result.summary
    lines = [
        "## TrueSpec Summary",
        "",
        f"- Breaking: {s.breaking}",
        f"- Warning: {s.warning}",
        f"- Info: {s.info}",
    ]
    if not result.items:
        lines += ["", NO_DIFFERENCES]
        return "\n".join(lines)

    for severity in SEVERITY_ORDER:
        items = result.by_severity(severity)
        if not items:
            continue
        lines += ["", f"### {severity.value.title()} ({len(items)})"]
        lines += [f"- {item.message}" for item in items]
    return "\n".join(lines)


def format_json(result: DiffResult, now: datetime | None = None) -> dict:
    """Build the versioned JSON document for a result.

    `generatedAt` is the render time in UTC unless `now` is given.
    """
    now = now or datetime.now(timezone.utc)
    return {
        "schemaVersion": "1",
        "generatedAt": now.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        "summary": result.summary.model_dump(),
        "items": [item.model_dump(mode="json", exclude_none=True) for item in result.items],
    }


def render(result: DiffResult, fmt: OutputFormat | str) -> str:
    """Render a result in the requested output format."""
    fmt = OutputFormat(fmt)
    if fmt == OutputFormat.JSON:
        return json.dumps(format_json(result), indent=2, ensure_ascii=False)
    if fmt == OutputFormat.MARKDOWN:
        return format_markdown(result)
    return format_text(result)
