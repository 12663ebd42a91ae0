"""Structural comparison of request and response body schemas.

The same walk classifies a change differently depending on which side of
the contract it sits on: a new required field is a risk for callers when
it appears in a request body, and only informational in a response body.
"""

from dataclasses import dataclass, field
from enum import Enum

from truespec.diff.models import DiffItem, OperationRef, Severity
from truespec.diff.shapes import enum_values, object_shape, required_fields, schema_type


class SchemaContext(str, Enum):
    REQUEST = "request"
    RESPONSE = "response"
    OTHER = "other"


def request_body_path() -> str:
    return "request.body"


def response_body_path(status: str) -> str:
    return f"response.{status}.body"


@dataclass
class CycleGuard:
    """Identity sets of the nodes visited during one body comparison."""

    base: set[int] = field(default_factory=set)
    head: set[int] = field(default_factory=set)

    def enter(self, base: dict, head: dict) -> bool:
        """Mark both nodes visited; False if either was seen before."""
        if id(base) in self.base or id(head) in self.head:
            return False
        self.base.add(id(base))
        self.head.add(id(head))
        return True


def compare_schemas(
    base: dict,
    head: dict,
    schema_path: str,
    context: SchemaContext,
    items: list[DiffItem],
    operation: OperationRef | None = None,
    guard: CycleGuard | None = None,
) -> None:
    """Append every difference between two schema nodes to `items`.

    A node already visited on either side is skipped, so changes that only
    occur past the first pass through a cycle are not reported.
    """
    if guard is None:
        guard = CycleGuard()
    if not isinstance(base, dict) or not isinstance(head, dict):
        return
    if not guard.enter(base, head):
        return

    def emit(severity: Severity, code: str, message: str) -> None:
        items.append(DiffItem(severity=severity, code=code, message=message, operation=operation))

    base_type = schema_type(base)
    head_type = schema_type(head)
    if base_type and head_type and base_type != head_type:
        emit(
            Severity.BREAKING,
            "schema-type-changed",
            f"Type changed at {schema_path} ({base_type} -> {head_type})",
        )
        return

    _compare_enums(base, head, schema_path, emit)

    base_items = base.get("items")
    head_items = head.get("items")
    if isinstance(base_items, dict) and isinstance(head_items, dict):
        compare_schemas(base_items, head_items, f"{schema_path}[]", context, items, operation, guard)

    base_shape = object_shape(base)
    head_shape = object_shape(head)
    if base_shape is None or head_shape is None:
        return

    base_required = set(required_fields(base))
    for name in required_fields(head):
        if name in base_required:
            continue
        severity = Severity.WARNING if context == SchemaContext.REQUEST else Severity.INFO
        emit(severity, "schema-required-added", f"New required field {schema_path}.{name}")

    for name, base_prop in base_shape.properties.items():
        head_prop = head_shape.properties.get(name)
        if head_prop is None:
            emit(Severity.BREAKING, "schema-field-removed", f"Removed field {schema_path}.{name}")
            continue
        compare_schemas(base_prop, head_prop, f"{schema_path}.{name}", context, items, operation, guard)

    if context != SchemaContext.RESPONSE:
        return
    for name in head_shape.properties:
        if name not in base_shape.properties:
            emit(Severity.INFO, "schema-field-added", f"Added field {schema_path}.{name}")


def _compare_enums(base: dict, head: dict, schema_path: str, emit) -> None:
    base_enum = enum_values(base)
    head_enum = enum_values(head)
    if base_enum is None and head_enum is None:
        return

    base_enum = base_enum or set()
    head_enum = head_enum or set()
    removed = sorted(base_enum - head_enum)
    added = sorted(head_enum - base_enum)
    if not removed and not added:
        return

    details = []
    if removed:
        details.append(f"removed: {', '.join(removed)}")
    if added:
        details.append(f"added: {', '.join(added)}")
    emit(Severity.BREAKING, "schema-enum-changed", f"Enum changed at {schema_path} ({'; '.join(details)})")
