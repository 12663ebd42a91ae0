"""Schema shape extraction.

Accessors here never fail on odd input: anything that is not shaped like
the member they look for reads as "not applicable".
"""

import json
from dataclasses import dataclass, field
from typing import Any


@dataclass
class ObjectShape:
    """Effective property map of an object schema, with allOf flattened."""

    properties: dict[str, dict] = field(default_factory=dict)


def object_shape(schema: Any) -> ObjectShape | None:
    """Return the flattened object shape of a schema, or None if it has no properties."""
    properties = _collect_properties(schema, set())
    if not properties:
        return None
    return ObjectShape(properties=properties)


def _collect_properties(schema: Any, seen: set[int]) -> dict[str, dict]:
    if not isinstance(schema, dict) or id(schema) in seen:
        return {}
    seen.add(id(schema))

    properties: dict[str, dict] = {}
    all_of = schema.get("allOf")
    if isinstance(all_of, list):
        for entry in all_of:
            properties.update(_collect_properties(entry, seen))

    own = schema.get("properties")
    if isinstance(own, dict):
        for name, prop in own.items():
            if isinstance(prop, dict):
                properties[str(name)] = prop

    seen.discard(id(schema))
    return properties


def canonical_value(value: Any) -> str:
    """Serialize an enum value so structurally equal values compare equal."""
    return json.dumps(_normalize(value), sort_keys=True, separators=(",", ":"), ensure_ascii=False, default=str)


def _normalize(value: Any) -> Any:
    # 1 and 1.0 are the same JSON number
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, dict):
        return {str(k): _normalize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalize(v) for v in value]
    return value


def enum_values(schema: Any) -> set[str] | None:
    """Return the canonical enum value set, or None when no enum is declared."""
    if not isinstance(schema, dict):
        return None
    raw = schema.get("enum")
    if not isinstance(raw, list):
        return None
    return {canonical_value(value) for value in raw}


def required_fields(schema: Any) -> list[str]:
    """Return the `required` names in declaration order, without duplicates."""
    if not isinstance(schema, dict):
        return []
    raw = schema.get("required")
    if not isinstance(raw, list):
        return []
    return list(dict.fromkeys(str(name) for name in raw))


def schema_type(schema: Any) -> str:
    """Return the textual `type` of a schema, or "" when absent."""
    if not isinstance(schema, dict):
        return ""
    raw = schema.get("type")
    if not raw:
        return ""
    if isinstance(raw, list):
        return ",".join(str(t) for t in raw)
    return str(raw)
