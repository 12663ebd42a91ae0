"""Comparison of one operation matched in both documents."""

from typing import Any

from truespec.diff.indexer import OperationContext
from truespec.diff.models import DiffItem, OperationRef, Severity
from truespec.diff.schema import (
    CycleGuard,
    SchemaContext,
    compare_schemas,
    request_body_path,
    response_body_path,
)


def compare_operation(base: OperationContext, head: OperationContext) -> list[DiffItem]:
    """Return the response, parameter and body findings for a matched operation."""
    items: list[DiffItem] = []
    key = base.key
    base_ref = OperationRef(path=base.path, method=base.method)
    head_ref = OperationRef(path=head.path, method=head.method)

    base_statuses = response_statuses(base.operation)
    head_statuses = response_statuses(head.operation)
    for status in base_statuses:
        if status not in head_statuses:
            items.append(DiffItem(
                severity=Severity.BREAKING,
                code="response-removed",
                message=f"Removed response {status} for {key}",
                operation=base_ref,
            ))
    for status in head_statuses:
        if status not in base_statuses:
            items.append(DiffItem(
                severity=Severity.INFO,
                code="response-added",
                message=f"Added response {status} for {key}",
                operation=head_ref,
            ))

    base_params = required_params(base.path_item, base.operation)
    for param in required_params(head.path_item, head.operation):
        if param not in base_params:
            items.append(DiffItem(
                severity=Severity.WARNING,
                code="required-param-added",
                message=f"New required parameter {param} for {key}",
                operation=head_ref,
            ))

    if not is_body_required(base.operation) and is_body_required(head.operation):
        items.append(DiffItem(
            severity=Severity.WARNING,
            code="request-body-required",
            message=f"Request body is now required for {key}",
            operation=head_ref,
        ))

    base_request = request_schema(base.operation)
    head_request = request_schema(head.operation)
    if base_request is not None and head_request is not None:
        compare_schemas(
            base_request, head_request, request_body_path(), SchemaContext.REQUEST,
            items, head_ref, CycleGuard(),
        )

    head_responses = response_schemas(head.operation)
    for status, base_schema in response_schemas(base.operation).items():
        head_schema = head_responses.get(status)
        if head_schema is None:
            continue
        compare_schemas(
            base_schema, head_schema, response_body_path(status), SchemaContext.RESPONSE,
            items, head_ref, CycleGuard(),
        )

    return items


def response_statuses(operation: dict) -> list[str]:
    responses = operation.get("responses")
    if not isinstance(responses, dict):
        return []
    # YAML reads unquoted status codes as integers
    return [str(status) for status in responses]


def required_params(path_item: dict, operation: dict) -> list[str]:
    """Return `<in>:<name>` keys of required parameters, path level first.

    Path parameters are required whether or not they say so.
    """
    params: list[Any] = []
    for source in (path_item.get("parameters"), operation.get("parameters")):
        if isinstance(source, list):
            params.extend(source)

    required: dict[str, None] = {}
    for param in params:
        if not isinstance(param, dict):
            continue
        name = str(param.get("name") or "")
        location = str(param.get("in") or "")
        if not name or not location:
            continue
        if param.get("required") or location == "path":
            required[f"{location}:{name}"] = None
    return list(required)


def is_body_required(operation: dict) -> bool:
    body = operation.get("requestBody")
    if not isinstance(body, dict):
        return False
    return bool(body.get("required"))


def schema_from_content(content: Any) -> dict | None:
    """Pick the body schema, preferring JSON media types."""
    if not isinstance(content, dict) or not content:
        return None

    schema = _media_schema(content.get("application/json"))
    if schema is not None:
        return schema

    json_like = next((name for name in content if "json" in str(name)), None)
    if json_like is not None:
        schema = _media_schema(content[json_like])
        if schema is not None:
            return schema

    return _media_schema(next(iter(content.values())))


def _media_schema(media: Any) -> dict | None:
    if not isinstance(media, dict):
        return None
    schema = media.get("schema")
    return schema if isinstance(schema, dict) else None


def request_schema(operation: dict) -> dict | None:
    body = operation.get("requestBody")
    if not isinstance(body, dict):
        return None
    return schema_from_content(body.get("content"))


def response_schemas(operation: dict) -> dict[str, dict]:
    """Map each status code to its resolvable body schema."""
    responses = operation.get("responses")
    result: dict[str, dict] = {}
    if not isinstance(responses, dict):
        return result
    for status, response in responses.items():
        if not isinstance(response, dict):
            continue
        schema = schema_from_content(response.get("content"))
        if schema is not None:
            result[str(status)] = schema
    return result
