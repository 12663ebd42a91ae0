"""Operation indexer: maps "METHOD /path" keys to their operation context."""

from dataclasses import dataclass
from typing import Any

HTTP_METHODS = ("get", "post", "put", "patch", "delete", "options", "head", "trace")


@dataclass(frozen=True)
class OperationContext:
    """One operation together with its enclosing path item.

    The path item is kept so path-level parameters can be pooled with the
    operation's own.
    """

    path: str
    method: str  # upper-cased
    operation: dict
    path_item: dict

    @property
    def key(self) -> str:
        return operation_key(self.method, self.path)


def operation_key(method: str, path: str) -> str:
    return f"{method.upper()} {path}"


def index_operations(document: Any) -> dict[str, OperationContext]:
    """Index every operation of a dereferenced document.

    Missing or malformed `paths` and non-mapping path items are skipped.
    Method members are matched case-insensitively; when a path item spells
    the same method twice (`get` and `GET`), the first one wins.
    """
    operations: dict[str, OperationContext] = {}
    if not isinstance(document, dict):
        return operations
    paths = document.get("paths")
    if not isinstance(paths, dict):
        return operations

    for path, path_item in paths.items():
        if not isinstance(path_item, dict):
            continue
        members: dict[str, Any] = {}
        for name, value in path_item.items():
            members.setdefault(str(name).lower(), value)
        for method in HTTP_METHODS:
            operation = members.get(method)
            if not isinstance(operation, dict):
                continue
            ctx = OperationContext(
                path=str(path),
                method=method.upper(),
                operation=operation,
                path_item=path_item,
            )
            operations[ctx.key] = ctx

    return operations
