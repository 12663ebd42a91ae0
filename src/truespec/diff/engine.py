"""Diff orchestrator: compares two dereferenced API documents."""

import logging
from typing import Any

from truespec.diff.indexer import index_operations
from truespec.diff.models import DiffItem, DiffResult, OperationRef, Severity
from truespec.diff.operations import compare_operation

logger = logging.getLogger(__name__)


def diff_specs(base: Any, head: Any) -> DiffResult:
    """Compare a base and a head document and classify every change.

    Items are ordered: removed operations, added operations, then the
    findings of each matched operation in base-document order. Malformed
    fragments are skipped rather than reported as errors.
    """
    base_ops = index_operations(base)
    head_ops = index_operations(head)
    logger.debug("Indexed %d base and %d head operations", len(base_ops), len(head_ops))

    items: list[DiffItem] = []
    for key, ctx in base_ops.items():
        if key not in head_ops:
            items.append(DiffItem(
                severity=Severity.BREAKING,
                code="operation-removed",
                message=f"Removed operation {key}",
                operation=OperationRef(path=ctx.path, method=ctx.method),
            ))

    for key, ctx in head_ops.items():
        if key not in base_ops:
            items.append(DiffItem(
                severity=Severity.INFO,
                code="operation-added",
                message=f"Added operation {key}",
                operation=OperationRef(path=ctx.path, method=ctx.method),
            ))

    for key, base_ctx in base_ops.items():
        head_ctx = head_ops.get(key)
        if head_ctx is None:
            continue
        items.extend(compare_operation(base_ctx, head_ctx))

    result = DiffResult.from_items(items)
    logger.debug("Found %d differences", result.summary.total)
    return result
