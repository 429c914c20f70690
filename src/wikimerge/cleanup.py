"""Selecting and deleting inlined source documents after a merge."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from wikimerge.errors import DeleteError
from wikimerge.log import get_logger
from wikimerge.store import DocumentStore

log = get_logger("cleanup")


@dataclass
class DeletionResult:
    deleted: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)


def plan_deletions(processed: Iterable[str], root_id: str, delete_enabled: bool) -> list[str]:
    """Return the processed documents to delete; the root is never included."""
    if not delete_enabled:
        return []
    return [doc for doc in processed if doc != root_id]


def execute_deletions(store: DocumentStore, plan: Iterable[str]) -> DeletionResult:
    """Delete each planned document independently.

    A DeleteError for one document is logged and recorded, and the
    remaining documents are still attempted.
    """
    result = DeletionResult()
    for document_id in plan:
        try:
            store.delete_document(document_id)
        except DeleteError as exc:
            log.error("%s", exc)
            result.failed[document_id] = str(exc)
            continue
        result.deleted.append(document_id)
    return result
