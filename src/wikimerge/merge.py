"""Recursive wiki link merging.

The engine walks the link graph depth-first, left to right over link
occurrences, replacing each ``[[target]]`` with the fully merged content of
the document it resolves to. Traversal uses an explicit frame stack, so
link chains of any depth stay within the interpreter's recursion limit.

State for one run lives in a :class:`MergeContext`:

- ``visited``: every document entered so far. It only grows, so a document
  reached again (cycle or second path) merges to empty content.
- ``processed``: documents that were inlined and may be cleaned up. A
  document already processed is not inlined again; its later markers stay
  as written.
- ``missing``: link targets that resolved to nothing, in encounter order.
- ``cache``: document content, read at most once per run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePosixPath

from wikimerge.cache import DocumentCache
from wikimerge.cleanup import execute_deletions, plan_deletions
from wikimerge.config import MergeSettings
from wikimerge.links import extract_links, is_mergeable_name, marker
from wikimerge.log import get_logger
from wikimerge.store import DocumentStore

log = get_logger("merge")


@dataclass
class MergeContext:
    """Mutable bookkeeping for a single merge run. Never reuse across runs."""

    root_id: str
    cache: DocumentCache
    visited: set[str] = field(default_factory=set)
    processed: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)
    # membership index for ``processed``, which keeps the inlining order
    _processed_ids: set[str] = field(default_factory=set, repr=False)

    def is_processed(self, document_id: str) -> bool:
        return document_id in self._processed_ids

    def mark_processed(self, document_id: str) -> None:
        """Record an inlined document if it is a mergeable, non-root source."""
        if document_id == self.root_id or self.is_processed(document_id):
            return
        if is_mergeable_name(PurePosixPath(document_id).name):
            self.processed.append(document_id)
            self._processed_ids.add(document_id)


@dataclass
class _Frame:
    document_id: str
    content: str
    links: list[str]
    depth: int
    position: int = 0
    # (target, resolved id) waiting for the child frame's merged content
    pending: tuple[str, str] | None = None


class MergeEngine:
    """Produce the fully inlined content of a root document."""

    def __init__(self, store: DocumentStore, settings: MergeSettings | None = None):
        self.store = store
        self.settings = settings or MergeSettings()

    def new_context(self, root_id: str) -> MergeContext:
        return MergeContext(root_id=root_id, cache=DocumentCache(self.store))

    def merge(self, root_id: str, context: MergeContext | None = None) -> str:
        """Return the merged content of ``root_id``.

        ReadError from the store propagates unchanged and aborts the run.
        """
        if context is None:
            context = self.new_context(root_id)

        root = self._enter(root_id, 0, context)
        if root is None:
            return ""

        stack = [root]
        while True:
            frame = stack[-1]
            child = self._advance(frame, context)
            if child is not None:
                stack.append(child)
                continue

            stack.pop()
            if not stack:
                return frame.content
            parent = stack[-1]
            target, resolved = parent.pending
            parent.pending = None
            self._substitute(parent, target, resolved, frame.content, context)

    def _enter(self, document_id: str, depth: int, context: MergeContext) -> _Frame | None:
        """Start merging a document, or return None for a circular reference."""
        if document_id in context.visited:
            log.warning("Circular reference detected: %s", document_id)
            return None
        context.visited.add(document_id)

        content = context.cache.get_content(document_id)
        links = extract_links(content)
        log.debug("Merging %s (%d link(s), depth %d)", document_id, len(links), depth)
        return _Frame(document_id, content, links, depth)

    def _advance(self, frame: _Frame, context: MergeContext) -> _Frame | None:
        """Handle links until one needs a child frame. None when all are done."""
        max_depth = self.settings.max_depth

        while frame.position < len(frame.links):
            target = frame.links[frame.position]
            frame.position += 1

            resolved = self.store.resolve_link(target, frame.document_id)
            if resolved is None:
                log.debug("Unresolved link [[%s]] in %s", target, frame.document_id)
                context.missing.append(target)
                continue

            if context.is_processed(resolved):
                continue

            if max_depth is not None and frame.depth >= max_depth:
                log.warning(
                    "Max depth %d reached, leaving [[%s]] in %s", max_depth, target, frame.document_id,
                )
                continue

            child = self._enter(resolved, frame.depth + 1, context)
            if child is None:
                self._substitute(frame, target, resolved, "", context)
                continue

            frame.pending = (target, resolved)
            return child

        return None

    def _substitute(
        self, frame: _Frame, target: str, resolved: str, merged: str, context: MergeContext,
    ) -> None:
        separator = self.settings.separator
        if separator:
            merged = f"{separator}{merged}{separator}"
        frame.content = frame.content.replace(marker(target), merged)
        context.mark_processed(resolved)


@dataclass
class MergeReport:
    """Outcome of :func:`merge_document`."""

    root_id: str
    content: str
    processed: list[str]
    missing: list[str]
    planned: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    failed_deletions: dict[str, str] = field(default_factory=dict)
    written: bool = False

    @property
    def processed_count(self) -> int:
        return len(self.processed)

    @property
    def missing_count(self) -> int:
        return len(self.missing)

    def summary(self) -> str:
        msg = f"Merged {self.processed_count} file(s)"
        if self.missing:
            msg += f", {self.missing_count} link target(s) not found"
        return msg


def merge_document(
    store: DocumentStore,
    root_id: str,
    settings: MergeSettings | None = None,
    *,
    dry_run: bool = False,
) -> MergeReport:
    """Merge ``root_id`` in place, then clean up inlined sources if enabled.

    The root is written exactly once, after the whole merge succeeded; a
    ReadError leaves it untouched and a WriteError skips cleanup. Deletion
    failures are recorded in the report and never fail the run.
    With ``dry_run`` nothing is written or deleted.
    """
    settings = settings or MergeSettings()
    engine = MergeEngine(store, settings)
    context = engine.new_context(root_id)

    content = engine.merge(root_id, context)
    report = MergeReport(
        root_id=root_id,
        content=content,
        processed=list(context.processed),
        missing=list(context.missing),
        planned=plan_deletions(context.processed, root_id, settings.delete_sources),
    )
    if dry_run:
        log.info("Dry run for %s: %s", root_id, report.summary())
        return report

    store.write_content(root_id, content)
    report.written = True

    result = execute_deletions(store, report.planned)
    report.deleted = result.deleted
    report.failed_deletions = result.failed

    log.info("%s: %s", root_id, report.summary())
    return report
