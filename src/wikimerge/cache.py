"""Read-through document content cache scoped to one merge run."""

from __future__ import annotations

from wikimerge.log import get_logger
from wikimerge.store import DocumentStore

log = get_logger("cache")


class DocumentCache:
    """Memoize document content so each document is read at most once.

    Failed reads are not stored; the ReadError propagates to the caller.
    """

    def __init__(self, store: DocumentStore):
        self._store = store
        self._content: dict[str, str] = {}
        self.reads = 0

    def get_content(self, document_id: str) -> str:
        if document_id in self._content:
            return self._content[document_id]

        log.debug("Reading %s", document_id)
        content = self._store.read_content(document_id)
        self.reads += 1
        self._content[document_id] = content
        return content

    def __contains__(self, document_id: object) -> bool:
        return document_id in self._content

    def __len__(self) -> int:
        return len(self._content)
