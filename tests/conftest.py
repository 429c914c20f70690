"""Shared fixtures: an in-memory document store and a captured log stream."""

from __future__ import annotations

import io
import logging
from pathlib import PurePosixPath

import pytest

from wikimerge.errors import DeleteError, ReadError, WriteError
from wikimerge.log import setup_logging


class MemoryStore:
    """DocumentStore over a dict of ``{document_id: content}``.

    Links resolve by exact identity or by note name (``Child`` ->
    ``any/folder/Child.md``). Ids listed in ``fail_read``, ``fail_write``
    and ``fail_delete`` raise the matching error.
    """

    def __init__(self, docs: dict[str, str]):
        self.docs = dict(docs)
        self.reads: list[str] = []
        self.writes: list[tuple[str, str]] = []
        self.deleted: list[str] = []
        self.delete_attempts: list[str] = []
        self.fail_read: set[str] = set()
        self.fail_write: set[str] = set()
        self.fail_delete: set[str] = set()

    def read_content(self, document_id: str) -> str:
        self.reads.append(document_id)
        if document_id in self.fail_read or document_id not in self.docs:
            raise ReadError(document_id, "boom")
        return self.docs[document_id]

    def resolve_link(self, target: str, from_document_id: str) -> str | None:
        if target in self.docs:
            return target
        for doc in self.docs:
            path = PurePosixPath(doc)
            if path.name == target or path.stem == target:
                return doc
        return None

    def write_content(self, document_id: str, content: str) -> None:
        if document_id in self.fail_write:
            raise WriteError(document_id, "disk full")
        self.writes.append((document_id, content))
        self.docs[document_id] = content

    def delete_document(self, document_id: str) -> None:
        self.delete_attempts.append(document_id)
        if document_id in self.fail_delete:
            raise DeleteError(document_id, "locked")
        del self.docs[document_id]
        self.deleted.append(document_id)


@pytest.fixture
def make_store():
    return MemoryStore


@pytest.fixture
def log_stream():
    """Route the 'wikimerge' logger into a StringIO for the test's duration."""
    base = logging.getLogger("wikimerge")
    saved_handlers, saved_level = list(base.handlers), base.level
    base.handlers.clear()
    stream = io.StringIO()
    setup_logging(logging.INFO, stream)
    yield stream
    base.handlers[:] = saved_handlers
    base.setLevel(saved_level)
