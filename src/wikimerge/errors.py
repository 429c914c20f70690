"""Error taxonomy for merge runs.

ReadError and WriteError abort a run. DeleteError is isolated per document
by the cleanup step. Unresolved links and circular references are not
errors at all.
"""

from __future__ import annotations


class MergeError(Exception):
    """Base class for failures reported by a storage collaborator."""

    action = "access"

    def __init__(self, document_id: str, reason: str | None = None):
        self.document_id = document_id
        self.reason = reason
        message = f"Failed to {self.action} file: {document_id}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class ReadError(MergeError):
    action = "read"


class WriteError(MergeError):
    action = "write"


class DeleteError(MergeError):
    action = "delete"
