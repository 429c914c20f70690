"""Recursively inline [[wiki-linked]] notes into a single document."""

from wikimerge.cleanup import execute_deletions, plan_deletions
from wikimerge.config import MergeSettings
from wikimerge.errors import DeleteError, MergeError, ReadError, WriteError
from wikimerge.links import extract_links, is_mergeable_name
from wikimerge.merge import MergeContext, MergeEngine, MergeReport, merge_document
from wikimerge.store import DocumentStore, VaultStore

__version__ = "0.3.0"

__all__ = [
    "DeleteError",
    "DocumentStore",
    "MergeContext",
    "MergeEngine",
    "MergeError",
    "MergeReport",
    "MergeSettings",
    "ReadError",
    "VaultStore",
    "WriteError",
    "execute_deletions",
    "extract_links",
    "is_mergeable_name",
    "merge_document",
    "plan_deletions",
]
