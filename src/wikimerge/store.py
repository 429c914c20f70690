"""Document storage collaborators.

The merge core only talks to storage through :class:`DocumentStore`.
:class:`VaultStore` implements it for an Obsidian-style folder of notes,
using vault-relative POSIX paths as document identities.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path, PurePosixPath
from typing import Protocol, runtime_checkable

from wikimerge.errors import DeleteError, ReadError, WriteError
from wikimerge.log import get_logger

log = get_logger("store")

_TRASH_DIR = ".trash"


@runtime_checkable
class DocumentStore(Protocol):
    """Storage, link resolution and deletion primitives used by a merge run."""

    def read_content(self, document_id: str) -> str:
        """Return the raw text of a document. Raises ReadError."""
        ...

    def resolve_link(self, target: str, from_document_id: str) -> str | None:
        """Resolve a link target written in ``from_document_id``, or None."""
        ...

    def write_content(self, document_id: str, content: str) -> None:
        """Persist content to a document. Raises WriteError."""
        ...

    def delete_document(self, document_id: str) -> None:
        """Remove a document from storage. Raises DeleteError."""
        ...


def _link_paths(target: str) -> list[str]:
    """Paths a link target may name, most literal first.

    Alias (``|``) and subpath (``#``) parts are dropped. Dots do not imply an
    extension (``2024.01.15``, ``Release v1.2``), so unless the path already
    ends in ``.md`` the note path is tried after the literal one.
    """
    path = target.split("|", 1)[0].split("#", 1)[0].strip()
    if not path:
        return []
    if path.lower().endswith(".md"):
        return [path]
    return [path, f"{path}.md"]


class VaultStore:
    """A folder of notes on disk.

    Args:
        root: Vault directory.
        trash: Move deleted notes into ``<root>/.trash/`` instead of
            unlinking them.
    """

    def __init__(self, root: Path | str, *, trash: bool = True):
        self.root = Path(root).expanduser().resolve()
        self.trash = trash
        self._index: list[str] | None = None

    def document_id(self, path: Path | str) -> str:
        """Return the identity of a file inside the vault."""
        full = Path(path).expanduser().resolve()
        try:
            return full.relative_to(self.root).as_posix()
        except ValueError:
            raise ValueError(f"{full} is not inside vault {self.root}") from None

    def path_of(self, document_id: str) -> Path:
        return self.root / PurePosixPath(document_id)

    def documents(self) -> list[str]:
        """All document identities, skipping dot-directories like .obsidian."""
        if self._index is None:
            found = []
            for dirpath, dirnames, filenames in os.walk(self.root):
                dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
                for name in sorted(filenames):
                    found.append(self.document_id(Path(dirpath) / name))
            self._index = found
        return self._index

    # ── DocumentStore ─────────────────────────────────────────────────────

    def read_content(self, document_id: str) -> str:
        try:
            return self.path_of(document_id).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ReadError(document_id, str(exc)) from exc

    def resolve_link(self, target: str, from_document_id: str) -> str | None:
        """Resolve a link the way Obsidian picks the first link destination.

        The literal link path is tried before the same path with ``.md``
        appended. For each, priority is: path relative to the linking note's
        folder, then any file whose vault path ends with the link path
        (case-insensitive), preferring the linking note's folder, then the
        shortest path.
        """
        source_dir = PurePosixPath(from_document_id).parent
        for link in _link_paths(target):
            found = self._find(link, source_dir)
            if found is not None:
                return found
        return None

    def _find(self, link: str, source_dir: PurePosixPath) -> str | None:
        relative = os.path.normpath((source_dir / link).as_posix())
        if not relative.startswith(("..", "/")) and self.path_of(relative).is_file():
            return PurePosixPath(relative).as_posix()

        wanted = link.lower().lstrip("/")
        candidates = [
            doc for doc in self.documents()
            if doc.lower() == wanted or doc.lower().endswith(f"/{wanted}")
        ]
        if not candidates:
            return None

        def rank(doc: str) -> tuple[bool, int, str]:
            return (PurePosixPath(doc).parent != source_dir, len(doc), doc)

        return min(candidates, key=rank)

    def write_content(self, document_id: str, content: str) -> None:
        """Replace a document atomically; on failure the old text stays."""
        path = self.path_of(document_id)
        tmp: Path | None = None
        try:
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=path.parent,
                prefix=f".{path.name}.", suffix=".tmp", delete=False,
            ) as handle:
                tmp = Path(handle.name)
                handle.write(content)
            if path.exists():
                shutil.copymode(path, tmp)
            os.replace(tmp, path)
        except OSError as exc:
            if tmp is not None:
                tmp.unlink(missing_ok=True)
            raise WriteError(document_id, str(exc)) from exc

    def delete_document(self, document_id: str) -> None:
        path = self.path_of(document_id)
        try:
            if self.trash:
                dest = self._trash_destination(path.name)
                dest.parent.mkdir(parents=True, exist_ok=True)
                path.rename(dest)
                log.debug("Moved %s to %s", document_id, dest)
            else:
                path.unlink()
                log.debug("Deleted %s", document_id)
        except OSError as exc:
            raise DeleteError(document_id, str(exc)) from exc

        if self._index is not None and document_id in self._index:
            self._index.remove(document_id)

    def _trash_destination(self, name: str) -> Path:
        """Pick a free name in the trash folder ("Note.md", "Note 1.md", ...)."""
        trash_dir = self.root / _TRASH_DIR
        candidate = trash_dir / name
        stem, suffix = os.path.splitext(name)
        counter = 1
        while candidate.exists():
            candidate = trash_dir / f"{stem} {counter}{suffix}"
            counter += 1
        return candidate
