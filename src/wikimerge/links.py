"""Wiki link extraction and mergeable-document rules."""

from __future__ import annotations

import re

_WIKI_LINK_RE = re.compile(r"\[\[([^\]]+)\]\]")
_IMAGE_EXT_RE = re.compile(r"\.(jpg|jpeg|png|gif|bmp|svg|webp)$", re.IGNORECASE)

# 32 hex chars + extension: auto-named attachments, never merged or deleted
_ATTACHMENT_NAME_RE = re.compile(r"^[a-f0-9]{32}\.\w+$", re.IGNORECASE)
_MARKDOWN_NAME_RE = re.compile(r"\.md$", re.IGNORECASE)


def extract_links(text: str) -> list[str]:
    """Return the link targets of every ``[[...]]`` marker in document order.

    Targets are whitespace-trimmed and image targets are dropped. A target
    linked twice appears twice.

    >>> extract_links("[[Note1]] and [[ Note2 ]] and [[pic.PNG]]")
    ['Note1', 'Note2']
    """
    links = []
    for match in _WIKI_LINK_RE.finditer(text):
        target = match.group(1).strip()
        if _IMAGE_EXT_RE.search(target):
            continue
        links.append(target)
    return links


def marker(target: str) -> str:
    """Literal marker text that a merged target replaces."""
    return f"[[{target}]]"


def is_mergeable_name(name: str) -> bool:
    """Check if a document name marks inlineable source content.

    Markdown notes qualify unless they carry an auto-generated attachment
    name.
    """
    return bool(_MARKDOWN_NAME_RE.search(name)) and not _ATTACHMENT_NAME_RE.match(name)
