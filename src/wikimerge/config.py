"""Merge settings and their environment-variable defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace

_ENV_DELETE_SOURCES = "WIKIMERGE_DELETE_SOURCES"
_ENV_SEPARATOR = "WIKIMERGE_SEPARATOR"
_ENV_MAX_DEPTH = "WIKIMERGE_MAX_DEPTH"

DEFAULT_SEPARATOR = "\n\n---\n\n"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_ESCAPES = {"\\n": "\n", "\\t": "\t", "\\r": "\r", "\\\\": "\\"}


@dataclass(frozen=True)
class MergeSettings:
    """Options consumed by a merge run.

    Attributes:
        delete_sources: Delete inlined source documents after the merged
            result has been written.
        separator: Text placed before and after each inlined document.
            Empty disables wrapping.
        max_depth: Deepest link nesting that is still expanded. None means
            unlimited.
    """

    delete_sources: bool = False
    separator: str = DEFAULT_SEPARATOR
    max_depth: int | None = None

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> MergeSettings:
        """Build settings from WIKIMERGE_* variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        settings = cls()

        delete = env.get(_ENV_DELETE_SOURCES)
        if delete is not None:
            settings = replace(settings, delete_sources=delete.strip().lower() in _TRUE_VALUES)

        separator = env.get(_ENV_SEPARATOR)
        if separator is not None:
            settings = replace(settings, separator=decode_escapes(separator))

        max_depth = env.get(_ENV_MAX_DEPTH)
        if max_depth is not None and max_depth.strip():
            settings = replace(settings, max_depth=parse_max_depth(max_depth))

        return settings

    def override(self, **changes) -> MergeSettings:
        """Return a copy with every non-None keyword applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def decode_escapes(value: str) -> str:
    r"""Turn ``\n``, ``\t``, ``\r`` and ``\\`` written in shell text into characters."""
    out = []
    i = 0
    while i < len(value):
        pair = value[i:i + 2]
        if pair in _ESCAPES:
            out.append(_ESCAPES[pair])
            i += 2
        else:
            out.append(value[i])
            i += 1
    return "".join(out)


def parse_max_depth(value: str) -> int:
    try:
        depth = int(value)
    except ValueError:
        raise ValueError(f"{_ENV_MAX_DEPTH} must be a positive integer, got {value!r}") from None
    if depth < 1:
        raise ValueError(f"{_ENV_MAX_DEPTH} must be a positive integer, got {value!r}")
    return depth
