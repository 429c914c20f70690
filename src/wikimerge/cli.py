#!/usr/bin/env python3
"""wikimerge CLI."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from wikimerge.config import MergeSettings, decode_escapes
from wikimerge.errors import MergeError, ReadError
from wikimerge.links import extract_links
from wikimerge.log import setup_logging
from wikimerge.merge import merge_document
from wikimerge.store import VaultStore

_MERGE_SUCCESS = "Wiki links merged successfully!"
_MERGE_FAILED = "Failed to merge wiki links"


def _load_settings() -> MergeSettings:
    """Read WIKIMERGE_* settings, reporting bad values as usage errors."""
    try:
        return MergeSettings.from_env()
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc


# ── Main group ───────────────────────────────────────────────────────────────


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log every document visited.")
@click.option("-q", "--quiet", is_flag=True, help="Only log errors.")
def wikimerge(verbose: bool, quiet: bool):
    """Merge [[wiki-linked]] notes into a single document."""
    level = logging.INFO
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    setup_logging(level)


@wikimerge.command("version")
def version_cmd():
    """Print installed version."""
    from wikimerge import __version__

    click.echo(__version__)


# ── merge ────────────────────────────────────────────────────────────────────


@wikimerge.command()
@click.argument("root", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--vault",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Vault directory used to resolve links (default: ROOT's folder)",
)
@click.option("--separator", default=None, help=r"Text around each inlined note ('\n' escapes allowed)")
@click.option("--delete/--no-delete", "delete", default=None, help="Delete inlined source notes")
@click.option("--permanent", is_flag=True, help="Unlink deleted notes instead of moving them to .trash/")
@click.option("--max-depth", type=click.IntRange(min=1), default=None, help="Maximum link nesting to expand")
@click.option("--dry-run", is_flag=True, help="Report what would happen without writing or deleting")
@click.option("--stdout", "to_stdout", is_flag=True, help="Print merged content instead of writing it")
def merge(
    root: Path,
    vault: Path | None,
    separator: str | None,
    delete: bool | None,
    permanent: bool,
    max_depth: int | None,
    dry_run: bool,
    to_stdout: bool,
):
    """Inline every note ROOT links to, recursively, and save ROOT."""
    settings = _load_settings().override(
        separator=decode_escapes(separator) if separator is not None else None,
        delete_sources=delete,
        max_depth=max_depth,
    )

    store = VaultStore(vault or root.parent, trash=not permanent)
    try:
        root_id = store.document_id(root)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="ROOT") from exc

    try:
        report = merge_document(store, root_id, settings, dry_run=dry_run or to_stdout)
    except MergeError as exc:
        raise click.ClickException(f"{_MERGE_FAILED}: {exc}") from exc

    if to_stdout:
        click.echo(report.content, nl=False)
        return

    if dry_run:
        click.echo(f"Dry run: {report.summary()}")
        for document_id in report.planned:
            click.echo(f"  would delete {document_id}")
        return

    click.echo(_MERGE_SUCCESS)
    click.echo(report.summary())
    for document_id, reason in report.failed_deletions.items():
        click.echo(f"  could not delete {document_id}: {reason}", err=True)


# ── links ────────────────────────────────────────────────────────────────────


@wikimerge.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def links(input_file: Path):
    """List the link targets in INPUT_FILE that a merge would try to inline."""
    try:
        text = input_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise click.ClickException(str(ReadError(str(input_file), str(exc)))) from exc

    for target in extract_links(text):
        click.echo(target)


if __name__ == "__main__":
    wikimerge()
