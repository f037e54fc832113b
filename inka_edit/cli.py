"""
Toggles inka editing mode for a flashcard in a Markdown file.
`edit` hides the answer markers of one card, `save` restores them.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from pathlib import Path

import click
from .config import ConfigError, InkaConfig, build_config
from .document import Document
from .exceptions import InkaError
from .filesystem import (
    ReadDocumentError,
    collect_file_stat,
    enforce_file_size,
    ensure_file_unchanged,
    get_max_file_size,
    get_max_line_length,
    normalize_filepath,
    read_document,
    write_document,
)
from .status import collect_status
from .toggler import enter_editing, exit_editing, is_editing

__all__ = ["cli"]


def marker_options(func: Callable) -> Callable:
    """Attach the marker override options shared by every command."""
    func = click.option("--edit-end-marker", help="Marker placed after the edited card")(func)
    func = click.option("--answer-start-marker", help="Marker placed before the answers")(func)
    func = click.option("--edit-start-marker", help="Marker placed before the edited card")(func)
    return func


def _resolve(filepath: str, **overrides: str | None) -> tuple[Path, InkaConfig]:
    base_dir = Path.cwd().resolve()
    try:
        path = normalize_filepath(filepath, base_dir)
    except ValueError as error:
        raise click.BadParameter(str(error)) from error

    try:
        config = build_config(path.parent, **overrides)
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    return path, config


def _read(path: Path, config: InkaConfig) -> tuple[Document, os.stat_result, os.stat_result]:
    try:
        max_file_size = get_max_file_size(default=config.max_file_size)
        max_line_length = get_max_line_length(default=config.max_line_length)
    except ValueError as error:
        raise click.ClickException(str(error)) from error

    try:
        initial_stat = collect_file_stat(path)
        enforce_file_size(initial_stat, max_file_size, path)
    except IOError as error:
        raise click.ClickException(str(error)) from error

    try:
        document = read_document(path, max_line_length)
    except ReadDocumentError as error:
        raise click.ClickException(str(error)) from error

    try:
        post_read_stat = collect_file_stat(path)
        ensure_file_unchanged(initial_stat, post_read_stat, path)
    except IOError as error:
        raise click.ClickException(str(error)) from error

    return document, initial_stat, post_read_stat


def _write(
    document: Document, path: Path, post_read_stat: os.stat_result, initial_stat: os.stat_result
):
    try:
        write_document(
            document,
            path,
            post_read_stat,
            initial_stat,
            warn=lambda message: click.echo(message, err=True),
        )
    except IOError as error:
        raise click.ClickException(str(error)) from error


@click.group()
@click.version_option(package_name="inka-edit")
@click.option("--debug", is_flag=True, help="Log detection and marker details to stderr")
def cli(debug: bool = False):
    """
    Edit inka flashcards without their `>` answer markers.

    Examples:
        inka-edit edit cards.md --line 12
        inka-edit save cards.md
    """
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")


@cli.command()
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--line",
    "-l",
    "line_number",
    type=click.IntRange(min=1),
    required=True,
    help="Line (1-based) inside the card to edit",
)
@marker_options
def edit(
    filepath: str,
    line_number: int,
    edit_start_marker: str | None = None,
    answer_start_marker: str | None = None,
    edit_end_marker: str | None = None,
):
    """
    Enter editing mode for the card at a line.

    Inserts the editing markers around the card and strips the `>` prefix from
    its answer lines, then rewrites the file atomically.

    Raises:
        click.BadParameter: If the path or configuration overrides are invalid.
        click.ClickException: If the file fails safety checks, is already in
            editing mode, or has no card at the line.
    """
    path, config = _resolve(
        filepath,
        edit_start_marker=edit_start_marker,
        answer_start_marker=answer_start_marker,
        edit_end_marker=edit_end_marker,
    )
    document, initial_stat, post_read_stat = _read(path, config)

    try:
        lines = enter_editing(document.lines, line_number, config)
    except InkaError as error:
        raise click.ClickException(f"Failed to enter inka editing mode: {error}") from error

    _write(document.with_lines(lines), path, post_read_stat, initial_stat)
    click.echo(f"Entered inka editing mode in {path.name}. Run `inka-edit save` when done.")


@cli.command()
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
@marker_options
def save(
    filepath: str,
    edit_start_marker: str | None = None,
    answer_start_marker: str | None = None,
    edit_end_marker: str | None = None,
):
    """
    Exit editing mode, restoring answer markers and removing the editing markers.

    Raises:
        click.BadParameter: If the path or configuration overrides are invalid.
        click.ClickException: If the file fails safety checks or is not in
            editing mode.
    """
    path, config = _resolve(
        filepath,
        edit_start_marker=edit_start_marker,
        answer_start_marker=answer_start_marker,
        edit_end_marker=edit_end_marker,
    )
    document, initial_stat, post_read_stat = _read(path, config)

    try:
        lines = exit_editing(document.lines, config)
    except InkaError as error:
        raise click.ClickException(f"Failed to exit inka editing mode: {error}") from error

    _write(document.with_lines(lines), path, post_read_stat, initial_stat)
    click.echo(f"Exited inka editing mode in {path.name}. Answer markers restored.")


@cli.command()
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--line",
    "-l",
    "line_number",
    type=click.IntRange(min=1),
    help="Line (1-based) to detect a card at",
)
@marker_options
def status(
    filepath: str,
    line_number: int | None = None,
    edit_start_marker: str | None = None,
    answer_start_marker: str | None = None,
    edit_end_marker: str | None = None,
):
    """Show the editing state of a file and the card bounds at a line."""
    path, config = _resolve(
        filepath,
        edit_start_marker=edit_start_marker,
        answer_start_marker=answer_start_marker,
        edit_end_marker=edit_end_marker,
    )
    document, _, _ = _read(path, config)

    report = collect_status(document.lines, line_number, config)
    for line in report.render():
        click.echo(line)


@cli.command()
@click.argument("filepaths", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@marker_options
@click.pass_context
def check(
    ctx: click.Context,
    filepaths: tuple[str, ...],
    edit_start_marker: str | None = None,
    answer_start_marker: str | None = None,
    edit_end_marker: str | None = None,
):
    """
    Fail when any file is still in editing mode.

    Meant for pre-commit hooks: a file saved with its answer markers stripped
    would lose its answers.
    """
    editing_files = []
    for filepath in filepaths:
        path, config = _resolve(
            filepath,
            edit_start_marker=edit_start_marker,
            answer_start_marker=answer_start_marker,
            edit_end_marker=edit_end_marker,
        )
        document, _, _ = _read(path, config)
        if is_editing(document.lines, config):
            editing_files.append(path)

    for path in editing_files:
        click.echo(f"{path}: still in inka editing mode; run `inka-edit save` first.", err=True)

    if editing_files:
        ctx.exit(1)


if __name__ == "__main__":
    cli()
