"""Safe reading and atomic rewriting of flashcard Markdown files."""

from __future__ import annotations

import os
import stat
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import TextIO

from .constants import DEFAULT_MAX_FILE_SIZE, DEFAULT_MAX_LINE_LENGTH, MARKDOWN_EXTENSIONS
from .document import Document, enforce_line_length
from .exceptions import LineTooLongError

MAX_FILE_SIZE_ENV_VAR = "INKA_EDIT_MAX_FILE_SIZE"
MAX_LINE_LENGTH_ENV_VAR = "INKA_EDIT_MAX_LINE_LENGTH"

Fingerprint = tuple[int | None, int | None, int, int]


class ReadDocumentError(Exception):
    """Raised when a Markdown file cannot be loaded as a document."""


def _env_limit(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default

    try:
        limit = int(raw)
    except ValueError as error:
        raise ValueError(f"Invalid value for {name}: {raw} (expected positive integer)") from error

    if limit <= 0:
        raise ValueError(f"{name} must be a positive integer, got {limit}.")
    return limit


def get_max_file_size(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Return the file size limit in bytes.

    `INKA_EDIT_MAX_FILE_SIZE` takes precedence over `default`.

    Raises:
        ValueError: If the environment variable holds anything but a positive integer.
    """
    return _env_limit(MAX_FILE_SIZE_ENV_VAR, default)


def get_max_line_length(default: int = DEFAULT_MAX_LINE_LENGTH) -> int:
    """Return the line length limit in characters.

    `INKA_EDIT_MAX_LINE_LENGTH` takes precedence over `default`.

    Raises:
        ValueError: If the environment variable holds anything but a positive integer.
    """
    return _env_limit(MAX_LINE_LENGTH_ENV_VAR, default)


def _is_symlink(candidate: Path) -> bool:
    try:
        return candidate.is_symlink()
    except OSError:
        return False


def contains_symlink(path: Path) -> bool:
    """Return True when `path` or one of its ancestors is a symbolic link."""
    return any(_is_symlink(candidate) for candidate in (path, *path.parents))


def normalize_filepath(raw_path: str, base_dir: Path) -> Path:
    """Turn a user-supplied path into the absolute path of a deck file.

    The file must exist, be a regular Markdown file, live under `base_dir`,
    and be reachable without following a symbolic link.

    Args:
        raw_path: Path given on the command line.
        base_dir: Resolved working directory the file must live under.

    Returns:
        Path: Resolved path to the deck file.

    Raises:
        ValueError: Describing the first check that failed.

    Examples:
        normalize_filepath("decks/rust.md", Path.cwd().resolve())
    """
    path = Path(raw_path).expanduser()
    if contains_symlink(path):
        raise ValueError(f"Symlinks are not supported for security reasons: {path}")

    try:
        resolved = path.resolve(strict=True)
    except FileNotFoundError as error:
        raise ValueError(f"{path} does not exist.") from error
    except OSError as error:
        raise ValueError(f"Error resolving {path}: {error}") from error

    if not resolved.is_file():
        raise ValueError(f"{resolved} is not a regular file.")

    if not resolved.is_relative_to(base_dir):
        raise ValueError(f"{resolved} is outside of the working directory {base_dir}.")

    if resolved.suffix.lower() not in MARKDOWN_EXTENSIONS:
        raise ValueError(
            f"{resolved} is not a Markdown file.\n"
            f"Supported extensions are: {', '.join(MARKDOWN_EXTENSIONS)}"
        )

    return resolved


def collect_file_stat(filepath: Path) -> os.stat_result:
    """Stat a deck file without following links.

    Raises:
        IOError: If the file cannot be stat'ed, is a symlink, or is not a
            regular file (FIFOs, sockets, and devices are refused).
    """
    try:
        stat_result = os.stat(filepath, follow_symlinks=False)
    except OSError as error:
        raise IOError(f"Error accessing {filepath}: {error}") from error

    mode = stat_result.st_mode
    if stat.S_ISLNK(mode):
        raise IOError(f"Symlinks are not supported: {filepath}.")
    if not stat.S_ISREG(mode):
        raise IOError(f"{filepath} is not a regular file.")

    return stat_result


def enforce_file_size(stat_result: os.stat_result, max_size: int, filepath: Path):
    """Raise IOError when the file is larger than `max_size` bytes."""
    if stat_result.st_size > max_size:
        raise IOError(f"{filepath} exceeds the maximum allowed size of {max_size} bytes.")


def _fingerprint(stat_result: os.stat_result) -> Fingerprint:
    return (
        getattr(stat_result, "st_ino", None),
        getattr(stat_result, "st_dev", None),
        stat_result.st_size,
        stat_result.st_mtime_ns,
    )


def ensure_file_unchanged(
    expected_stat: os.stat_result, current_stat: os.stat_result, filepath: Path
):
    """Refuse to continue when the file was replaced or modified meanwhile.

    Two snapshots match when inode, device, size and modification time agree.

    Raises:
        IOError: If the snapshots differ.
    """
    if _fingerprint(expected_stat) != _fingerprint(current_stat):
        raise IOError(f"{filepath} changed during processing; refusing to overwrite.")


def safe_read(filepath: Path) -> TextIO:
    """Open a deck file as UTF-8 text without translating line terminators.

    Raises:
        IOError: If the file is missing, unreadable, or a directory.
    """
    try:
        return open(filepath, "r", encoding="UTF-8", newline="")
    except (FileNotFoundError, PermissionError, IsADirectoryError, NotADirectoryError) as error:
        raise IOError(f"Error accessing {filepath}: {error}") from error


def read_document(filepath: Path, max_line_length: int = DEFAULT_MAX_LINE_LENGTH) -> Document:
    """Read a deck file into a `Document`.

    Args:
        filepath: Path returned by `normalize_filepath`.
        max_line_length: Longest line accepted, in characters.

    Returns:
        Document: The file's lines and terminator style.

    Raises:
        ReadDocumentError: If the file is unreadable, not valid UTF-8, or has
            a line longer than `max_line_length`.
    """
    try:
        with safe_read(filepath) as handle:
            text = handle.read()
    except UnicodeDecodeError as error:
        raise ReadDocumentError(f"Invalid UTF-8 sequence in {filepath}: {error}") from error
    except IOError as error:
        raise ReadDocumentError(str(error)) from error

    document = Document.from_text(text)
    try:
        enforce_line_length(document.lines, max_line_length)
    except LineTooLongError as error:
        raise ReadDocumentError(
            f"{filepath} contains a line at line {error.line_number} "
            f"exceeding the maximum allowed length of {error.max_line_length} characters."
        ) from error

    return document


def _write_temp_copy(
    document: Document,
    filepath: Path,
    source_stat: os.stat_result,
    warn: Callable[[str], None] | None,
) -> Path:
    """Write `document` next to `filepath` with the source file's mode and owner.

    The temporary file is removed again if any step fails.
    """
    handle = tempfile.NamedTemporaryFile(
        mode="w", encoding="UTF-8", newline="", delete=False, dir=filepath.parent
    )
    temp_path = Path(handle.name)
    try:
        with handle:
            handle.write(document.to_text())
            handle.flush()
            os.fsync(handle.fileno())

        os.chmod(temp_path, stat.S_IMODE(source_stat.st_mode))

        uid = getattr(source_stat, "st_uid", None)
        gid = getattr(source_stat, "st_gid", None)
        if uid is not None and gid is not None and hasattr(os, "chown"):
            try:
                os.chown(temp_path, uid, gid)
            except PermissionError:
                # Changing owner needs privileges; the rewrite still goes ahead.
                if warn is not None:
                    warn(
                        f"Warning: Could not preserve file ownership for {filepath.name} "
                        "(requires elevated privileges)"
                    )
    except OSError:
        temp_path.unlink(missing_ok=True)
        raise

    return temp_path


def write_document(
    document: Document,
    filepath: Path,
    expected_stat: os.stat_result,
    initial_stat: os.stat_result,
    warn: Callable[[str], None] | None = None,
):
    """Replace a deck file with `document` in one atomic rename.

    The file is checked against `expected_stat` first, so edits made by
    another program since the read are never overwritten. The new file keeps
    the old mode, owner (when permitted) and access time.

    Args:
        document: Content to write.
        filepath: Deck file to replace.
        expected_stat: Snapshot taken right after reading.
        initial_stat: Snapshot taken before reading; its access time is restored.
        warn: Receives non-fatal warnings such as a failed ownership change.

    Raises:
        IOError: If the file changed since `expected_stat` or cannot be replaced.
    """
    ensure_file_unchanged(expected_stat, collect_file_stat(filepath), filepath)

    temp_path = _write_temp_copy(document, filepath, expected_stat, warn)
    try:
        os.replace(temp_path, filepath)
    except OSError:
        temp_path.unlink(missing_ok=True)
        raise

    # Only the access time is restored; mtime records the rewrite.
    os.utime(filepath, ns=(initial_stat.st_atime_ns, filepath.stat().st_mtime_ns))
