"""Editing-mode markers and the reversible answer prefix transform.

Entering editing mode brackets a card with three marker lines and strips the
``>`` prefix from its answer lines; exiting restores the prefixes and removes
the markers. The markers are the only record of the editing state, so every
function here rediscovers them from the document it is given.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .config import InkaConfig, validate_config
from .constants import ANSWER_PREFIX, ANSWER_PREFIX_PATTERN
from .detection import find_card, is_answer, is_blank
from .exceptions import AlreadyEditingError, NotEditingError, StrayMarkerError
from .models import Card, Region

logger = logging.getLogger(__name__)


def is_editing(lines: Sequence[str], config: InkaConfig | None = None) -> bool:
    """Return True when any line contains the edit start marker."""
    config = config or InkaConfig()
    return any(config.edit_start_marker in line for line in lines)


def find_region(lines: Sequence[str], config: InkaConfig | None = None) -> Region | None:
    """Locate the marker region of a card being edited.

    Records the first line containing each marker in a single forward scan.
    Markers are matched as substrings so wrapped or indented markers are still
    found.

    Args:
        lines: Document lines without line terminators.
        config: Configuration holding the marker strings.

    Returns:
        Region | None: One-based marker positions, or None when the edit start
            or edit end marker is missing or the markers are out of order.

    Examples:
        find_region(["<!--INKA_EDIT_START-->", "1. Q?", "<!--INKA_EDIT_END-->"])
        # Region(edit_start_line=1, answer_start_line=None, edit_end_line=3)
    """
    config = config or InkaConfig()

    edit_start: int | None = None
    answer_start: int | None = None
    edit_end: int | None = None

    for line_number, line in enumerate(lines, start=1):
        if edit_start is None and config.edit_start_marker in line:
            edit_start = line_number
        if answer_start is None and config.answer_start_marker in line:
            answer_start = line_number
        if edit_end is None and config.edit_end_marker in line:
            edit_end = line_number

    if edit_start is None or edit_end is None or edit_start >= edit_end:
        return None

    if answer_start is not None and not edit_start < answer_start < edit_end:
        logger.debug("Answer start marker at line %d lies outside the region", answer_start)
        return None

    return Region(
        edit_start_line=edit_start,
        answer_start_line=answer_start,
        edit_end_line=edit_end,
    )


def insert_markers(
    lines: Sequence[str], card: Card, config: InkaConfig | None = None
) -> list[str]:
    """Bracket a card with the editing markers.

    The edit end marker goes after the card, the answer start marker before
    the first answer line, and the edit start marker before the card's first
    line. Insertions run from the bottom up so each target line number still
    refers to the original document.

    Args:
        lines: Document lines the card was detected in.
        card: Card bounds from `find_card`.
        config: Configuration holding the marker strings.

    Returns:
        list[str]: New document lines including the markers.
    """
    config = config or InkaConfig()

    insertions = [(card.end_line + 1, config.edit_end_marker)]
    if card.answer_start_line is not None:
        insertions.append((card.answer_start_line, config.answer_start_marker))
    insertions.append((card.start_line, config.edit_start_marker))

    updated = list(lines)
    for line_number, marker in sorted(insertions, key=lambda item: item[0], reverse=True):
        updated.insert(line_number - 1, marker)
        logger.debug("Inserted %s at line %d", marker, line_number)

    return updated


def remove_markers(
    lines: Sequence[str], config: InkaConfig | None = None
) -> tuple[list[str], int]:
    """Delete every line that contains one of the editing markers.

    Args:
        lines: Document lines.
        config: Configuration holding the marker strings.

    Returns:
        tuple[list[str], int]: New document lines and the number of marker
            lines removed.
    """
    config = config or InkaConfig()

    marker_indices = [
        index
        for index, line in enumerate(lines)
        if any(marker in line for marker in config.markers)
    ]

    updated = list(lines)
    for index in reversed(marker_indices):
        logger.debug("Removing marker at line %d: %s", index + 1, updated[index])
        del updated[index]

    return updated, len(marker_indices)


def _answer_indices(lines: Sequence[str], config: InkaConfig) -> range | None:
    region = find_region(lines, config)
    if region is None or region.answer_start_line is None:
        return None

    # Zero-based indices of the lines strictly between the two markers
    return range(region.answer_start_line, region.edit_end_line - 1)


def strip_answer_prefixes(
    lines: Sequence[str], config: InkaConfig | None = None
) -> tuple[list[str], bool]:
    """Remove the ``>`` prefix from the answer lines of the marker region.

    Each line between the answer start and edit end markers loses its leading
    whitespace, ``>`` and at most one following space. A line left with only
    whitespace becomes empty, so ``">"`` and ``"> "`` both turn into ``""``.

    Args:
        lines: Document lines containing a marker region.
        config: Configuration holding the marker strings.

    Returns:
        tuple[list[str], bool]: New document lines and whether any line changed.
            Nothing changes when there is no region or it has no answer start
            marker.

    Examples:
        strip_answer_prefixes(["<!--INKA_EDIT_START-->", "1. Q?",
                               "<!--INKA_ANSWER_START-->", "> A", "<!--INKA_EDIT_END-->"])
        # ([..., "A", ...], True)
    """
    config = config or InkaConfig()
    updated = list(lines)

    indices = _answer_indices(updated, config)
    if indices is None:
        logger.debug("No answer region found for prefix removal")
        return updated, False

    changed = False
    for index in indices:
        line = updated[index]
        match = ANSWER_PREFIX_PATTERN.match(line)
        if match is None:
            continue

        stripped = line[match.end() :]
        if is_blank(stripped):
            stripped = ""
        if stripped != line:
            updated[index] = stripped
            changed = True

    return updated, changed


def apply_answer_prefixes(
    lines: Sequence[str], config: InkaConfig | None = None
) -> tuple[list[str], bool]:
    """Prefix the lines of the marker region's answer block with ``"> "``.

    Lines that are already answer lines are left alone, so applying twice is
    the same as applying once. An empty line becomes exactly ``"> "``.

    Args:
        lines: Document lines containing a marker region.
        config: Configuration holding the marker strings.

    Returns:
        tuple[list[str], bool]: New document lines and whether any line changed.
            Nothing changes when there is no region or it has no answer start
            marker.
    """
    config = config or InkaConfig()
    updated = list(lines)

    indices = _answer_indices(updated, config)
    if indices is None:
        logger.debug("No answer region found for prefix addition")
        return updated, False

    changed = False
    for index in indices:
        if not is_answer(updated[index]):
            updated[index] = f"{ANSWER_PREFIX}{updated[index]}"
            changed = True

    return updated, changed


def enter_editing(
    lines: Sequence[str], line_number: int, config: InkaConfig | None = None
) -> list[str]:
    """Enter editing mode for the card enclosing a line.

    The input sequence is never modified; on failure the caller still holds
    the untouched document.

    Args:
        lines: Document lines without line terminators.
        line_number: One-based line inside the card to edit.
        config: Configuration holding the marker strings.

    Returns:
        list[str]: Document with markers inserted and answer prefixes stripped.

    Raises:
        AlreadyEditingError: If the document already contains an edit start marker.
        StrayMarkerError: If the document contains an answer start or edit end
            marker without an edit start marker.
        NotInSectionError: If the line is not inside a delimited section.
        NoQuestionFoundError: If no numbered question precedes the line.
        ConfigError: If the configuration fails validation.

    Examples:
        enter_editing(["---", "1. Q?", "> A", "---"], 2)
        # ["---", "<!--INKA_EDIT_START-->", "1. Q?", "<!--INKA_ANSWER_START-->",
        #  "A", "<!--INKA_EDIT_END-->", "---"]
    """
    config = config or InkaConfig()
    validate_config(config)

    if is_editing(lines, config):
        raise AlreadyEditingError()

    # A leftover marker would be found before the inserted ones and hide the region.
    for number, line in enumerate(lines, start=1):
        for marker in config.markers:
            if marker in line:
                raise StrayMarkerError(number, marker)

    card = find_card(lines, line_number)
    updated = insert_markers(lines, card, config)
    updated, changed = strip_answer_prefixes(updated, config)
    logger.debug("Entered editing mode (prefixes stripped: %s)", changed)
    return updated


def exit_editing(lines: Sequence[str], config: InkaConfig | None = None) -> list[str]:
    """Leave editing mode, restoring answer prefixes and removing markers.

    Prefixes are restored first because the answer block is located through
    the markers.

    Args:
        lines: Document lines containing a marker region.
        config: Configuration holding the marker strings.

    Returns:
        list[str]: Document without markers and with answer prefixes applied.

    Raises:
        NotEditingError: If no complete marker region is present.
        ConfigError: If the configuration fails validation.
    """
    config = config or InkaConfig()
    validate_config(config)

    if find_region(lines, config) is None:
        raise NotEditingError()

    updated, changed = apply_answer_prefixes(lines, config)
    updated, removed = remove_markers(updated, config)
    logger.debug(
        "Exited editing mode (prefixes applied: %s, markers removed: %d)", changed, removed
    )
    return updated
