"""Card boundary detection inside ``---`` delimited sections."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence

from .constants import (
    ANSWER_LOOKAHEAD_LINES,
    ANSWER_PATTERN,
    BLANK_PATTERN,
    ID_COMMENT_PATTERN,
    QUESTION_PATTERN,
    SECTION_DELIMITER,
)
from .exceptions import NoQuestionFoundError, NotInSectionError
from .models import Card, ScanContext, ScanState

logger = logging.getLogger(__name__)

ScanStep = Callable[[ScanContext, Sequence[str], int], bool]


def is_delimiter(line: str) -> bool:
    """Return True when the line is exactly the ``---`` section delimiter."""
    return line == SECTION_DELIMITER


def is_question(line: str) -> bool:
    """Return True when the line starts a numbered question such as ``1. Why?``."""
    return QUESTION_PATTERN.match(line) is not None


def is_answer(line: str) -> bool:
    """Return True when the line carries the ``>`` answer notation."""
    return ANSWER_PATTERN.match(line) is not None


def is_id_comment(line: str) -> bool:
    """Return True when the line is a card ID comment such as ``<!--ID:42-->``."""
    return ID_COMMENT_PATTERN.match(line) is not None


def is_blank(line: str) -> bool:
    return BLANK_PATTERN.match(line) is not None


def is_inside_section(lines: Sequence[str], line_number: int) -> bool:
    """Determine whether a line lies inside a delimited section.

    Every delimiter line flips the section state: the first one opens a
    section and the next one closes it. Delimiter lines themselves are never
    inside a section.

    Args:
        lines: Document lines without line terminators.
        line_number: One-based line to test.

    Returns:
        bool: True when the line is between an opening and a closing delimiter.

    Examples:
        is_inside_section(["---", "1. Q?", "---"], 2)  # True
        is_inside_section(["---", "1. Q?", "---"], 1)  # False
    """
    if line_number < 1 or line_number > len(lines):
        return False

    if is_delimiter(lines[line_number - 1]):
        return False

    in_section = False
    for line in lines[: line_number - 1]:
        if is_delimiter(line):
            in_section = not in_section

    return in_section


def _try_find_question(ctx: ScanContext, lines: Sequence[str], line_number: int) -> bool:
    """Advance an upward scan for the question that owns a line.

    The scan stops without a result at the first delimiter, which can only be
    reached above the starting line since that line is inside a section.

    Args:
        ctx: Scan context to update.
        lines: Document lines.
        line_number: One-based line being scanned.

    Returns:
        bool: True when the scan has resolved (found or stopped).
    """
    line = lines[line_number - 1]

    if is_question(line):
        ctx.state = ScanState.FOUND
        ctx.line_number = line_number
        return True

    if is_delimiter(line):
        ctx.state = ScanState.STOPPED
        return True

    return False


def _try_find_answer_start(ctx: ScanContext, lines: Sequence[str], line_number: int) -> bool:
    """Advance a downward scan for the first answer line of a card.

    Args:
        ctx: Scan context to update.
        lines: Document lines.
        line_number: One-based line being scanned.

    Returns:
        bool: True when the scan has resolved (found or stopped).
    """
    line = lines[line_number - 1]

    if is_answer(line):
        ctx.state = ScanState.FOUND
        ctx.line_number = line_number
        return True

    # Another card or the section end interrupts before any answer appears.
    if is_question(line) or is_id_comment(line) or is_delimiter(line):
        ctx.state = ScanState.STOPPED
        return True

    return False


def _answer_follows(lines: Sequence[str], line_number: int) -> bool:
    """Look ahead past a blank line for answers separated by a small gap.

    Args:
        lines: Document lines.
        line_number: One-based line of the blank line.

    Returns:
        bool: True when an answer line appears within the next
            `ANSWER_LOOKAHEAD_LINES` lines before any non-blank, non-answer line.
    """
    for line in lines[line_number : line_number + ANSWER_LOOKAHEAD_LINES]:
        if is_answer(line):
            return True
        if not is_blank(line):
            return False
    return False


def _try_find_end(ctx: ScanContext, lines: Sequence[str], line_number: int) -> bool:
    """Advance a downward scan for the last line of a card.

    Args:
        ctx: Scan context to update; `seen_answer` tracks answers crossed so far.
        lines: Document lines.
        line_number: One-based line being scanned.

    Returns:
        bool: True when the card ends on the line before `line_number`.
    """
    line = lines[line_number - 1]

    if is_answer(line):
        ctx.seen_answer = True

    ends_card = is_question(line) or is_id_comment(line) or is_delimiter(line)
    if not ends_card and ctx.seen_answer and is_blank(line):
        ends_card = not _answer_follows(lines, line_number)

    if ends_card:
        ctx.state = ScanState.FOUND
        ctx.line_number = line_number - 1
        return True

    return False


def _scan(lines: Sequence[str], line_numbers: Iterable[int], step: ScanStep) -> ScanContext:
    ctx = ScanContext()
    for line_number in line_numbers:
        if step(ctx, lines, line_number):
            break
    return ctx


def find_card(lines: Sequence[str], line_number: int) -> Card:
    """Compute the bounds of the card that encloses a line.

    Scans upward for the owning numbered question (starting below the line
    when it is the question's ID comment), attaches an ID comment directly
    above it, then scans downward twice: once for the first answer
    line and once for the end of the card. The end is the line before the next
    question, ID comment, or delimiter, or the line before a blank line that
    follows answers when no further answer appears within the next three
    lines. This blank-line rule is a heuristic and can cut answers separated by
    longer gaps.

    Args:
        lines: Document lines without line terminators.
        line_number: One-based line inside the card.

    Returns:
        Card: One-based bounds of the enclosing card.

    Raises:
        NotInSectionError: If the line is not inside a delimited section.
        NoQuestionFoundError: If no numbered question precedes the line within
            its section.

    Examples:
        find_card(["---", "1. Q?", "", "> A", "---"], 4)
        # Card(start_line=2, question_line=2, answer_start_line=4, end_line=4)
    """
    if not is_inside_section(lines, line_number):
        logger.debug("Line %d is not inside a section", line_number)
        raise NotInSectionError(line_number)

    # An ID comment belongs to the question right below it.
    scan_from = line_number
    if (
        is_id_comment(lines[line_number - 1])
        and line_number < len(lines)
        and is_question(lines[line_number])
    ):
        scan_from = line_number + 1

    question_ctx = _scan(lines, range(scan_from, 0, -1), _try_find_question)
    if question_ctx.state is not ScanState.FOUND or question_ctx.line_number is None:
        logger.debug("No numbered question above line %d", line_number)
        raise NoQuestionFoundError(line_number)
    question_line = question_ctx.line_number

    start_line = question_line
    if question_line > 1 and is_id_comment(lines[question_line - 2]):
        start_line = question_line - 1

    following = range(question_line + 1, len(lines) + 1)
    answer_ctx = _scan(lines, following, _try_find_answer_start)
    answer_start_line = answer_ctx.line_number if answer_ctx.state is ScanState.FOUND else None

    end_ctx = _scan(lines, following, _try_find_end)
    end_line = end_ctx.line_number if end_ctx.state is ScanState.FOUND else len(lines)
    end_line = max(end_line, question_line)

    card = Card(
        start_line=start_line,
        question_line=question_line,
        answer_start_line=answer_start_line,
        end_line=end_line,
    )
    logger.debug("Card bounds for line %d: %s", line_number, card)
    return card


def find_answer_lines(lines: Sequence[str], card: Card) -> list[int]:
    """List the answer lines of a card.

    Args:
        lines: Document lines the card was detected in.
        card: Card bounds from `find_card`.

    Returns:
        list[int]: One-based numbers of every answer line between the card's
            first answer line and its end; empty for answer-less cards.
    """
    if card.answer_start_line is None:
        return []

    return [
        line_number
        for line_number in range(card.answer_start_line, card.end_line + 1)
        if is_answer(lines[line_number - 1])
    ]
