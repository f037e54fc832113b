"""Data models for inka-edit."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class ScanState(Enum):
    """States of a single directional line scan.

    Attributes:
        SEEKING: Still looking for the target line.
        FOUND: Target line located; the scan is complete.
        STOPPED: A boundary ended the scan before the target was found.
    """

    SEEKING = auto()
    FOUND = auto()
    STOPPED = auto()


@dataclass
class ScanContext:
    """Track the progress of a directional scan.

    Attributes:
        state: Current scan state.
        line_number: One-based line recorded when the scan resolves, if any.
        seen_answer: Whether an answer line has been crossed so far.
    """

    state: ScanState = ScanState.SEEKING
    line_number: int | None = None
    seen_answer: bool = False


@dataclass(frozen=True)
class Card:
    """Line range of one question/answer card.

    All line numbers are one-based.

    Attributes:
        start_line: ID comment line when present, otherwise the question line.
        question_line: Line holding the numbered question.
        answer_start_line: First ``>`` answer line, or None for answer-less cards.
        end_line: Last line belonging to the card.
    """

    start_line: int
    question_line: int
    answer_start_line: int | None
    end_line: int


@dataclass(frozen=True)
class Region:
    """Marker region inserted while a card is being edited.

    All line numbers are one-based.

    Attributes:
        edit_start_line: Line holding the edit start marker.
        answer_start_line: Line holding the answer start marker, or None.
        edit_end_line: Line holding the edit end marker.
    """

    edit_start_line: int
    answer_start_line: int | None
    edit_end_line: int
