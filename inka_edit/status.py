"""Status report describing the editing state of a document."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .config import InkaConfig
from .detection import find_card, is_inside_section
from .exceptions import DetectionError
from .models import Card, Region
from .toggler import find_region, is_editing


@dataclass
class StatusReport:
    """Snapshot of a document's editing state and the card at a line.

    Attributes:
        editing: Whether an edit start marker is present.
        line_number: One-based line the card lookup started from, if any.
        in_section: Whether `line_number` lies inside a delimited section.
        card: Card bounds at `line_number` when detection succeeded.
        card_error: Detection error message when it failed inside a section.
        region: Marker region when one is present.
    """

    editing: bool
    line_number: int | None = None
    in_section: bool = False
    card: Card | None = None
    card_error: str | None = None
    region: Region | None = None

    def render(self) -> list[str]:
        """Format the report as human-readable lines."""
        output = ["=== inka-edit status ===", f"In editing mode: {self.editing}"]

        if self.line_number is not None:
            output.append(f"Line: {self.line_number}")
            output.append(f"In inka section: {self.in_section}")

        if self.card is not None:
            output.extend(
                [
                    "Card bounds:",
                    f"  Start line: {self.card.start_line}",
                    f"  Question line: {self.card.question_line}",
                    f"  Answer start: {self.card.answer_start_line}",
                    f"  End line: {self.card.end_line}",
                ]
            )
        elif self.card_error is not None:
            output.append(f"Card bounds error: {self.card_error}")

        if self.region is not None:
            output.extend(
                [
                    "Editing region:",
                    f"  Edit start: {self.region.edit_start_line}",
                    f"  Answer start: {self.region.answer_start_line}",
                    f"  Edit end: {self.region.edit_end_line}",
                ]
            )

        return output


def collect_status(
    lines: Sequence[str], line_number: int | None = None, config: InkaConfig | None = None
) -> StatusReport:
    """Inspect a document without modifying it.

    Args:
        lines: Document lines without line terminators.
        line_number: Optional one-based line to detect a card at.
        config: Configuration holding the marker strings.

    Returns:
        StatusReport: Editing flag, marker region, and card details for
            `line_number` when given.

    Examples:
        collect_status(["---", "1. Q?", "> A", "---"], 2).render()
    """
    config = config or InkaConfig()
    report = StatusReport(editing=is_editing(lines, config), region=find_region(lines, config))

    if line_number is None:
        return report

    report.line_number = line_number
    report.in_section = is_inside_section(lines, line_number)
    if report.in_section:
        try:
            report.card = find_card(lines, line_number)
        except DetectionError as error:
            report.card_error = str(error)

    return report
