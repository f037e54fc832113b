"""Conversion between document text and the line sequence the core works on."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from difflib import SequenceMatcher

from .exceptions import LineTooLongError

LINE_BREAK_PATTERN = re.compile(r"(\r\n|\n)")


@dataclass
class Document:
    """Lines of a text document plus what is needed to rebuild its text exactly.

    Lines are split on both ``\\n`` and ``\\r\\n``; each line remembers its own
    terminator so files mixing the two are written back unchanged.

    Attributes:
        lines: Lines without line terminators.
        endings: Terminator that followed each line (``""`` for a final line
            without one).
        newline: Dominant terminator, used for lines added later.
        trailing_newline: Whether the text ended with a terminator.

    Examples:
        doc = Document.from_text("---\\n1. Q?\\r\\n> A\\n---\\n")
        doc.lines  # ["---", "1. Q?", "> A", "---"]
        doc.to_text() == "---\\n1. Q?\\r\\n> A\\n---\\n"  # True
    """

    lines: list[str] = field(default_factory=list)
    endings: list[str] = field(default_factory=list)
    newline: str = "\n"
    trailing_newline: bool = True

    @classmethod
    def from_text(cls, text: str) -> Document:
        """Split text into lines, remembering each line's terminator.

        Only ``\\n`` and ``\\r\\n`` separate lines; a lone ``\\r`` and other
        Unicode line boundaries stay inside their line.
        """
        crlf_count = text.count("\r\n")
        newline = "\r\n" if crlf_count > text.count("\n") - crlf_count else "\n"
        if not text:
            return cls(newline=newline, trailing_newline=False)

        parts = LINE_BREAK_PATTERN.split(text)
        lines = parts[0::2]
        endings = [*parts[1::2], ""]

        trailing_newline = lines[-1] == ""
        if trailing_newline:
            lines.pop()
            endings.pop()

        return cls(
            lines=lines, endings=endings, newline=newline, trailing_newline=trailing_newline
        )

    def _resolved_endings(self, endings: list[str]) -> list[str]:
        resolved = [ending or self.newline for ending in endings]
        resolved.extend([self.newline] * (len(self.lines) - len(resolved)))
        if resolved and not self.trailing_newline:
            resolved[-1] = ""
        return resolved

    def to_text(self) -> str:
        """Join the lines back into text using the recorded terminators."""
        endings = self._resolved_endings(self.endings[: len(self.lines)])
        return "".join(line + ending for line, ending in zip(self.lines, endings))

    def with_lines(self, lines: list[str]) -> Document:
        """Return a copy holding `lines`, carrying terminators over to kept lines.

        Lines that survive from this document (unchanged or rewritten in place)
        keep their terminator; inserted lines get the dominant one.
        """
        endings: list[str] = []
        matcher = SequenceMatcher(None, self.lines, lines, autojunk=False)
        for tag, old_start, old_end, new_start, new_end in matcher.get_opcodes():
            if tag == "delete":
                continue
            kept = self.endings[old_start:old_end] if tag != "insert" else []
            for offset in range(new_end - new_start):
                endings.append(kept[offset] if offset < len(kept) else self.newline)

        updated = Document(
            lines=list(lines),
            newline=self.newline,
            trailing_newline=self.trailing_newline,
        )
        updated.endings = updated._resolved_endings(endings)
        return updated


def enforce_line_length(lines: list[str], max_line_length: int) -> None:
    """Reject documents containing overly long lines.

    Args:
        lines: Lines without line terminators.
        max_line_length: Maximum allowed length in characters.

    Raises:
        LineTooLongError: For the first line longer than `max_line_length`.
    """
    for line_number, line in enumerate(lines, start=1):
        if len(line) > max_line_length:
            raise LineTooLongError(line_number, max_line_length)
