"""
inka-edit: toggle an editing mode for inka flashcards in Markdown files.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    inka-edit edit cards.md --line 12
    inka-edit save cards.md

Library Usage:
    from pathlib import Path
    from inka_edit import Document, enter_editing, exit_editing

    document = Document.from_text(Path("cards.md").read_text())
    editing = enter_editing(document.lines, 12)
    restored = exit_editing(editing)
"""

from .config import ConfigError, InkaConfig
from .detection import find_answer_lines, find_card, is_inside_section
from .document import Document
from .exceptions import (
    AlreadyEditingError,
    DetectionError,
    EditingModeError,
    InkaError,
    LineTooLongError,
    NoQuestionFoundError,
    NotEditingError,
    NotInSectionError,
    StrayMarkerError,
)
from .models import Card, Region
from .status import StatusReport, collect_status
from .toggler import (
    apply_answer_prefixes,
    enter_editing,
    exit_editing,
    find_region,
    insert_markers,
    is_editing,
    remove_markers,
    strip_answer_prefixes,
)

__version__ = "0.1.0"

__all__ = [
    # Detection
    "is_inside_section",
    "find_card",
    "find_answer_lines",
    # Editing mode
    "is_editing",
    "find_region",
    "insert_markers",
    "remove_markers",
    "strip_answer_prefixes",
    "apply_answer_prefixes",
    "enter_editing",
    "exit_editing",
    # Data models
    "Card",
    "Region",
    "Document",
    "StatusReport",
    "collect_status",
    # Configuration
    "InkaConfig",
    "ConfigError",
    # Exceptions
    "InkaError",
    "DetectionError",
    "NotInSectionError",
    "NoQuestionFoundError",
    "EditingModeError",
    "AlreadyEditingError",
    "NotEditingError",
    "StrayMarkerError",
    "LineTooLongError",
    # Version
    "__version__",
]
