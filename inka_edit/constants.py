"""Constants used across the inka-edit package."""

from __future__ import annotations

import re

from .config import InkaConfig

DEFAULT_CONFIG = InkaConfig()

# Card patterns
SECTION_DELIMITER = "---"
QUESTION_PATTERN = re.compile(r"^\s*(\d+)\.\s+(.*)$")
ANSWER_PATTERN = re.compile(r"^\s*>\s*(.*)$")
ID_COMMENT_PATTERN = re.compile(r"^\s*<!--ID:(\d+)-->\s*$")
BLANK_PATTERN = re.compile(r"^\s*$")

# Answer prefix handling
ANSWER_PREFIX = "> "
ANSWER_PREFIX_PATTERN = re.compile(r"^\s*>\s?")
ANSWER_LOOKAHEAD_LINES = 3

# Editing markers
EDIT_START_MARKER = DEFAULT_CONFIG.edit_start_marker
ANSWER_START_MARKER = DEFAULT_CONFIG.answer_start_marker
EDIT_END_MARKER = DEFAULT_CONFIG.edit_end_marker

# Filesystem defaults
DEFAULT_MAX_FILE_SIZE = DEFAULT_CONFIG.max_file_size
DEFAULT_MAX_LINE_LENGTH = DEFAULT_CONFIG.max_line_length
MARKDOWN_EXTENSIONS = (".md", ".markdown")
