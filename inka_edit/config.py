"""Marker and limit settings, read from ``pyproject.toml`` or ``.inka-edit.toml``."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path

CONFIG_TABLE = "inka-edit"
DOTFILE_NAME = ".inka-edit.toml"

# Files checked in each directory, in order, with the tables they may hold.
CONFIG_SOURCES: tuple[tuple[str, tuple[tuple[str, ...], ...]], ...] = (
    ("pyproject.toml", (("tool", CONFIG_TABLE),)),
    (DOTFILE_NAME, ((CONFIG_TABLE,), ("tool", CONFIG_TABLE))),
)


@dataclass
class InkaConfig:
    """Settings for editing mode.

    Attributes:
        edit_start_marker: Line inserted above the card being edited.
        answer_start_marker: Line inserted above the card's first answer line.
        edit_end_marker: Line inserted below the card being edited.
        max_file_size: Largest deck file accepted, in bytes.
        max_line_length: Longest line accepted, in characters.

    Examples:
        InkaConfig(edit_start_marker="%% edit %%", edit_end_marker="%% end %%")
    """

    edit_start_marker: str = "<!--INKA_EDIT_START-->"
    answer_start_marker: str = "<!--INKA_ANSWER_START-->"
    edit_end_marker: str = "<!--INKA_EDIT_END-->"

    max_file_size: int = 10 * 1024 * 1024
    max_line_length: int = 10_000

    @property
    def markers(self) -> tuple[str, str, str]:
        return (self.edit_start_marker, self.answer_start_marker, self.edit_end_marker)


class ConfigError(ValueError):
    """Raised for unreadable settings tables and invalid setting values."""


def load_config(search_path: Path) -> InkaConfig:
    """Find the settings that apply to a directory.

    Each directory from `search_path` up to the filesystem root is checked for
    a ``[tool.inka-edit]`` table in `pyproject.toml`, then an ``[inka-edit]``
    or ``[tool.inka-edit]`` table in `.inka-edit.toml`. The first table found
    wins, even an empty one. Files that are not valid TOML are ignored.

    Args:
        search_path: Directory to start from, usually the deck's directory.

    Returns:
        InkaConfig: Settings from the nearest table, or the defaults.

    Raises:
        ConfigError: If the nearest table is not a table or names an unknown key.
    """
    directory = search_path.resolve()

    for candidate in (directory, *directory.parents):
        for filename, table_paths in CONFIG_SOURCES:
            config = _load_from_file(candidate / filename, table_paths)
            if config is not None:
                return config

    return InkaConfig()


def _read_toml(config_file: Path) -> dict | None:
    if not config_file.is_file():
        return None

    try:
        return tomllib.loads(config_file.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError):
        return None


def _load_from_file(
    config_file: Path, table_paths: tuple[tuple[str, ...], ...]
) -> InkaConfig | None:
    data = _read_toml(config_file)
    if data is None:
        return None

    for table_path in table_paths:
        found, table = _extract_table(data, table_path)
        if found:
            return _config_from_table(table, f"{config_file} [{'.'.join(table_path)}]")

    return None


def _extract_table(data: dict, table_path: tuple[str, ...]) -> tuple[bool, object]:
    node: object = data
    for key in table_path:
        if not isinstance(node, dict) or key not in node:
            return False, None
        node = node[key]
    return True, node


def _config_from_table(table: object, source: str) -> InkaConfig:
    if not isinstance(table, dict):
        raise ConfigError(f"Invalid inka-edit settings in {source}: expected a table")

    # TOML keys may be written with dashes.
    values = {key.replace("-", "_"): value for key, value in table.items()}

    known = {field.name for field in fields(InkaConfig)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ConfigError(f"Unknown inka-edit settings in {source}: {', '.join(unknown)}")

    return InkaConfig(**values)


def validate_config(config: InkaConfig) -> None:
    """Check that a configuration is usable.

    Markers are found by substring search, so besides being non-empty single
    lines, no marker may contain another one.

    Raises:
        ConfigError: Naming the first offending setting.

    Examples:
        validate_config(InkaConfig(max_line_length=500))
    """
    markers = {
        "edit_start_marker": config.edit_start_marker,
        "answer_start_marker": config.answer_start_marker,
        "edit_end_marker": config.edit_end_marker,
    }
    _validate_markers(markers)
    _validate_limits(
        {"max_file_size": config.max_file_size, "max_line_length": config.max_line_length}
    )


def _validate_markers(markers: dict[str, object]) -> None:
    for name, marker in markers.items():
        if not isinstance(marker, str):
            raise ConfigError(f"`{name}` must be a string")
        if not marker.strip():
            raise ConfigError(f"`{name}` must not be empty")
        if "\n" in marker or "\r" in marker:
            raise ConfigError(f"`{name}` must be a single line")

    for name, marker in markers.items():
        for other_name, other in markers.items():
            if name != other_name and marker in other:
                raise ConfigError(f"`{name}` must not be contained in `{other_name}`")


def _validate_limits(limits: dict[str, object]) -> None:
    for name, limit in limits.items():
        # bool is an int subclass but never a meaningful limit
        if isinstance(limit, bool) or not isinstance(limit, int):
            raise ConfigError(f"`{name}` must be an integer")
        if limit <= 0:
            raise ConfigError(f"`{name}` must be a positive integer")


def apply_overrides(config: InkaConfig, **overrides: object) -> InkaConfig:
    """Return `config` with the non-None `overrides` applied.

    The same object is returned when every override is None, which is what
    the CLI passes for options the user did not give.

    Raises:
        TypeError: If an override does not name an `InkaConfig` field.
    """
    changes = {name: value for name, value in overrides.items() if value is not None}
    return replace(config, **changes) if changes else config


def build_config(search_path: Path, **overrides: object) -> InkaConfig:
    """Load the settings for `search_path`, apply `overrides`, and validate.

    Raises:
        ConfigError: If a settings file or the resulting configuration is invalid.

    Examples:
        build_config(Path("decks"), edit_end_marker="%% end %%")
    """
    config = apply_overrides(load_config(search_path), **overrides)
    validate_config(config)
    return config
