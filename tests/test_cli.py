from __future__ import annotations

import textwrap
from pathlib import Path

import inka_edit.cli as cli_module
from inka_edit.cli import cli
from inka_edit.constants import ANSWER_START_MARKER, EDIT_END_MARKER, EDIT_START_MARKER


def _write(tmp_path: Path, filename: str, content: str) -> Path:
    path = tmp_path / filename
    path.write_text(textwrap.dedent(content).lstrip(), encoding="utf-8")
    return path


def _write_lines(tmp_path: Path, filename: str, lines: list[str]) -> Path:
    path = tmp_path / filename
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def _write_pyproject(base: Path, body: str) -> Path:
    path = base / "pyproject.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def test_edit_enters_editing_mode(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(
        tmp_path,
        "cards.md",
        """
        ---
        1. What is the capital of France?
        > Paris
        > on the Seine
        ---
        """,
    )

    result = cli_runner.invoke(cli, ["edit", str(target), "--line", "3"])

    assert result.exit_code == 0
    assert "Entered inka editing mode in cards.md" in result.output
    assert target.read_text(encoding="utf-8").splitlines() == [
        "---",
        EDIT_START_MARKER,
        "1. What is the capital of France?",
        ANSWER_START_MARKER,
        "Paris",
        "on the Seine",
        EDIT_END_MARKER,
        "---",
    ]


def test_save_restores_answer_markers(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(
        tmp_path,
        "cards.md",
        f"""
        ---
        {EDIT_START_MARKER}
        1. What is the capital of France?
        {ANSWER_START_MARKER}
        Paris

        Rewritten while editing
        {EDIT_END_MARKER}
        ---
        """,
    )

    result = cli_runner.invoke(cli, ["save", str(target)])

    assert result.exit_code == 0
    assert "Exited inka editing mode in cards.md. Answer markers restored." in result.output
    assert target.read_text(encoding="utf-8") == (
        "---\n"
        "1. What is the capital of France?\n"
        "> Paris\n"
        "> \n"
        "> Rewritten while editing\n"
        "---\n"
    )


def test_edit_then_save_restores_file(cli_runner, tmp_path, monkeypatch, basic_cards):
    monkeypatch.chdir(tmp_path)
    target = _write_lines(tmp_path, "deck.md", basic_cards)
    original = target.read_text(encoding="utf-8")

    edited = cli_runner.invoke(cli, ["edit", str(target), "-l", "18"])
    assert edited.exit_code == 0
    assert target.read_text(encoding="utf-8") != original

    saved = cli_runner.invoke(cli, ["save", str(target)])
    assert saved.exit_code == 0
    assert target.read_text(encoding="utf-8") == original


def test_edit_requires_line_option(cli_runner, tmp_path, monkeypatch, basic_cards):
    monkeypatch.chdir(tmp_path)
    target = _write_lines(tmp_path, "deck.md", basic_cards)

    result = cli_runner.invoke(cli, ["edit", str(target)])

    assert result.exit_code == 2
    assert "--line" in result.output


def test_edit_rejects_line_zero(cli_runner, tmp_path, monkeypatch, basic_cards):
    monkeypatch.chdir(tmp_path)
    target = _write_lines(tmp_path, "deck.md", basic_cards)

    result = cli_runner.invoke(cli, ["edit", str(target), "--line", "0"])

    assert result.exit_code == 2


def test_edit_outside_section_leaves_file_untouched(
    cli_runner, tmp_path, monkeypatch, basic_cards
):
    monkeypatch.chdir(tmp_path)
    target = _write_lines(tmp_path, "deck.md", basic_cards)
    original = target.read_text(encoding="utf-8")

    result = cli_runner.invoke(cli, ["edit", str(target), "--line", "1"])

    assert result.exit_code == 1
    assert "Failed to enter inka editing mode" in result.output
    assert "is not within an inka section" in result.output
    assert target.read_text(encoding="utf-8") == original


def test_edit_without_question_reports_error(cli_runner, tmp_path, monkeypatch, basic_cards):
    monkeypatch.chdir(tmp_path)
    target = _write_lines(tmp_path, "deck.md", basic_cards)

    result = cli_runner.invoke(cli, ["edit", str(target), "--line", "7"])

    assert result.exit_code == 1
    assert "Could not find a numbered question above line 7" in result.output


def test_edit_twice_is_rejected(cli_runner, tmp_path, monkeypatch, basic_cards):
    monkeypatch.chdir(tmp_path)
    target = _write_lines(tmp_path, "deck.md", basic_cards)
    cli_runner.invoke(cli, ["edit", str(target), "--line", "9"])
    editing = target.read_text(encoding="utf-8")

    result = cli_runner.invoke(cli, ["edit", str(target), "--line", "18"])

    assert result.exit_code == 1
    assert "Already in inka editing mode" in result.output
    assert target.read_text(encoding="utf-8") == editing


def test_save_without_editing_mode_fails(cli_runner, tmp_path, monkeypatch, basic_cards):
    monkeypatch.chdir(tmp_path)
    target = _write_lines(tmp_path, "deck.md", basic_cards)

    result = cli_runner.invoke(cli, ["save", str(target)])

    assert result.exit_code == 1
    assert "Failed to exit inka editing mode: Not currently in inka editing mode" in result.output


def test_cli_rejects_non_markdown_files(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(
        tmp_path,
        "notes.txt",
        """
        ---
        1. Q?
        ---
        """,
    )

    result = cli_runner.invoke(cli, ["edit", str(target), "--line", "2"])

    assert result.exit_code != 0
    assert "not a Markdown file" in result.output


def test_status_reports_card_bounds(cli_runner, tmp_path, monkeypatch, basic_cards):
    monkeypatch.chdir(tmp_path)
    target = _write_lines(tmp_path, "deck.md", basic_cards)

    result = cli_runner.invoke(cli, ["status", str(target), "--line", "14"])

    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert lines[0] == "=== inka-edit status ==="
    assert "In editing mode: False" in lines
    assert "In inka section: True" in lines
    assert "  Start line: 13" in lines
    assert "  Question line: 14" in lines
    assert "  End line: 15" in lines


def test_status_shows_editing_region(cli_runner, tmp_path, monkeypatch, basic_cards):
    monkeypatch.chdir(tmp_path)
    target = _write_lines(tmp_path, "deck.md", basic_cards)
    cli_runner.invoke(cli, ["edit", str(target), "--line", "9"])

    result = cli_runner.invoke(cli, ["status", str(target)])

    assert result.exit_code == 0
    assert "In editing mode: True" in result.output
    assert "  Edit start: 9" in result.output
    assert "  Answer start: 12" in result.output
    assert "  Edit end: 14" in result.output


def test_check_passes_for_saved_files(cli_runner, tmp_path, monkeypatch, basic_cards):
    monkeypatch.chdir(tmp_path)
    first = _write_lines(tmp_path, "one.md", basic_cards)
    second = _write_lines(tmp_path, "two.md", basic_cards)

    result = cli_runner.invoke(cli, ["check", str(first), str(second)])

    assert result.exit_code == 0
    assert result.output == ""


def test_check_fails_for_files_in_editing_mode(cli_runner, tmp_path, monkeypatch, basic_cards):
    monkeypatch.chdir(tmp_path)
    clean = _write_lines(tmp_path, "clean.md", basic_cards)
    editing = _write_lines(tmp_path, "editing.md", basic_cards)
    cli_runner.invoke(cli, ["edit", str(editing), "--line", "9"])

    result = cli_runner.invoke(cli, ["check", str(clean), str(editing)])

    assert result.exit_code == 1
    assert "editing.md: still in inka editing mode" in result.output
    assert "clean.md" not in result.output


def test_cli_reads_markers_from_pyproject(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _write_pyproject(
        tmp_path,
        """
        [tool.inka-edit]
        edit_start_marker = "%% edit %%"
        answer_start_marker = "%% answers %%"
        edit_end_marker = "%% end %%"
        """,
    )
    target = _write(
        tmp_path,
        "configured.md",
        """
        ---
        1. Q?
        > A
        ---
        """,
    )

    result = cli_runner.invoke(cli, ["edit", str(target), "--line", "2"])

    assert result.exit_code == 0
    assert target.read_text(encoding="utf-8").splitlines() == [
        "---",
        "%% edit %%",
        "1. Q?",
        "%% answers %%",
        "A",
        "%% end %%",
        "---",
    ]


def test_cli_flags_override_config(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _write_pyproject(
        tmp_path,
        """
        [tool.inka-edit]
        edit_start_marker = "%% config %%"
        """,
    )
    target = _write(
        tmp_path,
        "override.md",
        """
        ---
        1. Q?
        > A
        ---
        """,
    )

    result = cli_runner.invoke(
        cli, ["edit", "--edit-start-marker", "%% cli %%", str(target), "--line", "2"]
    )

    assert result.exit_code == 0
    contents = target.read_text(encoding="utf-8")
    assert "%% cli %%" in contents
    assert "%% config %%" not in contents


def test_cli_rejects_conflicting_markers(cli_runner, tmp_path, monkeypatch, basic_cards):
    monkeypatch.chdir(tmp_path)
    target = _write_lines(tmp_path, "deck.md", basic_cards)

    result = cli_runner.invoke(
        cli, ["edit", "--edit-start-marker", EDIT_END_MARKER, str(target), "--line", "9"]
    )

    assert result.exit_code == 2
    assert "must not be contained" in result.output


def test_cli_debug_flag_configures_logging(cli_runner, tmp_path, monkeypatch, basic_cards):
    monkeypatch.chdir(tmp_path)
    target = _write_lines(tmp_path, "deck.md", basic_cards)
    calls = []
    monkeypatch.setattr(cli_module.logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

    result = cli_runner.invoke(cli, ["--debug", "status", str(target), "--line", "9"])

    assert result.exit_code == 0
    assert "  Question line: 9" in result.output
    assert calls[0]["level"] == cli_module.logging.DEBUG


def test_cli_public_api_is_the_group():
    assert cli_module.__all__ == ["cli"]


def test_edit_refuses_leftover_marker(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(
        tmp_path,
        "leftover.md",
        f"""
        Markers look like `{EDIT_END_MARKER}`.

        ---
        1. Q?
        > A
        ---
        """,
    )
    original = target.read_text(encoding="utf-8")

    result = cli_runner.invoke(cli, ["edit", str(target), "--line", "4"])

    assert result.exit_code == 1
    assert "Line 1 already contains the editing marker" in result.output
    assert target.read_text(encoding="utf-8") == original
