from inka_edit.constants import EDIT_START_MARKER
from inka_edit.models import Card, Region
from inka_edit.status import StatusReport, collect_status
from inka_edit.toggler import enter_editing


def test_status_without_line(basic_cards):
    report = collect_status(basic_cards)

    assert report == StatusReport(editing=False)
    assert report.render() == ["=== inka-edit status ===", "In editing mode: False"]


def test_status_reports_card_bounds(basic_cards):
    report = collect_status(basic_cards, 14)

    assert report.in_section is True
    assert report.card == Card(start_line=13, question_line=14, answer_start_line=15, end_line=15)
    assert report.card_error is None

    rendered = report.render()
    assert "Line: 14" in rendered
    assert "  Start line: 13" in rendered
    assert "  Question line: 14" in rendered
    assert "  Answer start: 15" in rendered
    assert "  End line: 15" in rendered


def test_status_reports_detection_error(basic_cards):
    report = collect_status(basic_cards, 7)

    assert report.in_section is True
    assert report.card is None
    assert "Could not find a numbered question above line 7" in report.card_error
    assert f"Card bounds error: {report.card_error}" in report.render()


def test_status_outside_section_skips_detection(basic_cards):
    report = collect_status(basic_cards, 2)

    assert report.in_section is False
    assert report.card is None
    assert report.card_error is None
    assert "In inka section: False" in report.render()


def test_status_reports_editing_region(basic_cards):
    editing = enter_editing(basic_cards, 9)

    report = collect_status(editing)

    assert report.editing is True
    assert report.region == Region(edit_start_line=9, answer_start_line=12, edit_end_line=14)
    assert editing[8] == EDIT_START_MARKER
    rendered = report.render()
    assert "Editing region:" in rendered
    assert "  Edit end: 14" in rendered
