import pytest
from click.testing import CliRunner

BASIC_CARDS = [
    "# Flashcards",
    "",
    "Some intro text.",
    "",
    "---",
    "",
    "Deck: Basics",
    "",
    "1. What is the answer to everything?",
    "",
    "> 42",
    "",
    "<!--ID:1612345678901-->",
    "2. what is 2 + 2?",
    "> 4",
    "",
    "3. What color is the sky?",
    "> Blue",
    "> during the day",
    "",
    "4. Multi-line question",
    "spanning two lines?",
    "> Yes",
    "",
    "---",
    "",
    "Outro text.",
]


@pytest.fixture()
def cli_runner() -> CliRunner:
    """Provides a reusable Click CLI runner."""
    return CliRunner()


@pytest.fixture()
def basic_cards() -> list[str]:
    """Provides a fresh copy of a document with four cards in one section."""
    return list(BASIC_CARDS)
