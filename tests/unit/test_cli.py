"""
Unit tests for the terminal front-end.
"""

from typer.testing import CliRunner

from aristotle.cli import DEFAULT_BANK, app, resolve_choice
from aristotle.integrations.content_provider import ItemBank

runner = CliRunner()


def test_presets_command_lists_presets():
    result = runner.invoke(app, ["presets"])

    assert result.exit_code == 0
    assert "unit-test" in result.output
    assert "final-exam" in result.output


def test_exam_rejects_unknown_preset():
    result = runner.invoke(app, ["exam", "pop-quiz"])

    assert result.exit_code == 1


def test_resolve_choice_maps_option_number(mcq_item):
    assert resolve_choice(mcq_item, "2") == "x = ±4"
    assert resolve_choice(mcq_item, " x = 2 ") == "x = 2"
    # Out of range numbers are passed through as typed
    assert resolve_choice(mcq_item, "9") == "9"


def test_resolve_choice_ignores_written_items(written_item):
    assert resolve_choice(written_item, "1") == "1"


def test_default_bank_loads_from_any_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    assert DEFAULT_BANK.is_absolute()
    assert len(ItemBank.from_file(DEFAULT_BANK)) > 0
