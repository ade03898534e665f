"""Tests for the interactive planner prompts."""

import pytest
from transit_pathfinder import cli
from transit_pathfinder.catalog import LocationCatalog
from transit_pathfinder.planner import Criteria, Field, TripPlanner


@pytest.fixture
def planner(catalog):
    planner = TripPlanner()
    planner.data_loaded(catalog)
    return planner


def feed_input(monkeypatch, *answers):
    answers = iter(answers)
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))


def test_prompt_picks_numbered_suggestion(planner, monkeypatch, capsys):
    """Test a partial name lists suggestions that can be picked by number."""
    feed_input(monkeypatch, "cent", "1")
    location = cli.prompt_location(planner, Field.ORIGIN)
    assert location.key == "S4"
    assert planner.form.origin == "Central Station"
    assert "1. Central Station" in capsys.readouterr().out


def test_prompt_accepts_exact_name(planner, monkeypatch):
    """Test an exact name is accepted without suggestions."""
    feed_input(monkeypatch, "harbour gate")
    assert cli.prompt_location(planner, Field.DESTINATION).key == "B1"


def test_suggestion_list_is_capped(planner, capsys):
    """Test long suggestion lists are truncated."""
    planner.field_focused(Field.ORIGIN)
    numbered = cli.print_suggestions(planner, limit=3)
    assert len(numbered) == 3
    assert "more, keep typing" in capsys.readouterr().out


def test_plan_trip(planner, monkeypatch):
    """Test a full prompt sequence produces a redirect URL."""
    feed_input(monkeypatch, "alpha", "Harbour Gate", "3")
    url = cli.plan_trip(planner)
    assert planner.form.criteria is Criteria.MINTRANS
    assert "criteria=mintrans" in url
    assert "dest=B1" in url


def test_quit_command(planner, monkeypatch):
    """Test /quit stops the prompt."""
    feed_input(monkeypatch, "/quit")
    with pytest.raises(cli.QuitRequested):
        cli.prompt_location(planner, Field.ORIGIN)


def test_digit_name_beats_suggestion_number(dataset, datanodes, monkeypatch):
    """Test an all-digit station name is matched by name, not as a list index."""
    dataset["bus_stops"].append({"key": "B3", "name": "1905"})
    planner = TripPlanner()
    planner.data_loaded(LocationCatalog.from_documents(dataset, datanodes, excluded_lines={"0", "1"}))
    feed_input(monkeypatch, "a", "1905")
    assert cli.prompt_location(planner, Field.ORIGIN).key == "B3"
