"""Tests for the location catalog."""

import pytest
from transit_pathfinder import catalog as catalog_module
from transit_pathfinder.catalog import LocationCatalog, get_catalog
from transit_pathfinder.dataset import DataLoadError, NetworkDocuments
from transit_pathfinder.lines import Ordering
from transit_pathfinder.stations import LocationType


def test_locations_trains_then_buses(catalog):
    """Test every station and bus stop is listed once."""
    keys = [loc.key for loc in catalog.all_locations()]
    assert keys == ["S1", "S2", "S3", "S4", "S5", "S6", "B2", "B1"]


def test_location_lines(catalog):
    """Test serving lines come from the adjacency document."""
    assert catalog.find_by_key("S3").lines == ("L1", "L2")
    assert catalog.find_by_key("B1").lines == ("42",)


def test_line_groups_ascending(catalog):
    """Test line groups are keyed and ordered by line key."""
    assert [group.line_key for group in catalog.line_groups()] == ["L1", "L2"]


def test_walked_line(catalog):
    """Test a fully connected line follows the walk."""
    group = catalog.line_group("L1")
    assert [s.name for s in group.stations] == ["Alpha", "Beta", "Gamma"]
    assert group.ordering is Ordering.WALKED


def test_partial_line(catalog):
    """Test a line whose walk dead-ends still lists every station."""
    group = catalog.line_group("L2")
    assert [s.name for s in group.stations] == ["Central Station", "Gamma", "Delta"]
    assert group.ordering is Ordering.PARTIAL


def test_sentinel_only_station_has_no_group(catalog):
    """Test a station reached only by walking links is in no line group."""
    walkway = catalog.find_by_key("S6")
    assert walkway.lines == ()
    for group in catalog.line_groups():
        assert walkway not in group.stations


def test_unknown_lines_skipped(dataset, datanodes):
    """Test lines missing from the route list do not form groups."""
    datanodes["S1"]["S2"] = {"lines": ["L1", "L9"]}
    result = LocationCatalog.from_documents(dataset, datanodes, excluded_lines={"0", "1"})
    assert result.line_group("L9") is None
    assert "L9" in result.find_by_key("S1").lines


def test_bus_stops_sorted_and_ungrouped(catalog):
    """Test bus stops are alphabetical and never in a line group."""
    assert [s.name for s in catalog.bus_stops()] == ["Harbour Gate", "Market Square"]
    assert catalog.line_group("42") is None
    assert all(s.type is LocationType.BUS for s in catalog.bus_stops())


def test_grouped_returns_copy(catalog):
    """Test mutating the display structure leaves the catalog intact."""
    grouped = catalog.grouped()
    grouped.trains["L1"].clear()
    grouped.buses.clear()
    assert len(catalog.grouped().trains["L1"]) == 3
    assert len(catalog.grouped().buses) == 2


def test_find_by_name_ignores_case(catalog):
    """Test names resolve regardless of case."""
    assert catalog.find_by_name("central station").key == "S4"
    assert catalog.find_by_name("CENTRAL STATION").key == "S4"
    assert catalog.find_by_name("central") is None


def test_line_details(catalog):
    """Test train and bus routes are both registered."""
    assert catalog.line_details["L1"].name == "Red Line"
    assert catalog.line_details["42"].color == "#cbd5e0"


def test_get_catalog_caches(monkeypatch, dataset, datanodes):
    """Test the process-wide catalog is built once."""
    calls = []

    def fake_load():
        calls.append(1)
        return NetworkDocuments(dataset=dataset, datanodes=datanodes)

    monkeypatch.setattr(catalog_module, "_catalog", None)
    monkeypatch.setattr(catalog_module, "load_documents", fake_load)
    first = get_catalog()
    assert get_catalog() is first
    assert len(calls) == 1
    get_catalog(refresh=True)
    assert len(calls) == 2


def test_get_catalog_failure_not_cached(monkeypatch):
    """Test a failed load raises and leaves nothing cached."""
    def failing_load():
        raise DataLoadError("boom")

    monkeypatch.setattr(catalog_module, "_catalog", None)
    monkeypatch.setattr(catalog_module, "load_documents", failing_load)
    with pytest.raises(DataLoadError):
        get_catalog()
    assert catalog_module._catalog is None


@pytest.mark.parametrize("stations", [[{"name": "NoKey"}], ["S1"]])
def test_from_documents_malformed_stations(stations):
    """Test malformed station records raise DataLoadError."""
    with pytest.raises(DataLoadError):
        LocationCatalog.from_documents({"stations": stations}, {})


def test_null_name_falls_back_to_key(dataset, datanodes):
    """Test a station with a null name is shown by its key."""
    dataset["stations"].append({"key": "S7", "name": None})
    result = LocationCatalog.from_documents(dataset, datanodes)
    assert result.find_by_key("S7").name == "S7"
    assert result.find_by_name("none") is None
