"""Shared network fixtures."""

import copy

import pytest

from transit_pathfinder.catalog import LocationCatalog
from transit_pathfinder.graph import GraphIndex
from transit_pathfinder.stations import Location, LocationType

DATASET = {
    "stations": [
        {"key": "S1", "name": "Alpha"},
        {"key": "S2", "name": "Beta"},
        {"key": "S3", "name": "Gamma"},
        {"key": "S4", "name": "Central Station"},
        {"key": "S5", "name": "Delta"},
        {"key": "S6", "name": "Walkway"},
    ],
    "bus_stops": [
        {"key": "B2", "name": "Market Square"},
        {"key": "B1", "name": "Harbour Gate"},
    ],
    "routes": [
        {"key": "L1", "name": "Red Line", "color": "#ff0000"},
        {"key": "L2", "name": "Blue Line", "color": "#0000ff"},
    ],
    "bus_routes": [
        {"key": 42, "name": "Route 42"},
    ],
    "terminus": {"L1": ["S1", "S3"], "L2": ["S4"]},
}

DATANODES = {
    "S1": {"S2": {"lines": "L1"}},
    "S2": {"S1": {"lines": ["L1"]}, "S3": {"lines": ["L1"]}},
    "S3": {"S2": {"lines": ["L1"]}, "S4": {"lines": ["L2"]}},
    "S4": {"S3": {"lines": ["L2"]}, "S5": {"lines": ["L2", "0"]}},
    "S5": {"S4": {"lines": ["L2"]}, "S6": {"lines": "1"}},
    "S6": {"S5": {"lines": ["1"]}},
    "B1": {"B2": {"lines": [42]}},
    "B2": {"B1": {"lines": 42}},
}


@pytest.fixture
def dataset():
    return copy.deepcopy(DATASET)


@pytest.fixture
def datanodes():
    return copy.deepcopy(DATANODES)


@pytest.fixture
def catalog(dataset, datanodes):
    """Catalog over the sample network with the usual 0/1 exclusion."""
    return LocationCatalog.from_documents(dataset, datanodes, excluded_lines={"0", "1"})


def make_stations(*pairs):
    """Train locations from (key, name) pairs."""
    return [Location(key=key, name=name, type=LocationType.TRAIN) for key, name in pairs]


def chain_graph(line, *edges):
    """Undirected graph with every (a, b) edge tagged with line."""
    adjacency = {}
    for a, b in edges:
        adjacency.setdefault(a, {})[b] = {"lines": [line]}
        adjacency.setdefault(b, {})[a] = {"lines": [line]}
    return GraphIndex(adjacency, excluded_lines={"0", "1"})
