"""Browsable catalog of every location, grouped by line."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

from .dataset import load_documents, normalize_datanodes, normalize_dataset
from .graph import GraphIndex
from .lines import LineGroup, assemble_line
from .stations import (
    LineInfo,
    Location,
    build_line_details,
    build_locations,
    find_by_key,
    find_by_name,
    name_sort_key,
)

logger = logging.getLogger(__name__)


@dataclass
class GroupedLocations:
    """Display structure: train stations per line, then bus stops."""
    trains: dict[str, list[Location]] = field(default_factory=dict)
    buses: list[Location] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.trains and not self.buses

    def __len__(self):
        return sum(len(stations) for stations in self.trains.values()) + len(self.buses)


class LocationCatalog:
    """Read-only catalog derived once per data load."""

    def __init__(
        self,
        locations: list[Location],
        line_groups: dict[str, LineGroup],
        bus_stops: list[Location],
        line_details: dict[str, LineInfo],
    ):
        self._locations = tuple(locations)
        self._line_groups = dict(line_groups)
        self._bus_stops = tuple(bus_stops)
        self.line_details = dict(line_details)

    @classmethod
    def from_documents(
        cls,
        dataset: Mapping[str, Any],
        datanodes: Mapping[str, Mapping[str, Any]],
        excluded_lines: Optional[Iterable[str]] = None,
    ) -> LocationCatalog:
        """Derive the catalog from the two raw documents.

        Raises:
            DataLoadError: If either document is malformed
        """
        dataset = normalize_dataset(dataset)
        datanodes = normalize_datanodes(datanodes)
        graph = GraphIndex(datanodes, excluded_lines=excluded_lines)
        line_details = build_line_details(
            [*(dataset.get("routes") or []), *(dataset.get("bus_routes") or [])]
        )
        locations = build_locations(dataset, graph)
        termini = {str(k): v for k, v in (dataset.get("terminus") or {}).items()}

        members = collect_line_members(locations, line_details)
        line_groups = {
            line_key: assemble_line(line_key, stations, graph, termini)
            for line_key, stations in sorted(members.items())
        }
        bus_stops = sorted(
            (loc for loc in locations if not loc.is_train),
            key=lambda loc: name_sort_key(loc.name),
        )

        logger.info(
            "Built catalog: %d locations, %d train lines, %d bus stops",
            len(locations), len(line_groups), len(bus_stops),
        )
        return cls(locations, line_groups, bus_stops, line_details)

    def all_locations(self) -> tuple[Location, ...]:
        """Every station and bus stop, for validation lookups."""
        return self._locations

    def line_groups(self) -> list[LineGroup]:
        """Line groups in ascending line-key order."""
        return list(self._line_groups.values())

    def line_group(self, line_key: str) -> Optional[LineGroup]:
        return self._line_groups.get(str(line_key))

    def bus_stops(self) -> tuple[Location, ...]:
        return self._bus_stops

    def grouped(self) -> GroupedLocations:
        """Fresh copy of the full display structure."""
        return GroupedLocations(
            trains={key: list(group.stations) for key, group in self._line_groups.items()},
            buses=list(self._bus_stops),
        )

    def find_by_name(self, text: str) -> Optional[Location]:
        return find_by_name(self._locations, text)

    def find_by_key(self, key: str) -> Optional[Location]:
        return find_by_key(self._locations, key)


def collect_line_members(
    locations: Iterable[Location],
    line_details: Mapping[str, LineInfo],
) -> dict[str, list[Location]]:
    """Line key -> train stations claiming it, in discovery order.

    Line keys absent from line_details are skipped.
    """
    members: dict[str, list[Location]] = {}
    seen: dict[str, set[str]] = {}
    for location in locations:
        if not location.is_train:
            continue
        for line_key in location.lines:
            if line_key not in line_details:
                continue
            keys = seen.setdefault(line_key, set())
            if location.key in keys:
                continue
            keys.add(location.key)
            members.setdefault(line_key, []).append(location)
    return members


# Singleton instance
_catalog: Optional[LocationCatalog] = None


def get_catalog(refresh: bool = False) -> LocationCatalog:
    """Get or build the process-wide catalog.

    Raises:
        DataLoadError: If the documents cannot be loaded; nothing is cached
    """
    global _catalog
    if _catalog is None or refresh:
        documents = load_documents()
        _catalog = LocationCatalog.from_documents(documents.dataset, documents.datanodes)
    return _catalog
