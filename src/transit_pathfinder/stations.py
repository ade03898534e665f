"""Train stations, bus stops and line details derived from the dataset."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional
from unicodedata import combining, normalize

from . import config
from .graph import GraphIndex


class LocationType(str, Enum):
    TRAIN = "train"
    BUS = "bus"


@dataclass(frozen=True)
class LineInfo:
    """A train or bus route as shown in line headers and pills."""
    key: str
    name: str
    color: str = config.DEFAULT_LINE_COLOR


@dataclass(frozen=True)
class Location:
    """A train station or bus stop the user can pick."""
    key: str
    name: str
    type: LocationType
    lines: tuple[str, ...] = field(default=())

    @property
    def is_train(self) -> bool:
        return self.type is LocationType.TRAIN


def name_sort_key(name: str) -> tuple[str, str]:
    """Sort key approximating a locale-aware name comparison."""
    stripped = "".join(c for c in normalize("NFD", name) if not combining(c))
    return stripped.casefold(), name


def build_line_details(routes: Iterable[Mapping[str, Any]]) -> dict[str, LineInfo]:
    """Line key -> LineInfo for train and bus routes (later entries win)."""
    details: dict[str, LineInfo] = {}
    for route in routes:
        key = str(route["key"])
        details[key] = LineInfo(
            key=key,
            name=route.get("name") or key,
            color=route.get("color") or config.DEFAULT_LINE_COLOR,
        )
    return details


def build_locations(dataset: Mapping[str, Any], graph: GraphIndex) -> list[Location]:
    """Every station then every bus stop, annotated with serving lines."""
    locations = []
    sources = (
        (dataset.get("stations") or [], LocationType.TRAIN),
        (dataset.get("bus_stops") or [], LocationType.BUS),
    )
    for records, loc_type in sources:
        for record in records:
            key = str(record["key"])
            locations.append(Location(
                key=key,
                name=str(record.get("name") or key),
                type=loc_type,
                lines=graph.lines_at(key),
            ))
    return locations


def find_by_name(locations: Iterable[Location], text: str) -> Optional[Location]:
    """Case-insensitive exact name match; first match wins."""
    wanted = text.casefold()
    for location in locations:
        if location.name.casefold() == wanted:
            return location
    return None


def find_by_key(locations: Iterable[Location], key: str) -> Optional[Location]:
    key = str(key)
    for location in locations:
        if location.key == key:
            return location
    return None
