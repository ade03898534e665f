"""Rider-facing station order for each line."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .graph import GraphIndex
from .stations import Location, name_sort_key

logger = logging.getLogger(__name__)


class Ordering(str, Enum):
    """How a line's station order was obtained."""
    WALKED = "walked"      # every member reached from the terminus
    PARTIAL = "partial"    # walk stopped early; unreached members appended
    FALLBACK = "fallback"  # no usable terminus; alphabetical


@dataclass(frozen=True)
class LineGroup:
    """Stations of one line in display order."""
    line_key: str
    stations: tuple[Location, ...]
    ordering: Ordering

    def __len__(self):
        return len(self.stations)

    def __iter__(self):
        return iter(self.stations)


def walk_line(
    line_key: str,
    start: str,
    members: set[str],
    graph: GraphIndex,
) -> list[str]:
    """Greedy walk from start along edges tagged with line_key.

    At each step the first unvisited neighbor (adjacency order) whose edge
    carries the line and which is itself a member is taken. Stops when the
    walk has covered every member or no such neighbor exists.
    """
    sequence = [start]
    visited = {start}
    current = start

    while len(sequence) < len(members):
        next_key = None
        for neighbor_key in graph.neighbors_of(current):
            if neighbor_key in visited or neighbor_key not in members:
                continue
            if graph.edge_serves(current, neighbor_key, line_key):
                next_key = neighbor_key
                break
        if next_key is None:
            break
        sequence.append(next_key)
        visited.add(next_key)
        current = next_key

    return sequence


def assemble_line(
    line_key: str,
    stations: Sequence[Location],
    graph: GraphIndex,
    termini: Mapping[str, Sequence[str]],
) -> LineGroup:
    """Order a line's stations starting from its first terminus.

    Falls back to alphabetical order when the line has no terminus entry or
    the terminus is not one of its stations. Members the walk never reaches
    keep their original relative order after the walked ones.
    """
    line_key = str(line_key)
    stations = list(stations)
    members = {s.key for s in stations}
    start = _first_terminus(termini.get(line_key))

    if not stations or start is None or start not in members:
        logger.debug("Line %s: no usable terminus, ordering alphabetically", line_key)
        ordered = sorted(stations, key=lambda s: name_sort_key(s.name))
        return LineGroup(line_key, tuple(ordered), Ordering.FALLBACK)

    sequence = walk_line(line_key, start, members, graph)
    position = {key: i for i, key in enumerate(sequence)}
    unreached = len(sequence)
    # sorted() is stable, so unreached stations keep discovery order
    ordered = sorted(stations, key=lambda s: position.get(s.key, unreached))

    if len(sequence) == len(members):
        return LineGroup(line_key, tuple(ordered), Ordering.WALKED)
    logger.debug(
        "Line %s: walk from %s reached %d of %d stations",
        line_key, start, len(sequence), len(members),
    )
    return LineGroup(line_key, tuple(ordered), Ordering.PARTIAL)


def _first_terminus(keys: Optional[Sequence[str]]) -> Optional[str]:
    if not keys:
        return None
    return str(keys[0])
