"""Station adjacency graph with line-membership queries."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any, Optional

from . import config


def connection_lines(conn: Mapping[str, Any]) -> tuple[str, ...]:
    """Line identifiers carried by one connection, as strings.

    A connection may declare a single identifier or a list of them.
    """
    lines = conn.get("lines")
    if lines is None or lines == "":
        return ()
    if isinstance(lines, (list, tuple)):
        return tuple(str(line) for line in lines)
    return (str(lines),)


class GraphIndex:
    """Read-only view over the adjacency document.

    Neighbor iteration follows the insertion order of the source document,
    which is what keeps line ordering deterministic.
    """

    def __init__(
        self,
        adjacency: Mapping[str, Mapping[str, Any]],
        excluded_lines: Optional[Iterable[str]] = None,
    ):
        self._adjacency = MappingProxyType({
            str(station): MappingProxyType({str(n): dict(conn) for n, conn in neighbors.items()})
            for station, neighbors in adjacency.items()
        })
        if excluded_lines is None:
            excluded_lines = config.EXCLUDED_LINES
        self.excluded_lines = frozenset(str(line) for line in excluded_lines)

    def __contains__(self, station_key: object) -> bool:
        return station_key in self._adjacency

    def __len__(self) -> int:
        return len(self._adjacency)

    def stations(self) -> list[str]:
        """Station keys with adjacency entries, in document order."""
        return list(self._adjacency)

    def neighbors_of(self, station_key: str) -> Mapping[str, Mapping[str, Any]]:
        """Neighbor key -> connection for a station; empty if it has none."""
        return self._adjacency.get(str(station_key), MappingProxyType({}))

    def connection(self, from_key: str, to_key: str) -> Optional[Mapping[str, Any]]:
        return self.neighbors_of(from_key).get(str(to_key))

    def edge_serves(self, from_key: str, to_key: str, line_key: str) -> bool:
        """True if the edge from_key -> to_key is tagged with line_key."""
        conn = self.connection(from_key, to_key)
        return conn is not None and str(line_key) in connection_lines(conn)

    def lines_at(self, station_key: str) -> tuple[str, ...]:
        """Passenger lines serving a station, in discovery order.

        Union of the line identifiers over all of the station's connections,
        minus the excluded (walking/transfer) codes.
        """
        seen: dict[str, None] = {}
        for conn in self.neighbors_of(station_key).values():
            for line in connection_lines(conn):
                if line not in self.excluded_lines:
                    seen.setdefault(line, None)
        return tuple(seen)
