"""Autocomplete suggestions filtered from the catalog."""

from __future__ import annotations

from .catalog import GroupedLocations, LocationCatalog


def filter_suggestions(query: str, source: LocationCatalog | GroupedLocations) -> GroupedLocations:
    """Keep locations whose name contains query, ignoring case.

    A blank query returns everything. Line groups and the bus section are
    dropped when nothing in them matches; order is left as the catalog has it.
    """
    grouped = source.grouped() if isinstance(source, LocationCatalog) else source

    if not query or not query.strip():
        return GroupedLocations(
            trains={key: list(stations) for key, stations in grouped.trains.items()},
            buses=list(grouped.buses),
        )

    needle = query.casefold()
    trains = {}
    for line_key, stations in grouped.trains.items():
        matches = [s for s in stations if needle in s.name.casefold()]
        if matches:
            trains[line_key] = matches
    buses = [s for s in grouped.buses if needle in s.name.casefold()]
    return GroupedLocations(trains=trains, buses=buses)
