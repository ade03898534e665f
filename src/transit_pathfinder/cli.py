#!/usr/bin/env python3
"""Command-line interface for the trip planner."""

import logging
import sys
from typing import Optional

from . import config
from .catalog import get_catalog
from .dataset import DataLoadError
from .planner import Criteria, Field, TripPlanner, ValidationError, build_redirect_url
from .stations import Location
from .status import get_service_status

MAX_SUGGESTIONS = 15


class QuitRequested(Exception):
    pass


def print_banner():
    """Print the welcome banner."""
    print("""
╔═══════════════════════════════════════════════════════════╗
║                  Transit Pathfinder 🚆                    ║
║                                                           ║
║  Type part of a station name and pick from the list.     ║
║                                                           ║
║  Commands:                                                ║
║    /swap    - Swap origin and destination                ║
║    /lines   - List lines and their stations              ║
║    /status  - Show service status                        ║
║    /quit    - Exit the program                           ║
╚═══════════════════════════════════════════════════════════╝
""")


def print_suggestions(planner: TripPlanner, limit: int = MAX_SUGGESTIONS) -> list[Location]:
    """Print the open suggestion panel as a numbered list."""
    suggestions = planner.form.suggestions
    numbered: list[Location] = []
    if suggestions is None or suggestions.is_empty():
        print("  (no matching stations)")
        return numbered

    details = planner.catalog.line_details
    for line_key, stations in suggestions.trains.items():
        if len(numbered) >= limit:
            break
        info = details.get(line_key)
        print(f"  [{line_key}] {info.name if info else 'Unknown Line'}")
        for station in stations:
            if len(numbered) >= limit:
                break
            numbered.append(station)
            print(f"    {len(numbered):>2}. {station.name}")
    if suggestions.buses and len(numbered) < limit:
        print("  🚏 Bus Stops")
        for stop in suggestions.buses:
            if len(numbered) >= limit:
                break
            numbered.append(stop)
            lines = f"  ({', '.join(stop.lines)})" if stop.lines else ""
            print(f"    {len(numbered):>2}. {stop.name}{lines}")
    if len(suggestions) > len(numbered):
        print(f"  ... {len(suggestions) - len(numbered)} more, keep typing to narrow down")
    return numbered


def print_lines(planner: TripPlanner):
    for group in planner.catalog.line_groups():
        info = planner.catalog.line_details.get(group.line_key)
        print(f"\n[{group.line_key}] {info.name if info else 'Unknown Line'}")
        print("  " + " - ".join(s.name for s in group.stations))


def print_status():
    categories = get_service_status()
    if categories is None:
        print("\n[Could not load service status. Please try again later.]")
        return
    for category in categories:
        print(f"\n{category.title}")
        for item in category.items:
            print(f"  {item.label:<30} {item.status} ({item.color})")


def handle_command(planner: TripPlanner, text: str) -> bool:
    """Run a slash command; returns False if text is not one."""
    command = text.lower()
    if command in ["/quit", "/exit", "/q"]:
        raise QuitRequested
    if command == "/swap":
        planner.swap()
        print(f"\n[Origin: {planner.form.origin or '-'}  Destination: {planner.form.destination or '-'}]")
    elif command == "/lines":
        print_lines(planner)
    elif command == "/status":
        print_status()
    else:
        return False
    return True


def prompt_location(planner: TripPlanner, target: Field) -> Location:
    """Ask until the field names a known location."""
    label = "Origin" if target is Field.ORIGIN else "Destination"
    numbered: list[Location] = []

    while True:
        current = planner.form.origin if target is Field.ORIGIN else planner.form.destination
        hint = f" [{current}]" if current else ""
        text = input(f"\n{label}{hint}: ").strip()

        if not text and current:
            text = current
        if text.startswith("/"):
            if not handle_command(planner, text):
                print(f"[Unknown command: {text}]")
            continue
        location = planner.catalog.find_by_name(text)
        if location is not None:
            planner.select_suggestion(target, location)
            return location
        if text.isdigit() and numbered:
            index = int(text) - 1
            if 0 <= index < len(numbered):
                planner.select_suggestion(target, numbered[index])
                return numbered[index]
            print("[No suggestion with that number]")
            continue

        planner.query_changed(target, text)
        numbered = print_suggestions(planner)


def prompt_criteria(planner: TripPlanner) -> Criteria:
    options = list(Criteria)
    for i, option in enumerate(options, 1):
        marker = "*" if option is planner.form.criteria else " "
        print(f"  {marker}{i}. {option.label}")
    text = input("Travel option: ").strip()
    if text.isdigit() and 1 <= int(text) <= len(options):
        planner.set_criteria(options[int(text) - 1])
    return planner.form.criteria


def plan_trip(planner: TripPlanner) -> Optional[str]:
    """Walk the user through one trip; returns the redirect URL."""
    prompt_location(planner, Field.ORIGIN)
    prompt_location(planner, Field.DESTINATION)
    prompt_criteria(planner)
    try:
        query = planner.submit()
    except ValidationError as e:
        print(f"\n[{e.message}]")
        return None
    return build_redirect_url(query)


def main():
    """Run the interactive planner."""
    logging.basicConfig(level=config.LOG_LEVEL)
    print_banner()

    planner = TripPlanner()
    print("Loading station data...")
    try:
        planner.data_loaded(get_catalog())
    except DataLoadError as e:
        planner.load_failed()
        print(f"\n[{planner.banner}]")
        print(f"[{e}]")
        sys.exit(1)

    while True:
        try:
            url = plan_trip(planner)
            if url:
                print(f"\nOpen this link for your route:\n  {url}")
        except (KeyboardInterrupt, EOFError, QuitRequested):
            print("\n\nGoodbye! Safe travels! 🚆")
            break


if __name__ == "__main__":
    main()
