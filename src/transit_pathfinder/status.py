"""Service status feed grouped by operator."""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Optional

import requests

from . import config

logger = logging.getLogger(__name__)

STATUS_COLORS = {
    "Closed": "red",
    "Crowded": "yellow",
    "Busy": "yellow",
    "Partially Open": "amber",
    "Normal": "green",
}
DEFAULT_STATUS_COLOR = "gray"


def status_color(status: str) -> str:
    """Colour class for a status label; unknown labels are gray."""
    return STATUS_COLORS.get(status, DEFAULT_STATUS_COLOR)


@dataclass
class StatusItem:
    label: str
    status: str

    @property
    def color(self) -> str:
        return status_color(self.status)


@dataclass
class StatusCategory:
    """All routes run by one operator."""
    title: str
    items: list[StatusItem] = field(default_factory=list)


def group_status_rows(rows: Sequence[Sequence[Any]]) -> list[StatusCategory]:
    """Group feed rows by operator in first-seen order.

    The first row is a header. Each data row is
    ``[_, route, operator, status, ...]``; short rows are skipped.
    """
    categories: dict[str, StatusCategory] = {}
    for row in rows[1:]:
        if not isinstance(row, (list, tuple)) or len(row) < 4:
            continue
        _, route, operator, status = row[:4]
        category = categories.setdefault(str(operator), StatusCategory(title=str(operator)))
        category.items.append(StatusItem(label=str(route), status=str(status)))
    return list(categories.values())


class StatusFeed:
    """Fetches the status sheet with a short-lived cache."""

    def __init__(self, url: Optional[str] = None, cache_ttl: float = config.STATUS_CACHE_TTL):
        self.url = url or config.STATUS_URL
        self._cache: Optional[tuple[float, list[StatusCategory]]] = None
        self._cache_ttl = cache_ttl

    def get_status(self) -> Optional[list[StatusCategory]]:
        """Grouped status, or None if the feed could not be read."""
        if self._cache is not None:
            cached_time, cached_data = self._cache
            if time.time() - cached_time < self._cache_ttl:
                return cached_data

        try:
            response = requests.get(self.url, timeout=config.HTTP_TIMEOUT)
            response.raise_for_status()
            rows = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.error("Error fetching service status: %s", e)
            return None

        if not isinstance(rows, list):
            logger.error("Unexpected service status payload: %s", type(rows).__name__)
            return None

        categories = group_status_rows(rows)
        self._cache = (time.time(), categories)
        return categories


# Singleton instance
status_feed = StatusFeed()


def get_service_status() -> Optional[list[StatusCategory]]:
    """Convenience function to get the grouped service status."""
    return status_feed.get_status()
