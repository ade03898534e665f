"""Loader for the network dataset and adjacency (datanodes) documents."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import requests

from . import config

logger = logging.getLogger(__name__)


class DataLoadError(Exception):
    """The dataset or adjacency document could not be fetched or parsed."""


@dataclass
class NetworkDocuments:
    """The two raw payloads every catalog is derived from."""
    dataset: dict[str, Any]
    datanodes: dict[str, Any]


def fetch_document(url: str, timeout: Optional[float] = None) -> Any:
    """Fetch a JSON document over HTTP.

    Args:
        url: Document URL
        timeout: Transport timeout in seconds (defaults to the configured one)

    Returns:
        The decoded JSON value

    Raises:
        DataLoadError: On connection failure, non-success status or bad JSON
    """
    timeout = config.HTTP_TIMEOUT if timeout is None else timeout
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
        return response.json()
    except requests.exceptions.Timeout as e:
        logger.error("Timed out fetching %s after %s seconds", url, timeout)
        raise DataLoadError(f"Request timed out: {url}") from e
    except requests.exceptions.HTTPError as e:
        logger.error("HTTP error fetching %s: %s", url, e)
        raise DataLoadError(f"HTTP error: {e}") from e
    except requests.exceptions.JSONDecodeError as e:
        logger.error("Invalid JSON from %s: %s", url, e)
        raise DataLoadError(f"Invalid JSON from {url}") from e
    except requests.exceptions.RequestException as e:
        logger.error("Error fetching %s: %s", url, e)
        raise DataLoadError(f"Connection failed: {e}") from e


def read_document(path: Path | str) -> Any:
    """Read a JSON document from disk."""
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except OSError as e:
        logger.error("Error reading %s: %s", path, e)
        raise DataLoadError(f"Could not read {path}") from e
    except ValueError as e:
        logger.error("Invalid JSON in %s: %s", path, e)
        raise DataLoadError(f"Invalid JSON in {path}") from e


def normalize_dataset(raw: Any) -> dict[str, Any]:
    """Check the dataset shape and fill in optional sections.

    Only `stations` is mandatory; bus stops, routes, bus routes and the
    terminus table default to empty.
    """
    if not isinstance(raw, dict) or not isinstance(raw.get("stations"), list):
        raise DataLoadError("Dataset document has no 'stations' list")

    dataset = dict(raw)
    for section in ("bus_stops", "routes", "bus_routes"):
        value = dataset.get(section) or []
        if not isinstance(value, list):
            raise DataLoadError(f"Dataset section '{section}' must be a list")
        dataset[section] = value

    for section in ("stations", "bus_stops", "routes", "bus_routes"):
        for record in dataset[section]:
            if not isinstance(record, dict) or record.get("key") is None:
                raise DataLoadError(f"Dataset section '{section}' has a record without a key")

    terminus = dataset.get("terminus") or {}
    if not isinstance(terminus, dict):
        raise DataLoadError("Dataset section 'terminus' must be a mapping")
    dataset["terminus"] = {
        str(line_key): [str(k) for k in keys]
        for line_key, keys in terminus.items()
        if isinstance(keys, list)
    }
    return dataset


def normalize_datanodes(raw: Any) -> dict[str, dict[str, Any]]:
    """Check the adjacency shape; keys become strings, order is preserved."""
    if not isinstance(raw, dict):
        raise DataLoadError("Adjacency document must be a mapping")

    datanodes: dict[str, dict[str, Any]] = {}
    for station_key, neighbors in raw.items():
        if not isinstance(neighbors, dict):
            continue
        datanodes[str(station_key)] = {
            str(neighbor_key): conn
            for neighbor_key, conn in neighbors.items()
            if isinstance(conn, dict)
        }
    return datanodes


def load_documents(
    dataset_source: Optional[str] = None,
    datanodes_source: Optional[str] = None,
) -> NetworkDocuments:
    """Load both documents, preferring configured local files over URLs.

    Args:
        dataset_source: Path or URL overriding the configured dataset source
        datanodes_source: Path or URL overriding the configured adjacency source

    Raises:
        DataLoadError: If either document is unavailable or malformed
    """
    dataset_source = dataset_source or config.DATASET_PATH or config.DATASET_URL
    datanodes_source = datanodes_source or config.DATANODES_PATH or config.DATANODES_URL

    dataset = normalize_dataset(_load(dataset_source))
    datanodes = normalize_datanodes(_load(datanodes_source))

    logger.info(
        "Loaded dataset: %d stations, %d bus stops, %d adjacency entries",
        len(dataset["stations"]), len(dataset["bus_stops"]), len(datanodes),
    )
    return NetworkDocuments(dataset=dataset, datanodes=datanodes)


def _load(source: str) -> Any:
    if source.startswith(("http://", "https://")):
        return fetch_document(source)
    return read_document(source)
