"""Trip-planning form as an explicit state machine.

The planner starts in LOADING, moves to READY once a catalog is available
(or ERROR if loading failed) and from then on reacts to user events:
focusing a field, typing, picking a suggestion, clicking away, swapping the
endpoints and submitting. Submitting resolves the typed names against the
catalog and yields the parameters for the external routing service.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from requests.models import PreparedRequest

from . import config
from .catalog import GroupedLocations, LocationCatalog
from .stations import Location
from .suggestions import filter_suggestions

logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Could not load station data. Please try refreshing the page."


class PlannerState(str, Enum):
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class Field(str, Enum):
    ORIGIN = "origin"
    DESTINATION = "destination"


class Criteria(str, Enum):
    """Travel preference passed to the routing service."""
    FASTEST = "fastest"
    MINSTA = "minsta"
    MINTRANS = "mintrans"

    @property
    def label(self) -> str:
        return CRITERIA_LABELS[self]


CRITERIA_LABELS = {
    Criteria.FASTEST: "Recommended",
    Criteria.MINSTA: "Minimum Stations",
    Criteria.MINTRANS: "Minimum Transfers",
}


class PlannerNotReady(RuntimeError):
    """A user event arrived before the catalog was loaded."""


class ValidationError(ValueError):
    """Typed origin or destination does not name a known location."""

    def __init__(self, field: Field, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


@dataclass
class FormState:
    origin: str = ""
    destination: str = ""
    criteria: Criteria = Criteria.FASTEST
    active_field: Optional[Field] = None
    suggestions: Optional[GroupedLocations] = None
    error: str = ""


@dataclass(frozen=True)
class TripQuery:
    """Resolved endpoints for the routing service."""
    criteria: Criteria
    origin: Location
    dest: Location

    def to_params(self, source: Optional[str] = None) -> dict[str, str]:
        params = {
            "criteria": self.criteria.value,
            "origin": self.origin.key,
            "dest": self.dest.key,
        }
        source = config.REDIRECT_SOURCE if source is None else source
        if source:
            params["source"] = source
        return params


def build_redirect_url(
    query: TripQuery,
    base_url: Optional[str] = None,
    source: Optional[str] = None,
) -> str:
    """URL of the routing service page for a resolved trip."""
    request = PreparedRequest()
    request.prepare_url(base_url or config.TRIPQUERY_URL, query.to_params(source))
    return request.url


@dataclass
class TripPlanner:
    """Form state plus the catalog it validates against."""
    state: PlannerState = PlannerState.LOADING
    form: FormState = field(default_factory=FormState)
    catalog: Optional[LocationCatalog] = None
    load_error: str = ""

    # --- load events ---

    def data_loaded(self, catalog: LocationCatalog):
        self.catalog = catalog
        self.state = PlannerState.READY
        self.load_error = ""

    def load_failed(self, message: str = LOAD_ERROR_MESSAGE):
        self.catalog = None
        self.state = PlannerState.ERROR
        self.load_error = message

    @property
    def banner(self) -> str:
        """Message to show above the form, if any."""
        return self.form.error or self.load_error

    # --- user events ---

    def field_focused(self, target: Field) -> GroupedLocations:
        self._require_ready()
        return self._open_suggestions(target)

    def query_changed(self, target: Field, text: str) -> GroupedLocations:
        self._require_ready()
        self._set_text(target, text)
        return self._open_suggestions(target)

    def click_outside(self):
        self._require_ready()
        self._close_suggestions()

    def select_suggestion(self, target: Field, location: Location):
        self._require_ready()
        self._set_text(target, location.name)
        self._close_suggestions()

    def swap(self):
        self._require_ready()
        self.form.origin, self.form.destination = self.form.destination, self.form.origin

    def set_criteria(self, value: str | Criteria):
        self._require_ready()
        self.form.criteria = Criteria(value)

    def apply_deep_link(self, params: Mapping[str, str]):
        """Pre-fill from criteria/origin/dest URL parameters.

        Unknown criteria or keys leave the form untouched.
        """
        self._require_ready()
        criteria = params.get("criteria")
        if criteria in {c.value for c in Criteria}:
            self.form.criteria = Criteria(criteria)

        for name, target in (("origin", Field.ORIGIN), ("dest", Field.DESTINATION)):
            key = params.get(name)
            if not key:
                continue
            location = self.catalog.find_by_key(key)
            if location:
                self._set_text(target, location.name)
            else:
                logger.debug("Ignoring unknown %s key %r in link", name, key)

    def submit(self) -> TripQuery:
        """Resolve both fields to locations.

        Raises:
            ValidationError: For the first field that does not resolve; the
                message is also kept as the form error
        """
        self._require_ready()
        self.form.error = ""

        origin = self.catalog.find_by_name(self.form.origin)
        if origin is None:
            self._reject(Field.ORIGIN, "Invalid origin. Please select a valid station from the list.")
        dest = self.catalog.find_by_name(self.form.destination)
        if dest is None:
            self._reject(Field.DESTINATION, "Invalid destination. Please select a valid station from the list.")

        return TripQuery(criteria=self.form.criteria, origin=origin, dest=dest)

    # --- internals ---

    def _require_ready(self):
        if self.state is not PlannerState.READY:
            raise PlannerNotReady(f"Planner is {self.state.value}")

    def _reject(self, target: Field, message: str):
        self.form.error = message
        raise ValidationError(target, message)

    def _text(self, target: Field) -> str:
        return self.form.origin if target is Field.ORIGIN else self.form.destination

    def _set_text(self, target: Field, text: str):
        if target is Field.ORIGIN:
            self.form.origin = text
        else:
            self.form.destination = text

    def _open_suggestions(self, target: Field) -> GroupedLocations:
        suggestions = filter_suggestions(self._text(target), self.catalog)
        self.form.active_field = target
        self.form.suggestions = suggestions
        return suggestions

    def _close_suggestions(self):
        self.form.active_field = None
        self.form.suggestions = None
