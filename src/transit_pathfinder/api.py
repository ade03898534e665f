"""FastAPI web interface for the trip-planning form."""

import logging
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from . import __version__, config
from .catalog import GroupedLocations, LocationCatalog, get_catalog
from .dataset import DataLoadError
from .lines import LineGroup
from .planner import (
    LOAD_ERROR_MESSAGE,
    Criteria,
    Field,
    TripPlanner,
    ValidationError,
    build_redirect_url,
)
from .stations import Location
from .status import get_service_status

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Transit Pathfinder",
    description="Station catalog and trip-planning form for an external routing service",
    version=__version__,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class PlanRequest(BaseModel):
    origin: str
    destination: str
    criteria: Criteria = Criteria.FASTEST


def catalog_dependency() -> LocationCatalog:
    """Loaded catalog, or 503 while the dataset is unavailable."""
    try:
        return get_catalog()
    except DataLoadError as e:
        logger.error("Catalog unavailable: %s", e)
        raise HTTPException(status_code=503, detail=LOAD_ERROR_MESSAGE)


def _ready_planner(catalog: LocationCatalog) -> TripPlanner:
    planner = TripPlanner()
    planner.data_loaded(catalog)
    return planner


def _location_json(loc: Location) -> dict:
    return {"key": loc.key, "name": loc.name, "type": loc.type.value, "lines": list(loc.lines)}


def _line_header(line_key: str, catalog: LocationCatalog) -> dict:
    info = catalog.line_details.get(line_key)
    return {
        "key": line_key,
        "name": info.name if info else "Unknown Line",
        "color": info.color if info else config.DEFAULT_LINE_COLOR,
    }


def _line_json(group: LineGroup, catalog: LocationCatalog) -> dict:
    return {
        **_line_header(group.line_key, catalog),
        "ordering": group.ordering.value,
        "stations": [_location_json(s) for s in group.stations],
    }


def _grouped_json(grouped: GroupedLocations, catalog: LocationCatalog) -> dict:
    lines = [
        {**_line_header(line_key, catalog), "stations": [_location_json(s) for s in stations]}
        for line_key, stations in grouped.trains.items()
    ]
    return {"lines": lines, "bus_stops": [_location_json(s) for s in grouped.buses]}


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "Transit Pathfinder"}


@app.get("/locations")
async def list_locations(catalog: LocationCatalog = Depends(catalog_dependency)):
    """All stations and bus stops."""
    locations = catalog.all_locations()
    return {"count": len(locations), "locations": [_location_json(loc) for loc in locations]}


@app.get("/lines")
async def list_lines(catalog: LocationCatalog = Depends(catalog_dependency)):
    """Every train line with its stations in rider order."""
    return {"lines": [_line_json(group, catalog) for group in catalog.line_groups()]}


@app.get("/lines/{line_key}")
async def get_line(line_key: str, catalog: LocationCatalog = Depends(catalog_dependency)):
    group = catalog.line_group(line_key)
    if group is None:
        raise HTTPException(status_code=404, detail=f"Line not found: {line_key}")
    return _line_json(group, catalog)


@app.get("/suggestions")
async def suggestions(q: str = "", catalog: LocationCatalog = Depends(catalog_dependency)):
    """Suggestion panel contents for a partially typed name."""
    planner = _ready_planner(catalog)
    return _grouped_json(planner.query_changed(Field.ORIGIN, q), catalog)


@app.get("/prefill")
async def prefill(
    criteria: Optional[str] = None,
    origin: Optional[str] = None,
    dest: Optional[str] = None,
    catalog: LocationCatalog = Depends(catalog_dependency),
):
    """Form values for a deep link; unknown keys are ignored."""
    planner = _ready_planner(catalog)
    params = {k: v for k, v in (("criteria", criteria), ("origin", origin), ("dest", dest)) if v}
    planner.apply_deep_link(params)
    return {
        "criteria": planner.form.criteria.value,
        "origin": planner.form.origin,
        "destination": planner.form.destination,
    }


@app.post("/plan")
async def plan(request: PlanRequest, catalog: LocationCatalog = Depends(catalog_dependency)):
    """Resolve typed names and return the routing-service redirect."""
    planner = _ready_planner(catalog)
    planner.form.origin = request.origin
    planner.form.destination = request.destination
    planner.set_criteria(request.criteria)

    try:
        query = planner.submit()
    except ValidationError as e:
        raise HTTPException(status_code=422, detail={"field": e.field.value, "message": e.message})

    return {
        **query.to_params(),
        "origin_name": query.origin.name,
        "dest_name": query.dest.name,
        "url": build_redirect_url(query),
    }


@app.get("/status")
async def service_status():
    """Service status grouped by operator."""
    categories = get_service_status()
    if categories is None:
        raise HTTPException(status_code=503, detail="Could not load service status. Please try again later.")
    return {
        "categories": [
            {
                "title": category.title,
                "items": [
                    {"label": item.label, "status": item.status, "color": item.color}
                    for item in category.items
                ],
            }
            for category in categories
        ]
    }


def run_server(host: str = "0.0.0.0", port: int = 8000):
    """Run the FastAPI server."""
    import uvicorn
    logging.basicConfig(level=config.LOG_LEVEL)
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run_server()
