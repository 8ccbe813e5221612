"""
FastAPI routes for the REST API (all GET, all JSON).

GET /version, /v1, /v2, /v2/version               — API version
GET /v2/status                                    — store status
GET /v2/{arrivals,departures,services}/stats      — store statistics
GET /v2/arrivals/station/{station}                — arrivals for a station code
GET /v2/departures/station/{station}              — departures for a station code
GET /v2/departures/uic/{station}                  — departures for a UIC number
GET /v2/arrivals/arrival/{id}/{station}/{date}    — arrival details
GET /v2/departures/departure/{id}/{station}/{date} — departure details
GET /v2/services/service/{id}/{date}              — service details
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, status

from src.api.instrumentation import InstrumentedRoute
from src.stores.dates import InvalidDateError
from src.stores.registry import Stores

API_VERSION = 2

router = APIRouter(route_class=InstrumentedRoute, redirect_slashes=False)


def get_stores(request: Request) -> Stores:
    """FastAPI dependency — the stores attached to the running app."""
    return request.app.state.stores


def _bad_date(exc: InvalidDateError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


def _not_found(what: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{what} not found")


# ─────────────────────────────────────────────────────────────────────────────
# Version / status
# ─────────────────────────────────────────────────────────────────────────────

async def api_version() -> dict:
    return {"version": API_VERSION}


for _path in ("/version", "/v1", "/v2", "/v2/version"):
    router.add_api_route(_path, api_version, methods=["GET"], tags=["system"])


@router.get("/v2/status", tags=["system"])
async def api_status(stores: Stores = Depends(get_stores)) -> dict:
    return stores.statuses()


# ─────────────────────────────────────────────────────────────────────────────
# Arrivals
# ─────────────────────────────────────────────────────────────────────────────

@router.get("/v2/arrivals/stats", tags=["arrivals"])
async def arrival_counters(stores: Stores = Depends(get_stores)) -> dict:
    return stores.arrivals.stats()


@router.get("/v2/arrivals/station/{station}", tags=["arrivals"])
async def arrivals_station(station: str, stores: Stores = Depends(get_stores)) -> dict:
    arrivals = stores.arrivals.get_station_arrivals(station)
    return {"arrivals": [a.model_dump(mode="json") for a in arrivals]}


@router.get("/v2/arrivals/arrival/{id}/{station}/{date}", tags=["arrivals"])
async def arrival_details(
    id: str,
    station: str,
    date: str,
    stores: Stores = Depends(get_stores),
) -> dict:
    try:
        arrival = stores.arrivals.get_arrival(id, station, date)
    except InvalidDateError as exc:
        raise _bad_date(exc) from exc
    if arrival is None:
        raise _not_found("arrival")
    return {"arrival": arrival.model_dump(mode="json")}


# ─────────────────────────────────────────────────────────────────────────────
# Departures
# ─────────────────────────────────────────────────────────────────────────────

@router.get("/v2/departures/stats", tags=["departures"])
async def departure_counters(stores: Stores = Depends(get_stores)) -> dict:
    return stores.departures.stats()


@router.get("/v2/departures/station/{station}", tags=["departures"])
async def departures_station(station: str, stores: Stores = Depends(get_stores)) -> dict:
    departures = stores.departures.get_station_departures(station)
    return {"departures": [d.model_dump(mode="json") for d in departures]}


@router.get("/v2/departures/uic/{station}", tags=["departures"])
async def departures_uic_station(station: str, stores: Stores = Depends(get_stores)) -> dict:
    departures = stores.departures.get_uic_departures(station)
    return {"departures": [d.model_dump(mode="json") for d in departures]}


@router.get("/v2/departures/departure/{id}/{station}/{date}", tags=["departures"])
async def departure_details(
    id: str,
    station: str,
    date: str,
    stores: Stores = Depends(get_stores),
) -> dict:
    try:
        departure = stores.departures.get_departure(id, station, date)
    except InvalidDateError as exc:
        raise _bad_date(exc) from exc
    if departure is None:
        raise _not_found("departure")
    return {"departure": departure.model_dump(mode="json")}


# ─────────────────────────────────────────────────────────────────────────────
# Services
# ─────────────────────────────────────────────────────────────────────────────

@router.get("/v2/services/stats", tags=["services"])
async def service_counters(stores: Stores = Depends(get_stores)) -> dict:
    return stores.services.stats()


@router.get("/v2/services/service/{id}/{date}", tags=["services"])
async def service_details(
    id: str,
    date: str,
    stores: Stores = Depends(get_stores),
) -> dict:
    try:
        service = stores.services.get_service(id, date)
    except InvalidDateError as exc:
        raise _bad_date(exc) from exc
    if service is None:
        raise _not_found("service")
    return {"service": service.model_dump(mode="json")}
