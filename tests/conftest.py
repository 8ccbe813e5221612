"""
shared pytest fixtures for the REST API test suite.
"""
from __future__ import annotations

from datetime import date, datetime, timezone

import pytest
from fastapi.testclient import TestClient
from prometheus_client import CollectorRegistry

from src.api.main import create_app
from src.api.metrics import ApiMetrics
from src.models.records import Arrival, Departure, Service, ServicePart, ServiceStop, Station
from src.stores.base import StoreStatus
from src.stores.registry import Stores

SERVICE_DATE = date(2026, 10, 19)
SERVICE_DATE_STR = "2026-10-19"

UTRECHT = Station(code="UT", uic="8400621", name_short="Utrecht", name_medium="Utrecht C.", name_long="Utrecht Centraal")
AMSTERDAM = Station(code="ASD", uic="8400058", name_short="A'dam C", name_medium="Amsterdam C.", name_long="Amsterdam Centraal")


def _ts(hour: int, minute: int = 0) -> datetime:
    return datetime(2026, 10, 19, hour, minute, tzinfo=timezone.utc)


def make_arrival(**overrides) -> Arrival:
    fields = {
        "id": "1234",
        "service_number": "1234",
        "service_date": SERVICE_DATE,
        "station": UTRECHT,
        "company": "NS",
        "transport_type": "IC",
        "platform_planned": "5",
        "arrival_time": _ts(10, 15),
        "origin": [AMSTERDAM],
        "timestamp": _ts(9),
    }
    fields.update(overrides)
    return Arrival(**fields)


def make_departure(**overrides) -> Departure:
    fields = {
        "id": "1234",
        "service_number": "1234",
        "service_date": SERVICE_DATE,
        "station": UTRECHT,
        "company": "NS",
        "transport_type": "IC",
        "platform_planned": "5",
        "departure_time": _ts(10, 20),
        "destination": [AMSTERDAM],
        "timestamp": _ts(9),
    }
    fields.update(overrides)
    return Departure(**fields)


def make_service(**overrides) -> Service:
    fields = {
        "id": "1234",
        "service_number": "1234",
        "service_date": SERVICE_DATE,
        "service_type": "Intercity",
        "company": "NS",
        "parts": [
            ServicePart(
                service_number="1234",
                stops=[
                    ServiceStop(station=UTRECHT, departure_time=_ts(10, 20), platform="5"),
                    ServiceStop(station=AMSTERDAM, arrival_time=_ts(10, 47), platform="7a"),
                ],
            )
        ],
        "timestamp": _ts(9),
    }
    fields.update(overrides)
    return Service(**fields)


@pytest.fixture
def stores() -> Stores:
    """Stores with a handful of records around Utrecht Centraal."""
    stores = Stores()

    stores.arrivals.process(make_arrival())
    stores.arrivals.process(make_arrival(id="5678", service_number="5678", arrival_time=_ts(10, 2)))
    stores.arrivals.process(make_arrival(id="9999", service_number="9999", hidden=True))

    stores.departures.process(make_departure())
    stores.departures.process(make_departure(id="4321", service_number="4321", station=AMSTERDAM))

    stores.services.process(make_service())

    for store in (stores.arrivals, stores.departures, stores.services):
        store.status = StoreStatus.UP
    return stores


@pytest.fixture
def metrics() -> ApiMetrics:
    return ApiMetrics(CollectorRegistry())


@pytest.fixture
def app(stores, metrics):
    return create_app(stores, metrics)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


def sample_count(metrics: ApiMetrics, path: str) -> tuple[float, float]:
    """(request count, duration sample count) recorded for a route template."""
    requests = metrics.registry.get_sample_value("railfeed_api_requests_total", {"path": path})
    durations = metrics.registry.get_sample_value("railfeed_api_duration_seconds_count", {"path": path})
    return requests or 0.0, durations or 0.0
