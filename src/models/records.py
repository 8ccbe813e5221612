"""
Pydantic v2 records held by the in-memory stores.

The API serialises these with model_dump(mode="json"); field names are the
wire names. Times must carry a UTC offset so records from different producers
stay comparable.
"""
from __future__ import annotations

from datetime import date

from pydantic import AwareDatetime, BaseModel, Field


# ─────────────────────────────────────────────────────────────────────────────
# Stations
# ─────────────────────────────────────────────────────────────────────────────

class Station(BaseModel):
    code: str                       # es. "UT", "ASD"
    uic: str | None = None          # es. "8400621"
    name_short: str = ""
    name_medium: str = ""
    name_long: str = ""


# ─────────────────────────────────────────────────────────────────────────────
# Arrivals / departures
# ─────────────────────────────────────────────────────────────────────────────

class _StationEvent(BaseModel):
    """Fields shared by arrivals and departures at a single station."""
    id: str                         # service run identifier
    service_id: str = ""
    service_number: str = ""
    service_date: date
    station: Station
    company: str = ""
    transport_type: str = ""
    platform_planned: str | None = None
    platform_actual: str | None = None
    delay: int = Field(0, description="Delay in seconds")
    cancelled: bool = False
    hidden: bool = False
    timestamp: AwareDatetime        # producer timestamp, newest wins


class Arrival(_StationEvent):
    arrival_time: AwareDatetime
    origin: list[Station] = Field(default_factory=list)
    via: list[Station] = Field(default_factory=list)


class Departure(_StationEvent):
    departure_time: AwareDatetime
    destination: list[Station] = Field(default_factory=list)
    via: list[Station] = Field(default_factory=list)
    reservation_required: bool = False


# ─────────────────────────────────────────────────────────────────────────────
# Services
# ─────────────────────────────────────────────────────────────────────────────

class ServiceStop(BaseModel):
    station: Station
    arrival_time: AwareDatetime | None = None
    departure_time: AwareDatetime | None = None
    arrival_delay: int = 0
    departure_delay: int = 0
    platform: str | None = None
    stopping: bool = True
    cancelled: bool = False


class ServicePart(BaseModel):
    service_number: str
    stops: list[ServiceStop] = Field(default_factory=list)


class Service(BaseModel):
    id: str
    service_number: str = ""
    service_date: date
    service_type: str = ""
    company: str = ""
    parts: list[ServicePart] = Field(default_factory=list)
    timestamp: AwareDatetime
