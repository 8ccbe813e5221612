"""Arrival store: arrivals per (service run, station, service date)."""
from __future__ import annotations

from src.models.records import Arrival
from src.stores.base import RecordStore
from src.stores.dates import parse_service_date


class ArrivalStore(RecordStore[Arrival]):
    name = "arrivals"
    model = Arrival

    def key_for(self, record: Arrival) -> tuple[str, str, str]:
        return (record.id, record.station.code.upper(), record.service_date.isoformat())

    def get_arrival(self, arrival_id: str, station: str, date: str) -> Arrival | None:
        """Look up one arrival; raises InvalidDateError for a bad date token."""
        service_date = parse_service_date(date)
        return self.get((arrival_id, station.upper(), service_date.isoformat()))

    def get_station_arrivals(self, station: str, include_hidden: bool = False) -> list[Arrival]:
        code = station.upper()
        arrivals = [
            arrival for arrival in self.snapshot()
            if arrival.station.code.upper() == code and (include_hidden or not arrival.hidden)
        ]
        return sorted(arrivals, key=lambda a: a.arrival_time)
