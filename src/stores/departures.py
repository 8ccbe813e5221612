"""Departure store: departures per (service run, station, service date)."""
from __future__ import annotations

from src.models.records import Departure
from src.stores.base import RecordStore
from src.stores.dates import parse_service_date


class DepartureStore(RecordStore[Departure]):
    name = "departures"
    model = Departure

    def key_for(self, record: Departure) -> tuple[str, str, str]:
        return (record.id, record.station.code.upper(), record.service_date.isoformat())

    def get_departure(self, departure_id: str, station: str, date: str) -> Departure | None:
        """Look up one departure; raises InvalidDateError for a bad date token."""
        service_date = parse_service_date(date)
        return self.get((departure_id, station.upper(), service_date.isoformat()))

    def get_station_departures(self, station: str, include_hidden: bool = False) -> list[Departure]:
        code = station.upper()
        return self._select(lambda d: d.station.code.upper() == code, include_hidden)

    def get_uic_departures(self, uic: str, include_hidden: bool = False) -> list[Departure]:
        return self._select(lambda d: d.station.uic == uic, include_hidden)

    def _select(self, predicate, include_hidden: bool) -> list[Departure]:
        departures = [
            d for d in self.snapshot()
            if predicate(d) and (include_hidden or not d.hidden)
        ]
        return sorted(departures, key=lambda d: d.departure_time)
