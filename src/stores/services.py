"""Service store: full service runs per (service id, service date)."""
from __future__ import annotations

from src.models.records import Service
from src.stores.base import RecordStore
from src.stores.dates import parse_service_date


class ServiceStore(RecordStore[Service]):
    name = "services"
    model = Service

    def key_for(self, record: Service) -> tuple[str, str]:
        return (record.id, record.service_date.isoformat())

    def get_service(self, service_id: str, date: str) -> Service | None:
        """Look up one service; raises InvalidDateError for a bad date token."""
        service_date = parse_service_date(date)
        return self.get((service_id, service_date.isoformat()))
