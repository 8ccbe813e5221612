"""The set of stores served by the API."""
from __future__ import annotations

from dataclasses import dataclass, field

from src.stores.arrivals import ArrivalStore
from src.stores.departures import DepartureStore
from src.stores.services import ServiceStore


@dataclass
class Stores:
    arrivals: ArrivalStore = field(default_factory=ArrivalStore)
    departures: DepartureStore = field(default_factory=DepartureStore)
    services: ServiceStore = field(default_factory=ServiceStore)

    def statuses(self) -> dict[str, str]:
        """Current status of every store, read at call time."""
        return {
            "arrivals": self.arrivals.status,
            "departures": self.departures.status,
            "services": self.services.status,
        }
