"""
Common machinery for the in-memory record stores.

Every store keeps the newest version of each record (by producer timestamp),
exposes a textual status and a set of processing counters. Reads and writes
are serialised by a per-store lock; the API only ever reads.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import asdict, dataclass
from typing import Any, Generic, Hashable, Mapping, TypeVar

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


class StoreStatus:
    UNKNOWN = "UNKNOWN"
    UP = "UP"
    DOWN = "DOWN"
    RECOVERING = "RECOVERING"

    ALL = frozenset({UNKNOWN, UP, DOWN, RECOVERING})


@dataclass
class StoreCounters:
    received: int = 0
    processed: int = 0
    error: int = 0
    duplicates: int = 0
    outdated: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


class RecordStore(Generic[RecordT]):
    """Keyed store of timestamped records."""

    name = "records"
    model: type[BaseModel] = BaseModel

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: dict[Hashable, RecordT] = {}
        self._status = StoreStatus.UNKNOWN
        self.counters = StoreCounters()

    # ── status ───────────────────────────────────────────────────────────────

    @property
    def status(self) -> str:
        return self._status

    @status.setter
    def status(self, value: str) -> None:
        if value not in StoreStatus.ALL:
            raise ValueError(f"unknown store status {value!r}")
        if value != self._status:
            logger.info("%s store status: %s -> %s", self.name, self._status, value)
        self._status = value

    # ── writes ───────────────────────────────────────────────────────────────

    def key_for(self, record: RecordT) -> Hashable:
        raise NotImplementedError

    def process(self, record: RecordT) -> bool:
        """
        Store a record unless a newer or identical version is already present.

        Returns True when the record replaced (or created) the stored version.
        """
        key = self.key_for(record)
        with self._lock:
            self.counters.received += 1
            current = self._records.get(key)
            if current is not None:
                if record.timestamp == current.timestamp:
                    self.counters.duplicates += 1
                    return False
                if record.timestamp < current.timestamp:
                    self.counters.outdated += 1
                    return False
            self._records[key] = record
            self.counters.processed += 1
            return True

    def ingest(self, payload: Mapping[str, Any]) -> bool:
        """Validate a raw payload into the store model and process it."""
        try:
            record = self.model.model_validate(payload)
        except ValidationError as exc:
            with self._lock:
                self.counters.received += 1
                self.counters.error += 1
            logger.warning("%s store rejected payload: %d validation errors", self.name, exc.error_count())
            return False
        return self.process(record)  # type: ignore[arg-type]

    # ── reads ────────────────────────────────────────────────────────────────

    def get(self, key: Hashable) -> RecordT | None:
        with self._lock:
            return self._records.get(key)

    def snapshot(self) -> list[RecordT]:
        with self._lock:
            return list(self._records.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def stats(self) -> dict:
        """Aggregate statistics served by the ``/stats`` endpoints."""
        with self._lock:
            inventory = len(self._records)
            counters = self.counters.to_dict()
        return {
            "status": self.status,
            "inventory": inventory,
            "counters": counters,
        }
