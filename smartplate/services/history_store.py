"""
Scan history: newest-first, capped at MAX_ITEMS, mirrored to local storage
under a single key on every change.

Mutations and their save run under one lock, so writes reach storage in the
same order as the in-memory changes. Storage failures are logged to the
status store and never raised; a missing or unreadable entry loads as an
empty history.
"""
import threading

from pydantic import TypeAdapter, ValidationError

from smartplate.adapters.storage.base import KeyValueStorage
from smartplate.orchestrator.contracts import ScanRecord
from smartplate.orchestrator.errors import PersistenceError

STORAGE_KEY = "plate_recognition_history"
MAX_ITEMS = 10

_records_adapter = TypeAdapter(list[ScanRecord])


class HistoryStore:
    def __init__(self, storage: KeyValueStorage, status_store, max_items: int = MAX_ITEMS):
        self.storage = storage
        self.status = status_store
        self.max_items = max_items
        self._records: list[ScanRecord] = []
        self._lock = threading.RLock()

    @property
    def records(self) -> list[ScanRecord]:
        with self._lock:
            return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def load(self) -> list[ScanRecord]:
        try:
            raw = self.storage.get_item(STORAGE_KEY)
        except PersistenceError as e:
            self.status.log(f"history_store: load failed: {e}")
            raw = None

        records: list[ScanRecord] = []
        if raw:
            try:
                records = _records_adapter.validate_json(raw)
            except ValidationError as e:
                self.status.log(f"history_store: discarding unreadable history ({e.error_count()} errors)")
                records = []

        if len(records) > self.max_items:
            self.status.log(f"history_store: trimming {len(records)} stored records to {self.max_items}")
            records = records[: self.max_items]
        with self._lock:
            self._records = records
        self.status.log(f"history_store: loaded {len(records)} records")
        return self.records

    def save(self) -> None:
        with self._lock:
            try:
                payload = _records_adapter.dump_json(self._records, by_alias=True).decode("utf-8")
                self.storage.set_item(STORAGE_KEY, payload)
            except PersistenceError as e:
                self.status.log(f"history_store: save failed: {e}")

    def prepend(self, record: ScanRecord) -> None:
        with self._lock:
            self._records = [record, *self._records][: self.max_items]
            self.save()

    def remove(self, record_id: str) -> bool:
        with self._lock:
            for i, rec in enumerate(self._records):
                if rec.id == record_id:
                    del self._records[i]
                    self.save()
                    return True
        return False

    def clear(self) -> None:
        with self._lock:
            self._records = []
            try:
                self.storage.remove_item(STORAGE_KEY)
            except PersistenceError as e:
                self.status.log(f"history_store: clear failed: {e}")

    def contains(self, record_id: str) -> bool:
        with self._lock:
            return any(rec.id == record_id for rec in self._records)
