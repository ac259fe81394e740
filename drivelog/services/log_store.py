import logging
import threading
from typing import Callable, Optional

from drivelog.errors import DuplicateRecordError, PersistenceError
from drivelog.ports import BlobStore, ConfirmationGate, Notifier
from drivelog.schemas.trip import AggregateStats, TripRecord
from drivelog.services.export import dump_records, from_json
from drivelog.services.stats import compute_stats

logger = logging.getLogger(__name__)

DELETE_PROMPT = "Are you sure you want to delete this log entry?"


class LogStore:
    """Newest-first trip log kept in memory and written through to a blob store.

    Every mutation saves the whole collection and recomputes the stats from
    scratch. Mutations are serialized with a lock so listeners always see a
    consistent collection.
    """

    def __init__(
        self,
        blob_store: BlobStore,
        gate: Optional[ConfirmationGate] = None,
        notifier: Optional[Notifier] = None,
    ):
        self.blob_store = blob_store
        self.gate = gate
        self.notifier = notifier

        self._lock = threading.RLock()
        self._records: list[TripRecord] = []
        self._stats = compute_stats([])
        self._listeners: list[Callable[[AggregateStats], None]] = []

    def __len__(self) -> int:
        return len(self._records)

    @property
    def stats(self) -> AggregateStats:
        return self._stats

    def all(self) -> tuple[TripRecord, ...]:
        return tuple(self._records)

    def get(self, record_id: str) -> Optional[TripRecord]:
        return next((r for r in self._records if r.id == record_id), None)

    def subscribe(self, listener: Callable[[AggregateStats], None]) -> None:
        self._listeners.append(listener)

    def load(self) -> list[TripRecord]:
        """Replace the in-memory log with what the blob store holds.

        Unreadable or malformed content yields an empty log and a warning.
        """
        with self._lock:
            try:
                text = self.blob_store.load()
                records = from_json(text) if text else []
            except PersistenceError as e:
                logger.warning("Could not read stored logs: %s", e)
                self._notify("Could not read saved logs", "warning")
                records = []
            except ValueError as e:
                logger.warning("Stored logs are malformed, starting empty: %s", e)
                self._notify("Saved logs were unreadable and have been ignored", "warning")
                records = []

            self._records = self._unique(records)
            self._recompute()
            logger.info("Loaded %d trip log(s)", len(self._records))
            return list(self._records)

    def add(self, record: TripRecord) -> None:
        with self._lock:
            if self.get(record.id) is not None:
                raise DuplicateRecordError(f"Trip {record.id} is already logged")
            self._records.insert(0, record)
            self._commit()
        logger.info("Added trip %s (%.1f mi, %.2f hrs)", record.id, record.total_distance, record.total_duration)

    def delete(self, record_id: str, gate: Optional[ConfirmationGate] = None) -> bool:
        """Remove every record with ``record_id`` once the operator confirms.

        Returns False when the confirmation is declined. An unknown id still
        saves and recomputes.
        """
        gate = gate or self.gate
        if gate is None:
            raise ValueError("Deleting a trip requires a confirmation gate")
        if not gate.confirm(DELETE_PROMPT):
            return False

        with self._lock:
            before = len(self._records)
            self._records = [r for r in self._records if r.id != record_id]
            removed = before - len(self._records)
            self._commit()
        logger.info("Deleted %d trip(s) with id %s", removed, record_id)
        return True

    def _commit(self) -> None:
        try:
            self.blob_store.save(dump_records(self._records))
        except PersistenceError as e:
            logger.error("Error saving logs: %s", e)
            self._notify("Error saving data", "error")
        self._recompute()

    def _recompute(self) -> None:
        self._stats = compute_stats(self._records)
        for listener in list(self._listeners):
            listener(self._stats)

    def _notify(self, message: str, kind: str) -> None:
        if self.notifier is not None:
            self.notifier.notify(message, kind)

    @staticmethod
    def _unique(records: list[TripRecord]) -> list[TripRecord]:
        seen = set()
        unique = []
        for record in records:
            if record.id in seen:
                logger.warning("Dropping duplicate stored trip id %s", record.id)
                continue
            seen.add(record.id)
            unique.append(record)
        return unique
