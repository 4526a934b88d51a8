"""In-memory access record store.

Reference implementation of :class:`AccessPersistence`. Every create
appends to the account's trail, so the latest record is the current one
and earlier records stay readable through :meth:`InMemoryAccessStore.history`.

Updates use optimistic concurrency: the record must carry the current
record's ``activated_at``. An update racing a version change (which creates
a newer record) is rejected and surfaces as ``PersistenceError``.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from .lifecycle import AccessPersistence, AccessRecord

logger = logging.getLogger(__name__)


class InMemoryAccessStore(AccessPersistence):
    """Thread-safe access record store keyed by account id."""

    def __init__(self) -> None:
        self._records: dict[str, list[AccessRecord]] = {}
        self._lock = threading.Lock()

    def load_current_access_record(self, account_id: str) -> Optional[AccessRecord]:
        with self._lock:
            trail = self._records.get(account_id)
            return trail[-1] if trail else None

    def create_access_record(self, record: AccessRecord) -> bool:
        with self._lock:
            self._records.setdefault(record.account_id, []).append(record)
        return True

    def update_access_record(self, record: AccessRecord) -> bool:
        with self._lock:
            trail = self._records.get(record.account_id)
            if not trail or trail[-1].activated_at != record.activated_at:
                logger.warning("Rejected stale access record update for account %s", record.account_id)
                return False
            trail[-1] = record
        return True

    def history(self, account_id: str) -> list[AccessRecord]:
        """All records of an account, oldest first."""
        with self._lock:
            return list(self._records.get(account_id, ()))


__all__ = ["InMemoryAccessStore"]
