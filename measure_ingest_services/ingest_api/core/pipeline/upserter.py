"""Upsert del resumen por archivo.

Last write wins per file name: the freshly computed summary replaces every
field of the stored one, nothing is merged.
"""

from __future__ import annotations

import logging
import threading
import weakref

from ..domain.stores import SummaryStore
from ..domain.summary import AggregateSummary

logger = logging.getLogger(__name__)


class KeyedLocks:
    """One lock per key, created lazily. Different keys never contend.

    Entries live only while someone holds a reference to the lock, so keys
    that are no longer being written do not accumulate.
    """

    def __init__(self):
        self._locks: "weakref.WeakValueDictionary[str, threading.Lock]" = weakref.WeakValueDictionary()
        self._guard = threading.Lock()

    def get(self, key: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


class AggregateUpserter:
    """Writes a computed summary under its file key.

    Same-key upserts are serialized in-process; across processes the store
    primitive itself is a single atomic insert-or-update.
    """

    def __init__(self, summary_store: SummaryStore, locks: KeyedLocks | None = None):
        self._store = summary_store
        self._locks = locks if locks is not None else KeyedLocks()

    def upsert(self, file_key: str, computed: AggregateSummary) -> AggregateSummary:
        if computed.file_name != file_key:
            raise ValueError(
                f"summary key mismatch: file_key={file_key!r} summary={computed.file_name!r}"
            )

        with self._locks.get(file_key):
            self._store.upsert(computed)

        logger.info(
            "[UPSERT] Summary written: file=%s mean_value=%.4f median=%.4f",
            file_key,
            computed.mean_value,
            computed.median_value,
        )
        return computed
