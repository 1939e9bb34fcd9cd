"""
History Manager for PocketCalc
Keeps the most recent calculations and persists them as a JSON array
"""
import json
import logging
import threading

import config
from storage import PersistenceError

logger = logging.getLogger(__name__)


class HistoryManager:
    def __init__(self, store, key=config.HISTORY_KEY, max_items=config.MAX_HISTORY_ITEMS):
        self.store = store
        self.key = key
        self.max_items = max_items
        self.entries = []
        self._lock = threading.Lock()

    def load(self):
        """Load history from storage; missing or unreadable data means empty"""
        try:
            raw = self.store.get(self.key)
        except PersistenceError as e:
            logger.warning("Could not load history, starting empty: %s", e)
            raw = None

        entries = []
        if raw:
            try:
                data = json.loads(raw)
            except ValueError:
                logger.warning("Stored history is not valid JSON, ignoring it")
                data = []
            if isinstance(data, list):
                entries = [item for item in data if isinstance(item, str)][:self.max_items]
            else:
                logger.warning("Stored history is not a list, ignoring it")

        with self._lock:
            self.entries = entries
        return list(entries)

    def record(self, entry):
        """Prepend an entry, keep the newest max_items, persist the whole log.

        The in-memory log is updated even if the write fails; the failure is
        re-raised as PersistenceError.
        """
        with self._lock:
            self.entries = [entry] + self.entries[:self.max_items - 1]
            snapshot = list(self.entries)
            try:
                self.store.set(self.key, json.dumps(snapshot, ensure_ascii=False))
            except PersistenceError as e:
                logger.error("Failed to save history: %s", e)
                raise
        return snapshot

    def clear(self):
        """Delete the persisted copy, then empty the log.

        A failed delete leaves the log untouched and raises PersistenceError.
        """
        with self._lock:
            try:
                self.store.remove(self.key)
            except PersistenceError as e:
                logger.error("Failed to clear history: %s", e)
                raise
            self.entries = []

    def get_calculation_history(self):
        """Most recent first"""
        with self._lock:
            return list(self.entries)
