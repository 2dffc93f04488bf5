# core/usage.py

"""Persisted per-identifier usage counter."""
import logging
import threading
from pathlib import Path
from typing import Dict, List

from utils.file_utils import read_json, write_json

logger = logging.getLogger(__name__)

class UsageTracker:
    """
    Counts how often each identifier has been chosen. Counts live in memory
    and are written to a JSON file in the background after every change.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = threading.Lock()
        self._save_lock = threading.Lock()
        self._pending: List[threading.Thread] = []
        self._counts: Dict[str, int] = self._load()

    def _load(self) -> Dict[str, int]:
        data = read_json(self.path, {})
        if not isinstance(data, dict):
            return {}
        counts = {str(key): value for key, value in data.items()
                  if isinstance(value, int) and not isinstance(value, bool) and value >= 0}
        logger.debug("Loaded usage counts for %d identifiers", len(counts))
        return counts

    def record(self, identifier: str):
        """Increment the count for ``identifier`` and persist in the background."""
        with self._lock:
            self._counts[identifier] = self._counts.get(identifier, 0) + 1
            self._pending = [t for t in self._pending if t.is_alive()]
            thread = threading.Thread(target=self.save, name="usage-save", daemon=True)
            self._pending.append(thread)
        thread.start()

    def score(self, identifier: str) -> int:
        with self._lock:
            return self._counts.get(identifier, 0)

    def counts(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._counts)

    def save(self):
        """Write the current counts to disk. Failures are logged and ignored."""
        with self._save_lock:
            with self._lock:
                data = dict(self._counts)
            if not write_json(self.path, data):
                logger.debug("Usage counts not saved to %s", self.path)

    def flush(self, timeout: float = 5.0):
        """Wait for the background saves started so far."""
        with self._lock:
            pending = list(self._pending)
        for thread in pending:
            thread.join(timeout)
