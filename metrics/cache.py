"""Accumulation cache for metrics waiting to be pushed"""
import threading
from typing import Dict, Optional


class MetricStorage:
    """Thread-safe mapping from derived metric key to raw value.

    Writers take the lock once per write. Readers get an independent copy via
    :meth:`snapshot` so the lock is never held while the batch is on the wire.
    Entries are never deleted individually.
    """

    def __init__(self):
        self.lock = threading.Lock()
        self._metrics: Dict[str, str] = {}

    def set(self, key: str, value: str) -> None:
        """Store a value, replacing any previous value for the key"""
        with self.lock:
            self._metrics[key] = value

    def get(self, key: str) -> Optional[str]:
        with self.lock:
            return self._metrics.get(key)

    def snapshot(self) -> Dict[str, str]:
        """Copy of the current contents"""
        with self.lock:
            return dict(self._metrics)

    def __len__(self) -> int:
        with self.lock:
            return len(self._metrics)

    def __contains__(self, key: str) -> bool:
        with self.lock:
            return key in self._metrics
