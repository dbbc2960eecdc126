"""Cluster list cache and the refresh signal that invalidates it."""

import logging
import threading
from typing import Callable

from ..core.results import Errorable
from .client import KindClient, KindClusterInfo

logger = logging.getLogger(__name__)


class RefreshSignal:
    """Fired once after each successful create or delete."""

    def __init__(self):
        self._lock = threading.Lock()
        self._listeners: list[Callable[[], None]] = []
        self.emitted = 0

    def subscribe(self, listener: Callable[[], None]) -> Callable[[], None]:
        """Register a listener; returns a function that unregisters it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def emit(self) -> None:
        with self._lock:
            self.emitted += 1
            listeners = list(self._listeners)
        for listener in listeners:
            listener()


class ClusterListCache:
    """Caches `kind get clusters` until the next refresh."""

    def __init__(self, client: KindClient, signal: RefreshSignal | None = None):
        self.client = client
        self._lock = threading.Lock()
        self._clusters: Errorable[list[KindClusterInfo]] | None = None
        self._unsubscribe: Callable[[], None] | None = None
        if signal is not None:
            self._unsubscribe = signal.subscribe(self.invalidate)

    def clusters(self) -> Errorable[list[KindClusterInfo]]:
        with self._lock:
            if self._clusters is None:
                self._clusters = self.client.get_clusters()
            return self._clusters

    def invalidate(self) -> None:
        logger.debug("cluster list invalidated")
        with self._lock:
            self._clusters = None

    def close(self) -> None:
        """Stop listening for refreshes."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
