"""Single owner of the published metrics snapshot."""

import threading

from app.metrics.snapshot import MetricsSnapshot


class SnapshotStore:
    """Holds one snapshot reference and swaps it atomically on publish.

    Readers call ``current()`` once per query and work from that reference, so a
    query never mixes families from two refresh cycles.
    """

    def __init__(self, initial: MetricsSnapshot | None = None) -> None:
        """Start from the given snapshot, or an empty one."""
        self._lock = threading.Lock()
        self._snapshot = initial or MetricsSnapshot.empty()

    def current(self) -> MetricsSnapshot:
        """Return the most recently published snapshot."""
        with self._lock:
            return self._snapshot

    def publish(self, snapshot: MetricsSnapshot) -> MetricsSnapshot:
        """Replace the published snapshot and return the one it replaced."""
        with self._lock:
            previous, self._snapshot = self._snapshot, snapshot
        return previous
