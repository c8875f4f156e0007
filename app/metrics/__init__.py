"""Metrics package: the immutable snapshot, its owning store and the Prometheus collector."""

from .snapshot import MetricsSnapshot, month_tag  # noqa: F401
from .store import SnapshotStore  # noqa: F401
