"""Prometheus exposition of the published snapshot."""

from collections.abc import Iterator

from prometheus_client import CollectorRegistry
from prometheus_client.core import GaugeMetricFamily
from prometheus_client.registry import Collector

from app.metrics.snapshot import FAMILIES
from app.metrics.store import SnapshotStore


class SnapshotCollector(Collector):
    """Custom collector that renders every gauge family from one snapshot per scrape."""

    def __init__(self, store: SnapshotStore) -> None:
        """Read snapshots from the given store."""
        self.store = store

    def collect(self) -> Iterator[GaugeMetricFamily]:
        """Yield all gauge families from a single snapshot reference."""
        families = self.store.current().families()
        for family in FAMILIES:
            gauge = GaugeMetricFamily(family.name, family.documentation, labels=list(family.labels))
            for labels, value in families[family].items():
                gauge.add_metric(list(labels), value)
            yield gauge

    def describe(self) -> Iterator[GaugeMetricFamily]:
        """Describe the families without touching the snapshot."""
        for family in FAMILIES:
            yield GaugeMetricFamily(family.name, family.documentation, labels=list(family.labels))


def build_registry(store: SnapshotStore) -> CollectorRegistry:
    """Create a registry exposing only the ledger gauges."""
    registry = CollectorRegistry(auto_describe=True)
    registry.register(SnapshotCollector(store))
    return registry
