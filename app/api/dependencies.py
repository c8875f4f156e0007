"""FastAPI dependencies for DI (snapshot store, metrics registry).

The store and registry are created by the application lifespan and kept on ``app.state``; these helpers hand them to the endpoints so tests can swap in their own instances.
"""

from fastapi import Request
from prometheus_client import CollectorRegistry

from app.metrics.store import SnapshotStore


def get_store(request: Request) -> SnapshotStore:
    """Provide the snapshot store owned by the running application."""
    return request.app.state.store


def get_registry(request: Request) -> CollectorRegistry:
    """Provide the Prometheus registry exposing the store."""
    return request.app.state.registry
