"""FastAPI endpoints for the ledger metrics exporter.

This module defines the Prometheus scrape endpoint, a JSON view of the current snapshot and the health check. Every endpoint reads the published snapshot exactly once per request.
"""

from fastapi import APIRouter, Depends, Response
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, generate_latest

from app.api.dependencies import get_registry, get_store
from app.core.models import MetricSample, SnapshotView
from app.metrics.store import SnapshotStore

router = APIRouter()


@router.get(
    "/metrics",
    summary="Prometheus metrics",
    description=(
        "Expose the ledger gauges in the Prometheus text format.\n\n"
        "**Families:** `ledger_expenses`, `ledger_assets`, `ledger_income`, "
        "`ledger_total_expenses`, `ledger_total_assets`, `ledger_total_income`, "
        "`ledger_expenses_monthly`, `ledger_expense_by_payee`."
    ),
    response_description="Prometheus exposition text.",
    responses={200: {"description": "Current metrics.", "content": {CONTENT_TYPE_LATEST: {}}}},
)
async def metrics(registry: CollectorRegistry = Depends(get_registry)) -> Response:
    """Render all gauges from the current snapshot."""
    return Response(content=generate_latest(registry), media_type=CONTENT_TYPE_LATEST)


@router.get(
    "/snapshot",
    response_model=SnapshotView,
    summary="Current snapshot as JSON",
    description=(
        "Return the most recently published snapshot: its capture time, the reports that failed "
        "during that cycle and every gauge family as a list of labelled values."
    ),
    response_description="Snapshot view.",
    responses={
        200: {
            "description": "Snapshot found.",
            "content": {
                "application/json": {
                    "example": {
                        "captured_at": "2024-04-10T12:00:00+02:00",
                        "failed_reports": [],
                        "families": {
                            "ledger_total_expenses": [{"labels": {"currency": "EUR"}, "value": 120.0}],
                        },
                    }
                }
            },
        },
    },
)
async def snapshot(store: SnapshotStore = Depends(get_store)) -> SnapshotView:
    """Return the current snapshot in JSON form."""
    current = store.current()
    families = {
        family.name: [
            MetricSample(labels=dict(zip(family.labels, labels, strict=True)), value=value)
            for labels, value in samples.items()
        ]
        for family, samples in current.families().items()
    }
    return SnapshotView(
        captured_at=current.captured_at.isoformat(),
        failed_reports=[str(kind) for kind in current.failed_reports],
        families=families,
    )


@router.get(
    "/health",
    summary="Health check",
    description="Simple health check endpoint. Returns status ok.",
    response_description="Status ok.",
    responses={200: {"description": "API is healthy.", "content": {"application/json": {"example": {"status": "ok"}}}}},
)
async def health() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}
